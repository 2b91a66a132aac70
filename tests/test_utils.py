# -*- coding: utf-8 -*-
"""Tests for bsplinefit.utils.

Created on October 18, 2026

"""

import numpy as np
import pytest

from bsplinefit import utils


@pytest.mark.parametrize('error, parents', (
    (utils.InvalidConfigError, (ValueError,)),
    (utils.SplineBuildError, (Exception,)),
    (utils.InsufficientDataError, (utils.SplineBuildError, ValueError)),
    (utils.SolveFailureError, (utils.SplineBuildError, np.linalg.LinAlgError)),
    (utils.ParameterWarning, (UserWarning,)),
))
def test_error_hierarchy(error, parents):
    """Ensures the errors can be caught by their parent classes."""
    for parent in parents:
        assert issubclass(error, parent)
        with pytest.raises(parent):
            raise error('message')


def test_min_float():
    """Ensures _MIN_FLOAT is the smallest value that changes 1 when added."""
    assert 1 + utils._MIN_FLOAT != 1
    assert 1 + utils._MIN_FLOAT / 2 == 1
