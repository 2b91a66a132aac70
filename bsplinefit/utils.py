# -*- coding: utf-8 -*-
"""Exceptions, warnings, and shared constants for bsplinefit.

Created on October 18, 2026

"""

import numpy as np


# the minimum positive float values such that a + _MIN_FLOAT != a; used to keep
# the smoothing parameter estimates away from divisions by 0
_MIN_FLOAT = np.finfo(float).eps


class ParameterWarning(UserWarning):
    """
    Warning issued when a parameter value is outside of the recommended range.

    For cases where a parameter value is valid and will not cause errors, but is
    outside of the recommended range of values and as a result may cause issues
    such as numerical instability that would otherwise be hard to diagnose.
    """


class InvalidConfigError(ValueError):
    """
    Raised when a builder setting is rejected.

    The setting that raised the error is left unchanged.
    """


class SplineBuildError(Exception):
    """Base class for all errors raised while building a spline."""


class InsufficientDataError(SplineBuildError, ValueError):
    """
    Raised when the samples cannot support the requested spline.

    Examples are too few unique coordinate values in a dimension for the spline
    degree, too few basis functions to create the difference penalty, or samples
    that do not form a complete grid.
    """


class SolveFailureError(SplineBuildError, np.linalg.LinAlgError):
    """Raised when the linear system for the spline coefficients could not be solved."""
