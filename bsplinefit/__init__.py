# -*- coding: utf-8 -*-
"""
==========================================================================
bsplinefit - Fitting of tensor-product B-splines to multivariate samples.
==========================================================================

bsplinefit builds knot vectors from sampled data, assembles the sparse basis and
penalty matrices, and solves for the spline coefficients, optionally with ridge or
P-spline smoothing.

Created on October 18, 2026

"""

__version__ = '0.1.0'

# import utils first since it is imported by other modules; likewise, import
# builder last since it imports the other modules
from . import utils, config, datatable, bspline, builder

from .bspline import BSpline
from .builder import Builder, KnotSpacing, Smoothing
from .datatable import DataTable
