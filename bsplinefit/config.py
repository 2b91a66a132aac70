# -*- coding: utf-8 -*-
"""Configuration settings for bsplinefit.

Created on October 18, 2026

"""

# Note: the triple quotes are for including the attributes within the documentation
ALLOW_SCATTER = False
"""Whether splines may be built from samples that do not form a complete grid.

If False (default), :meth:`.Builder.build` raises an error when the samples do not
cover every combination of the unique coordinate values in each dimension. Can be
overridden per builder with the `allow_scatter` argument of :class:`.Builder`.

"""

DENSE_SOLVE_LIMIT = 100
"""The number of equations below which the coefficients are solved with a dense solver.

Systems with at least this many equations are first solved with a sparse LU
factorization, falling back to the dense solver if the sparse solve fails.

"""

MAX_BUCKET_SEGMENTS = 10
"""The maximum number of spline segments for the experimental (bucket) knot spacing."""
