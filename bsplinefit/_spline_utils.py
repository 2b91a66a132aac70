# -*- coding: utf-8 -*-
"""Helper functions for creating knot vectors and basis matrices for splines.

Created on October 18, 2026

"""

import numpy as np

from . import config
from ._compat import csr_object
from .utils import InsufficientDataError


def _unique_sorted(values):
    """
    Sorts values and removes duplicates.

    Parameters
    ----------
    values : array-like, shape (N,)
        The values to sort.

    Returns
    -------
    numpy.ndarray, shape (M,)
        The strictly increasing unique values, with ``M <= N``.

    """
    return np.unique(np.asarray(values, dtype=float).reshape(-1))


def _check_num_values(num_values, spline_degree, text='unique sample values'):
    """
    Ensures enough values are available to create a knot vector.

    Parameters
    ----------
    num_values : int
        The number of available values.
    spline_degree : int
        The degree of the spline.
    text : str, optional
        The description of the values used in the error message. Default is
        'unique sample values'.

    Raises
    ------
    InsufficientDataError
        Raised if `num_values` is less than ``spline_degree + 1`` or less than 2,
        since at least two distinct values are needed to span a domain.

    """
    min_values = max(spline_degree + 1, 2)
    if num_values < min_values:
        raise InsufficientDataError((
            f'only {num_values} {text} are given; a minimum of {min_values} are required '
            f'to build a B-spline basis of degree {spline_degree}'
        ))


def _check_knots(knots, spline_degree):
    """
    Ensures a computed knot vector is non-decreasing and clamped.

    Parameters
    ----------
    knots : numpy.ndarray, shape (K,)
        The knot vector.
    spline_degree : int
        The degree of the spline.

    Returns
    -------
    knots : numpy.ndarray, shape (K,)
        The input knot vector.

    Raises
    ------
    RuntimeError
        Raised if the knot vector is decreasing anywhere or if its first and last
        knots are not each repeated exactly ``spline_degree + 1`` times, which can
        only be caused by an error in the knot computation itself.

    """
    if np.any(np.diff(knots) < 0):
        raise RuntimeError('the computed knot vector is not non-decreasing')
    low_count = np.count_nonzero(knots == knots[0])
    high_count = np.count_nonzero(knots == knots[-1])
    if low_count != spline_degree + 1 or high_count != spline_degree + 1:
        raise RuntimeError((
            f'the end knots are repeated {low_count} and {high_count} times rather than '
            f'{spline_degree + 1} times'
        ))
    return knots


def _knots_moving_average(values, spline_degree):
    """
    Creates a clamped knot vector that mimics the spacing of the sample values.

    Parameters
    ----------
    values : array-like, shape (N,)
        The sample values for a single variable.
    spline_degree : int
        The degree of the spline.

    Returns
    -------
    knots : numpy.ndarray, shape (``M + spline_degree + 1``,)
        The knot vector, where `M` is the number of unique values in `values`.

    Raises
    ------
    InsufficientDataError
        Raised if there are less than ``spline_degree + 1`` unique values.

    Notes
    -----
    The ``M - spline_degree - 1`` interior knots are the moving averages of the unique
    values using a window of ``spline_degree + 2`` values, and the first and last
    unique values are each repeated ``spline_degree + 1`` times.

    For equally spaced values, the resulting knot vector is the same as the free end
    condition knot vector used for cubic interpolation, eg. (a, b, c, d, e, f) gives
    (a, a, a, a, c, d, f, f, f, f) for a degree of 3 and (a, a, b, c, d, e, f, f) for
    a degree of 1.

    """
    unique_values = _unique_sorted(values)
    num_values = len(unique_values)
    _check_num_values(num_values, spline_degree)

    removed_knots = spline_degree - 1
    window = removed_knots + 3
    num_interior = num_values - removed_knots - 2
    if num_interior > 0:
        inner_knots = np.lib.stride_tricks.sliding_window_view(
            unique_values, window
        ).mean(axis=1)
    else:
        inner_knots = np.empty(0)

    knots = np.concatenate((
        np.full(spline_degree + 1, unique_values[0]),
        inner_knots,
        np.full(spline_degree + 1, unique_values[-1])
    ))

    return _check_knots(knots, spline_degree)


def _knots_equidistant(values, spline_degree, num_basis_functions=0, bounds=None, padding=0.):
    """
    Creates a clamped knot vector with equally spaced knots.

    Parameters
    ----------
    values : array-like, shape (N,)
        The sample values for a single variable.
    spline_degree : int
        The degree of the spline.
    num_basis_functions : int, optional
        The number, `M`, used to set the number of knots. Default is 0, which uses the
        number of unique values in `values`.
    bounds : Sequence[float, float], optional
        The low and high values for the knots. A NaN value, or None (default), uses the
        minimum or maximum of `values`, respectively.
    padding : float, optional
        The fraction of ``high - low`` added to each side of the bounds. Default is 0.

    Returns
    -------
    knots : numpy.ndarray, shape (``M + spline_degree - 1``,)
        The knot vector.

    Raises
    ------
    InsufficientDataError
        Raised if `M` is less than ``spline_degree + 3`` or if the bounds span an empty
        range. ``M - spline_degree - 1`` equally spaced points are needed to include both
        bounds, so a `M` of ``spline_degree + 1`` or ``spline_degree + 2`` would give a
        knot vector whose ends are not repeated ``spline_degree + 1`` times.

    Notes
    -----
    ``M - spline_degree - 1`` equally spaced points from the low to the high bound,
    inclusive, are created, and then the low and high bounds are each repeated
    `spline_degree` additional times.

    """
    unique_values = _unique_sorted(values)
    if num_basis_functions > 0:
        num_values = num_basis_functions
        text = 'basis functions'
    else:
        num_values = len(unique_values)
        text = 'unique sample values'
    _check_num_values(num_values, spline_degree, text)

    removed_knots = spline_degree - 1
    num_interior = max(num_values - removed_knots - 2, 0)
    if num_interior < 2:
        raise InsufficientDataError((
            f'only {num_values} {text} are given; equidistant knots for a B-spline basis of '
            f'degree {spline_degree} require a minimum of {spline_degree + 3}'
        ))

    if bounds is None:
        bounds = (np.nan, np.nan)
    if np.isnan(bounds[0]) or np.isnan(bounds[1]):
        if not len(unique_values):
            raise InsufficientDataError('sample values are required to determine the bounds')
    low = unique_values[0] if np.isnan(bounds[0]) else bounds[0]
    high = unique_values[-1] if np.isnan(bounds[1]) else bounds[1]
    if low >= high:
        raise InsufficientDataError(
            f'the knot bounds must span a non-empty range but got [{low}, {high}]'
        )
    pad = (high - low) * padding
    low -= pad
    high += pad

    knots = np.concatenate((
        np.full(spline_degree, low),
        np.linspace(low, high, num_interior),
        np.full(spline_degree, high)
    ))

    return _check_knots(knots, spline_degree)


def _knots_buckets(values, spline_degree, max_segments=None):
    """
    Creates a clamped knot vector by averaging the sample values within buckets.

    Parameters
    ----------
    values : array-like, shape (N,)
        The sample values for a single variable.
    spline_degree : int
        The degree of the spline.
    max_segments : int, optional
        The maximum number of spline segments. Default is None, which uses
        :data:`.config.MAX_BUCKET_SEGMENTS`.

    Returns
    -------
    knots : numpy.ndarray
        The knot vector. Has a length of ``M + spline_degree + 1``, where `M` is the
        number of unique values in `values`, unless the number of segments was limited
        by `max_segments`, in which case the length is ``max_segments + spline_degree + 1``.
        For a degree of 0, at most ``M - 2`` interior knots are used, so the length
        is at most `M`.

    Raises
    ------
    InsufficientDataError
        Raised if there are less than ``spline_degree + 1`` unique values.

    Notes
    -----
    The unique values are split into contiguous buckets, with each interior knot being
    the mean of one bucket. The buckets all have the same size, except that the values
    left over when the number of unique values is not evenly divisible by the number
    of buckets are added one per bucket to the outermost buckets, with the extra one
    of an odd remainder going to the start. The first and last buckets therefore
    always hold at least two values, so every interior knot is strictly between the
    first and last unique values and the end knots are repeated exactly
    ``spline_degree + 1`` times.

    """
    if max_segments is None:
        max_segments = config.MAX_BUCKET_SEGMENTS
    unique_values = _unique_sorted(values)
    num_values = len(unique_values)
    _check_num_values(num_values, spline_degree)

    # the end buckets cannot hold more than num_values - 2 interior knots
    num_interior = min(num_values - spline_degree - 1, num_values - 2)
    num_segments = num_interior + spline_degree + 1
    if num_segments > max_segments and max_segments >= spline_degree + 1:
        num_segments = max_segments
        num_interior = num_segments - spline_degree - 1

    if num_interior > 0:
        window = num_values // num_interior
        residual = num_values - window * num_interior
        windows = np.full(num_interior, window)
        windows[:residual - residual // 2] += 1
        windows[num_interior - residual // 2:] += 1
        starts = np.concatenate(([0], np.cumsum(windows)[:-1]))
        inner_knots = np.add.reduceat(unique_values, starts) / windows
    else:
        inner_knots = np.empty(0)

    knots = np.concatenate((
        np.full(spline_degree + 1, unique_values[0]),
        inner_knots,
        np.full(spline_degree + 1, unique_values[-1])
    ))

    return _check_knots(knots, spline_degree)


def _compute_knot_vector(values, spline_degree, knot_spacing='as_sampled',
                         num_basis_functions=0, bounds=None, padding=0.):
    """
    Computes the knot vector for a single variable.

    Parameters
    ----------
    values : array-like, shape (N,)
        The sample values for the variable.
    spline_degree : int
        The degree of the spline.
    knot_spacing : {'as_sampled', 'equidistant', 'experimental'}, optional
        The knot placement strategy. 'as_sampled' (default) uses a moving average
        of the unique values, 'equidistant' places equally spaced knots, and
        'experimental' averages the unique values within buckets.
    num_basis_functions : int, optional
        The requested number of basis functions; only used if `knot_spacing` is
        'equidistant'. Default is 0, which uses the number of unique values.
    bounds : Sequence[float, float], optional
        The low and high bounds for the knots; only used if `knot_spacing` is
        'equidistant'. Default is None, which uses the range of `values`.
    padding : float, optional
        The fraction of the range to pad each bound; only used if `knot_spacing` is
        'equidistant'. Default is 0.

    Returns
    -------
    numpy.ndarray
        The clamped knot vector.

    Raises
    ------
    ValueError
        Raised if `knot_spacing` is not a known strategy.

    """
    if knot_spacing == 'as_sampled':
        knots = _knots_moving_average(values, spline_degree)
    elif knot_spacing == 'equidistant':
        knots = _knots_equidistant(values, spline_degree, num_basis_functions, bounds, padding)
    elif knot_spacing == 'experimental':
        knots = _knots_buckets(values, spline_degree)
    else:
        raise ValueError(f'unknown knot spacing "{knot_spacing}"')

    return knots


def _compute_knot_vectors(columns, spline_degrees, knot_spacing='as_sampled',
                          num_basis_functions=None, bounds=None, padding=0.):
    """
    Computes the knot vectors for every variable.

    Parameters
    ----------
    columns : Sequence[numpy.ndarray]
        The sample values for each of the `D` variables.
    spline_degrees : Sequence[int]
        The spline degree for each variable.
    knot_spacing : {'as_sampled', 'equidistant', 'experimental'}, optional
        The knot placement strategy used for all variables. Default is 'as_sampled'.
    num_basis_functions : Sequence[int], optional
        The requested number of basis functions for each variable. Default is None,
        which uses 0 for all variables, denoting to use the number of unique values.
    bounds : numpy.ndarray, shape (D, 2) or (0, 2), optional
        The knot bounds for each variable. Default is None, or an empty array, which
        uses the range of the sample values.
    padding : float, optional
        The fraction of the range to pad the bounds. Default is 0.

    Returns
    -------
    list[numpy.ndarray]
        The knot vector for each variable.

    Raises
    ------
    ValueError
        Raised if the number of degrees does not match the number of variables.

    """
    num_variables = len(columns)
    if len(spline_degrees) != num_variables:
        raise ValueError('inconsistent number of spline degrees and variables')
    if num_basis_functions is None:
        num_basis_functions = np.zeros(num_variables, dtype=np.intp)

    knot_vectors = []
    for i, column in enumerate(columns):
        if bounds is not None and len(bounds):
            variable_bounds = bounds[i]
        else:
            variable_bounds = (np.nan, np.nan)
        knot_vectors.append(_compute_knot_vector(
            column, spline_degrees[i], knot_spacing, num_basis_functions[i],
            variable_bounds, padding
        ))

    return knot_vectors


def _basis_matrix(bspline, data):
    """
    Assembles the sparse matrix of basis functions evaluated at each sample.

    Parameters
    ----------
    bspline : bsplinefit.bspline.BSpline
        The spline whose basis functions are evaluated.
    data : bsplinefit.datatable.DataTable
        The samples.

    Returns
    -------
    scipy.sparse.csr_matrix or scipy.sparse.csr_array, shape (N, M)
        The basis matrix, where `N` is the number of samples and `M` is the total number
        of basis functions.

    Notes
    -----
    The non-zero values of each row are collected in coordinate format and converted
    once to CSR format, rather than inserting values into a compressed matrix.

    """
    rows = []
    columns = []
    values = []
    for i, (x, _) in enumerate(data):
        basis_row = bspline.eval_basis(x)
        non_zero = basis_row.data != 0
        columns.append(basis_row.indices[non_zero])
        values.append(basis_row.data[non_zero])
        rows.append(np.full(non_zero.sum(), i, dtype=np.intp))

    if rows:
        rows = np.concatenate(rows)
        columns = np.concatenate(columns)
        values = np.concatenate(values)

    return csr_object(
        (values, (rows, columns)), shape=(data.num_samples, bspline.num_basis_functions)
    )
