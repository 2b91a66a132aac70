# -*- coding: utf-8 -*-
"""Helper functions for creating the penalty and weight matrices of penalized splines.

Created on October 18, 2026

"""

import numpy as np

from ._compat import coo_object, diags, identity
from .utils import InsufficientDataError


def second_order_difference_matrix(num_bases, diff_format='csr'):
    """
    Creates the second order finite-difference matrix for a tensor-product coefficient grid.

    Parameters
    ----------
    num_bases : Sequence[int]
        The number of basis functions (coefficients) along each of the `D` variables of
        the coefficient grid, with the coefficients of the last variable changing fastest.
    diff_format : str or None, optional
        The sparse format of the output. Default is 'csr'.

    Returns
    -------
    scipy.sparse.spmatrix or scipy.sparse._sparray
        The sparse difference matrix, with shape (`R`, ``prod(num_bases)``). The rows are
        made of one block per variable; each block contains the second differences along
        that variable for every fixed combination of the other variables, so the block for
        variable `d` has ``(num_bases[d] - 2) * prod(num_bases) / num_bases[d]`` rows.

    Raises
    ------
    InsufficientDataError
        Raised if any variable has less than three basis functions.

    Notes
    -----
    The variables are handled in reverse order so that the first block is for the fastest
    changing variable of the coefficient grid, which has a stride of 1. Each row has the
    values 1, -2, and 1 at three columns spaced by the stride of the block's variable. The
    block for the reversed variable `d` is equivalent to
    ``kron(identity(right_prod), kron(D, identity(left_prod)))``, where `D` is the
    ``(dims[d] - 2, dims[d])`` second order difference matrix and `left_prod` and
    `right_prod` are the products of the reversed grid sizes before and after `d`,
    respectively.

    References
    ----------
    Eilers, P., et al. Fast and compact smoothing on large multidimensional grids. Computational
    Statistics and Data Analysis, 2006, 50(1), 61-76.

    """
    dims = np.asarray(num_bases, dtype=np.intp)[::-1]
    if np.any(dims < 3):
        raise InsufficientDataError(
            'need at least three basis functions for each variable to create the '
            'second order difference penalty'
        )
    num_columns = int(np.prod(dims))
    stencil = np.array([1., -2., 1.])

    rows = []
    columns = []
    row_offset = 0
    for d, dim in enumerate(dims):
        left_prod = int(np.prod(dims[:d]))
        right_prod = int(np.prod(dims[d + 1:]))
        # start column of each row for every (fixed outer index, offset along d,
        # fixed inner index); the row order follows the same nesting
        starts = (
            np.arange(right_prod)[:, None, None] * (left_prod * dim)
            + np.arange(dim - 2)[None, :, None] * left_prod
            + np.arange(left_prod)[None, None, :]
        ).ravel()
        num_block_rows = len(starts)

        rows.append(np.repeat(np.arange(row_offset, row_offset + num_block_rows), 3))
        columns.append((starts[:, None] + np.arange(3) * left_prod).ravel())
        row_offset += num_block_rows

    values = np.tile(stencil, row_offset)

    return coo_object(
        (values, (np.concatenate(rows), np.concatenate(columns))),
        shape=(row_offset, num_columns)
    ).asformat(diff_format)


def weight_matrix(num_samples, weights=None):
    """
    Creates the diagonal weight matrix for the samples.

    Parameters
    ----------
    num_samples : int
        The number of samples.
    weights : array-like, shape (`num_samples`,), optional
        The weight of each sample. Default is None, which gives every sample a
        weight of 1.

    Returns
    -------
    scipy.sparse.spmatrix or scipy.sparse._sparray, shape (`num_samples`, `num_samples`)
        The sparse diagonal weight matrix.

    Notes
    -----
    The length of `weights` is validated when they are set on the builder, so it
    is not checked here.

    """
    if weights is None:
        return identity(num_samples, format='dia')
    return diags(np.asarray(weights, dtype=float), 0, shape=(num_samples, num_samples))
