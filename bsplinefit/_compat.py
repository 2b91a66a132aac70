# -*- coding: utf-8 -*-
"""Code to help handle changes within dependency versions.

Created on October 18, 2026

"""

from functools import lru_cache

import scipy
from scipy import sparse


@lru_cache(maxsize=1)
def _use_sparse_arrays():
    """
    Checks that the installed scipy version is new enough to use sparse arrays.

    This check is wrapped into a function just in case it fails so that bsplinefit
    can still be imported without error. The result is cached so it only has to
    be done once.

    Returns
    -------
    bool
        True if the installed scipy version is above 1.12; False otherwise.

    Notes
    -----
    Scipy introduced its sparse arrays in version 1.8, but the interface and helper
    functions were not stable until version 1.12; a warning will be emitted in scipy
    1.13 when using the matrix interface, so want to use the sparse array interface
    as early as possible.

    """
    try:
        _scipy_version = [int(val) for val in scipy.__version__.lstrip('v').split('.')[:2]]
    except Exception:
        # in case in the far future scipy stops using semantic versioning; probably
        # bigger problems than this check at that point so just return True
        return True

    return _scipy_version[0] > 1 or (_scipy_version[0] == 1 and _scipy_version[1] >= 12)


def csr_object(*args, **kwargs):
    """
    Handles creation of a sparse csr object.

    Parameters
    ----------
    *args
        Any arguments to pass to the creation functions.
    **kwargs
        Additional keyword arguments to pass to the creation functions.

    Returns
    -------
    scipy.sparse.csr_matrix or scipy.sparse.csr_array
        A sparse csr matrix if the intalled scipy version is older than 1.12,
        otherwise a sparse csr array.

    """
    if _use_sparse_arrays():
        return sparse.csr_array(*args, **kwargs)
    else:
        return sparse.csr_matrix(*args, **kwargs)


def coo_object(*args, **kwargs):
    """
    Handles creation of a sparse coordinate (COO) object.

    Parameters
    ----------
    *args
        Any arguments to pass to the creation functions.
    **kwargs
        Additional keyword arguments to pass to the creation functions.

    Returns
    -------
    scipy.sparse.coo_matrix or scipy.sparse.coo_array
        A sparse coo matrix if the intalled scipy version is older than 1.12,
        otherwise a sparse coo array.

    """
    if _use_sparse_arrays():
        return sparse.coo_array(*args, **kwargs)
    else:
        return sparse.coo_matrix(*args, **kwargs)


def identity(size, format=None, **kwargs):
    """
    Handles creation of a sparse square identity matrix.

    Parameters
    ----------
    size : int
        The length of the rows and columns of the sparse matrix.
    format : str, optional
        The sparse format to use for the identiy matrix. Default is None, which
        will use the default of the underlying functions.
    **kwargs
        Additional keyword arguments to pass to the creation functions.

    Returns
    -------
    scipy.sparse.spmatrix or scipy.sparse._sparray
        The sparse identity matrix.

    """
    if _use_sparse_arrays():
        return sparse.eye_array(size, size, format=format, **kwargs)
    else:
        return sparse.identity(size, format=format, **kwargs)


def diags(data, offsets=0, **kwargs):
    """
    Handles creation of a sparse diagonal matrix.

    Parameters
    ----------
    data : array-like
        The data to be put in the diagonals.
    offsets : int or Sequence[int], optional
        The offsets for `data`. Default is 0, which is the main diagonal.
    **kwargs
        Additional keyword arguments to pass to the creation functions.

    Returns
    -------
    scipy.sparse.spmatrix or scipy.sparse._sparray
        The sparse diagonal matrix.

    """
    if _use_sparse_arrays():
        return sparse.diags_array(data, offsets=offsets, **kwargs)
    else:
        return sparse.diags(data, offsets=offsets, **kwargs)
