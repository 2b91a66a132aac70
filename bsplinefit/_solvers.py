# -*- coding: utf-8 -*-
"""Functions for setting up and solving the linear systems for spline coefficients.

Created on October 18, 2026

"""

import warnings

import numpy as np
from scipy.linalg import LinAlgError, inv, lstsq
from scipy.sparse import issparse
from scipy.sparse.linalg import splu

from . import config
from ._compat import identity
from ._penalty_utils import weight_matrix
from .utils import _MIN_FLOAT, ParameterWarning, SolveFailureError


def _to_dense(matrix):
    """Converts a sparse matrix or array-like into a dense numpy array."""
    if issparse(matrix):
        return matrix.toarray()
    return np.asarray(matrix, dtype=float)


def _dense_solve(lhs, rhs):
    """
    Solves ``lhs @ x = rhs`` in the least squares sense using a dense solver.

    Parameters
    ----------
    lhs : numpy.ndarray or scipy.sparse.spmatrix or scipy.sparse._sparray, shape (M, N)
        The left hand side of the equation. Does not need to be square.
    rhs : numpy.ndarray, shape (M,)
        The right hand side of the equation.

    Returns
    -------
    solution : numpy.ndarray, shape (N,)
        The solution, `x`.

    Raises
    ------
    SolveFailureError
        Raised if the solver fails or gives non-finite values.

    Notes
    -----
    A ParameterWarning is emitted if the system is rank deficient, in which case
    the minimum norm solution is returned.

    """
    lhs = _to_dense(lhs)
    try:
        solution, _, rank, _ = lstsq(lhs, rhs)
    except (LinAlgError, ValueError) as err:
        # ValueError is raised by scipy for non-finite inputs
        raise SolveFailureError('failed to solve for the B-spline coefficients') from err

    if not np.all(np.isfinite(solution)):
        raise SolveFailureError('solving for the B-spline coefficients gave non-finite values')
    elif rank < lhs.shape[1]:
        warnings.warn(
            (f'the linear system is rank deficient (rank {rank} for {lhs.shape[1]} '
             'coefficients); the minimum norm solution was used'),
            ParameterWarning, stacklevel=2
        )

    return solution


def _sparse_solve(lhs, rhs):
    """
    Solves ``lhs @ x = rhs`` using a sparse LU factorization.

    Parameters
    ----------
    lhs : scipy.sparse.spmatrix or scipy.sparse._sparray, shape (N, N)
        The left hand side of the equation.
    rhs : numpy.ndarray, shape (N,)
        The right hand side of the equation.

    Returns
    -------
    solution : numpy.ndarray, shape (N,) or None
        The solution, `x`. Is None if the system is not square, the factorization
        failed, or the solution contains non-finite values.

    """
    if lhs.shape[0] != lhs.shape[1]:
        return None
    try:
        solution = splu(lhs.tocsc()).solve(np.asarray(rhs, dtype=float))
    except RuntimeError:
        # raised by SuperLU if the matrix is exactly singular
        return None

    if not np.all(np.isfinite(solution)):
        return None
    return solution


def solve_system(lhs, rhs):
    """
    Solves the linear system for the spline coefficients.

    Systems with less than :data:`.config.DENSE_SOLVE_LIMIT` equations are solved
    with a dense solver. Larger systems are first solved with a sparse solver, and
    the dense solver is used if the sparse solve fails.

    Parameters
    ----------
    lhs : scipy.sparse.spmatrix or scipy.sparse._sparray, shape (M, N)
        The left hand side of the equation.
    rhs : numpy.ndarray, shape (M,)
        The right hand side of the equation.

    Returns
    -------
    solution : numpy.ndarray, shape (N,)
        The solution of the system.
    solver : {'dense', 'sparse'}
        The solver that gave the solution.

    Raises
    ------
    SolveFailureError
        Raised if the dense solver fails.

    """
    if lhs.shape[0] >= config.DENSE_SOLVE_LIMIT:
        solution = _sparse_solve(lhs, rhs)
        if solution is not None:
            return solution, 'sparse'

    return _dense_solve(lhs, rhs), 'dense'


def hfs_smoothing(basis, y, btwb, rhs, penalty, lam, hfs_iters=0, num_variables=1):
    """
    Refines the smoothing parameter using Harville-Fellner-Schall (HFS) iterations.

    Each iteration solves the penalized system with the current smoothing parameter,
    `lam`, and then updates it using the estimated variances of the residuals and of
    the penalized coefficient differences.

    Parameters
    ----------
    basis : scipy.sparse.spmatrix or scipy.sparse._sparray, shape (M, N)
        The spline basis matrix, `B`.
    y : numpy.ndarray, shape (M,)
        The sample responses.
    btwb : scipy.sparse.spmatrix or scipy.sparse._sparray, shape (N, N)
        The product ``B.T @ W @ B``, where `W` is the weight matrix.
    rhs : numpy.ndarray, shape (N,)
        The product ``B.T @ W @ y``.
    penalty : scipy.sparse.spmatrix or scipy.sparse._sparray, shape (R, N)
        The finite difference matrix, `D`.
    lam : float
        The initial smoothing parameter.
    hfs_iters : int, optional
        The number of iterations. Default is 0, which leaves `lam` unchanged.
    num_variables : int, optional
        The number of variables of the spline, `d`. Default is 1.

    Returns
    -------
    lam : float
        The smoothing parameter after the last iteration.
    params : dict
        A dictionary with the following items:

        * 'lam_history': numpy.ndarray, shape (`hfs_iters`,)
            The smoothing parameter computed by each iteration.
        * 'effective_dimension': numpy.ndarray, shape (`hfs_iters`,)
            The effective dimension, ``ED = trace((B.T @ W @ B + lam * D.T @ D)^-1 @ B.T @ W @ B)``,
            of each iteration.
        * 'tau_squared': numpy.ndarray, shape (`hfs_iters`,)
            The variance of the coefficient differences, ``||D @ c||^2 / ED``, of
            each iteration.
        * 'sigma_squared': numpy.ndarray, shape (`hfs_iters`,)
            The variance of the residuals, ``||y - B @ c||^2 / (M - d - ED)``, of
            each iteration.

    Raises
    ------
    SolveFailureError
        Raised if the system cannot be inverted.

    Notes
    -----
    Exactly `hfs_iters` iterations are done; there is no convergence check.

    Uses ``tau^2 = ||D @ c||^2 / ED`` and ``sigma^2 = ||y - B @ c||^2 / (M - d - ED)``
    rather than the ``tau^2 = ||D @ c||^2 / (ED - d)`` and ``sigma^2 = ||y - B @ c||^2 / (M - ED)``
    variant given in Eilers and Marx's book.

    References
    ----------
    Eilers, P., et al. Practical Smoothing: The Joys of P-splines. Cambridge University
    Press, 2021. Chapter 3.4.

    Schall, R. Estimation in generalized linear models with random effects. Biometrika,
    1991, 78(4), 719-727.

    """
    btwb_dense = _to_dense(btwb)
    penalty_product = penalty.T @ penalty
    num_samples = len(y)

    lam_history = np.empty(hfs_iters)
    effective_dimensions = np.empty(hfs_iters)
    tau_history = np.empty(hfs_iters)
    sigma_history = np.empty(hfs_iters)
    for i in range(hfs_iters):
        try:
            lhs_inverse = inv(_to_dense(btwb + lam * penalty_product))
        except (LinAlgError, ValueError) as err:
            raise SolveFailureError(
                f'could not invert the penalized system in HFS iteration {i}'
            ) from err
        # trace(A @ B) == sum(A * B.T) without computing the full product
        effective_dimension = max(np.sum(lhs_inverse * btwb_dense.T), _MIN_FLOAT)
        coef = lhs_inverse @ rhs

        penalty_norm = np.sum((penalty @ coef)**2)
        if penalty_norm <= 0:
            warnings.warn(
                ('the coefficient differences are all zero, so the smoothing parameter '
                 'estimate is unbounded'),
                ParameterWarning, stacklevel=2
            )
        tau_squared = max(penalty_norm / effective_dimension, _MIN_FLOAT)

        residual_dof = num_samples - num_variables - effective_dimension
        if residual_dof <= 0:
            warnings.warn(
                ('the effective dimension is too large for the number of samples; '
                 'the residual variance estimate is unreliable'),
                ParameterWarning, stacklevel=2
            )
            residual_dof = _MIN_FLOAT
        sigma_squared = np.sum((y - basis @ coef)**2) / residual_dof

        lam = sigma_squared / tau_squared

        lam_history[i] = lam
        effective_dimensions[i] = effective_dimension
        tau_history[i] = tau_squared
        sigma_history[i] = sigma_squared

    params = {
        'lam_history': lam_history, 'effective_dimension': effective_dimensions,
        'tau_squared': tau_history, 'sigma_squared': sigma_history
    }

    return lam, params


def solve_coefficients(basis, y, smoothing='none', alpha=0.1, penalty=None, weights=None,
                       hfs_iters=0, num_variables=1):
    """
    Solves for the coefficients of a spline given its basis matrix and the sample responses.

    Finds the coefficients, `c`, that minimize ``||B @ c - y||^2 + R(c)``, where `B` is
    the basis matrix, `y` are the responses, and `R` is the regularization given by
    `smoothing`.

    Parameters
    ----------
    basis : scipy.sparse.spmatrix or scipy.sparse._sparray, shape (M, N)
        The spline basis matrix, `B`.
    y : numpy.ndarray, shape (M,)
        The sample responses.
    smoothing : {'none', 'identity', 'pspline'}, optional
        The type of smoothing. 'none' (default) solves ``B @ c = y`` directly. 'identity'
        solves the ridge regression ``(B.T @ B + alpha * I) @ c = B.T @ y``. 'pspline'
        solves ``(B.T @ W @ B + lam * D.T @ D) @ c = B.T @ W @ y``, where `W` is the weight
        matrix and `D` is the difference matrix, `penalty`.
    alpha : float, optional
        The regularization parameter for 'identity' smoothing, or the initial smoothing
        parameter, `lam`, for 'pspline' smoothing. Default is 0.1.
    penalty : scipy.sparse.spmatrix or scipy.sparse._sparray, shape (R, N), optional
        The finite difference matrix, `D`. Required for 'pspline' smoothing.
    weights : array-like, shape (M,), optional
        The weight of each sample for 'pspline' smoothing. Default is None, which
        uses a weight of 1 for every sample.
    hfs_iters : int, optional
        The number of HFS iterations used to refine the smoothing parameter for
        'pspline' smoothing. Default is 0.
    num_variables : int, optional
        The number of variables of the spline. Default is 1.

    Returns
    -------
    coefficients : numpy.ndarray, shape (N,)
        The spline coefficients.
    params : dict
        A dictionary with the following items:

        * 'lam': float or None
            The regularization parameter used for the final solve. Is None for
            'none' smoothing.
        * 'solver': str
            The solver used for the final solve, either 'dense' or 'sparse'.

        Additional items are only included for 'pspline' smoothing:

        * 'lam_history': numpy.ndarray, shape (`hfs_iters`,)
            The smoothing parameter computed by each HFS iteration.
        * 'effective_dimension': numpy.ndarray, shape (`hfs_iters`,)
            The effective dimension of each HFS iteration.
        * 'tau_squared': numpy.ndarray, shape (`hfs_iters`,)
            The variance of the coefficient differences of each HFS iteration.
        * 'sigma_squared': numpy.ndarray, shape (`hfs_iters`,)
            The variance of the residuals of each HFS iteration.

    Raises
    ------
    ValueError
        Raised if `smoothing` is unknown or if `penalty` is not given for 'pspline'
        smoothing.
    SolveFailureError
        Raised if the system could not be solved.

    """
    y = np.asarray(y, dtype=float)
    params = {}
    if smoothing == 'none':
        lhs = basis
        rhs = y
        lam = None
    elif smoothing == 'identity':
        # Tikhonov regularization (ridge regression) with the identity matrix
        basis_t = basis.T
        lhs = basis_t @ basis + alpha * identity(basis.shape[1], format='csr')
        rhs = basis_t @ y
        lam = alpha
    elif smoothing == 'pspline':
        if penalty is None:
            raise ValueError('a difference matrix is required for pspline smoothing')
        btw = basis.T @ weight_matrix(basis.shape[0], weights)
        btwb = btw @ basis
        rhs = btw @ y
        lam, params = hfs_smoothing(
            basis, y, btwb, rhs, penalty, alpha, hfs_iters, num_variables
        )
        lhs = btwb + lam * (penalty.T @ penalty)
    else:
        raise ValueError(f'unknown smoothing "{smoothing}"')

    coefficients, solver = solve_system(lhs, rhs)
    params.update({'lam': lam, 'solver': solver})

    return coefficients, params
