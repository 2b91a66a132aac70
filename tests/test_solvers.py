# -*- coding: utf-8 -*-
"""Tests for bsplinefit._solvers.

Created on October 18, 2026

"""

from unittest import mock

import numpy as np
from numpy.testing import assert_allclose, assert_array_equal
import pytest
from scipy.linalg import LinAlgError

from bsplinefit import _solvers, config
from bsplinefit._compat import csr_object, identity
from bsplinefit._penalty_utils import second_order_difference_matrix
from bsplinefit._spline_utils import _knots_equidistant
from bsplinefit.bspline import BSpline
from bsplinefit.utils import ParameterWarning, SolveFailureError


@pytest.fixture
def penalized_system():
    """The basis matrix, responses, and penalty for a noisy one dimensional fit."""
    x = np.linspace(0, 10, 60)
    y = np.sin(x) + np.random.default_rng(0).normal(0, 0.2, x.shape)
    # 17 values gives 15 basis functions for equidistant knots
    spline = BSpline([_knots_equidistant(x, 3, 17)], 3)
    basis = spline.basis_matrix(x.reshape(-1, 1))
    penalty = second_order_difference_matrix(spline.num_basis_functions_per_variable)
    return basis, y, penalty


def _reference_hfs(basis, y, penalty, lam, hfs_iters, weights=None, num_variables=1):
    """A dense, straightforward version of the HFS iterations."""
    B = basis.toarray()
    D = penalty.toarray()
    if weights is None:
        weights = np.ones(len(y))
    W = np.diag(weights)
    btwb = B.T @ W @ B
    btwy = B.T @ W @ y
    lam_history = []
    for _ in range(hfs_iters):
        lhs_inverse = np.linalg.inv(btwb + lam * D.T @ D)
        effective_dimension = np.trace(lhs_inverse @ btwb)
        coef = lhs_inverse @ btwy
        tau_squared = np.sum((D @ coef)**2) / effective_dimension
        sigma_squared = np.sum((y - B @ coef)**2) / (len(y) - num_variables - effective_dimension)
        lam = sigma_squared / tau_squared
        lam_history.append(lam)

    coef = np.linalg.solve(btwb + lam * D.T @ D, btwy)
    return coef, lam, lam_history


def test_solve_system_dense():
    """Ensures small systems are solved with the dense solver."""
    size = config.DENSE_SOLVE_LIMIT - 1
    lhs = csr_object(np.diag(np.arange(1., size + 1)))
    rhs = np.ones(size)
    output, solver = _solvers.solve_system(lhs, rhs)

    assert solver == 'dense'
    assert_allclose(output, 1 / np.arange(1., size + 1), rtol=1e-12, atol=1e-12)


def test_solve_system_sparse():
    """Ensures large systems are solved with the sparse solver."""
    size = config.DENSE_SOLVE_LIMIT
    lhs = csr_object(np.diag(np.arange(1., size + 1)))
    rhs = np.ones(size)
    output, solver = _solvers.solve_system(lhs, rhs)

    assert solver == 'sparse'
    assert_allclose(output, 1 / np.arange(1., size + 1), rtol=1e-12, atol=1e-12)


def test_solve_system_limit():
    """Ensures the dense solve limit can be changed."""
    lhs = csr_object(np.diag(np.arange(1., 11)))
    with mock.patch.object(config, 'DENSE_SOLVE_LIMIT', 5):
        _, solver = _solvers.solve_system(lhs, np.ones(10))

    assert solver == 'sparse'


def test_solve_system_non_square_fallback():
    """Ensures large non-square systems use the dense least squares solver."""
    rng = np.random.default_rng(0)
    lhs = rng.normal(0, 1, (config.DENSE_SOLVE_LIMIT + 50, 10))
    rhs = rng.normal(0, 1, config.DENSE_SOLVE_LIMIT + 50)
    output, solver = _solvers.solve_system(csr_object(lhs), rhs)

    assert solver == 'dense'
    assert_allclose(output, np.linalg.lstsq(lhs, rhs, rcond=None)[0], rtol=1e-10, atol=1e-10)


def test_solve_system_singular_fallback():
    """Ensures a singular sparse system falls back to the dense solver."""
    size = config.DENSE_SOLVE_LIMIT + 20
    lhs = np.eye(size)
    lhs[5, 5] = 0
    rhs = np.ones(size)
    with pytest.warns(ParameterWarning):
        output, solver = _solvers.solve_system(csr_object(lhs), rhs)

    expected = np.ones(size)
    expected[5] = 0
    assert solver == 'dense'
    assert_allclose(output, expected, rtol=1e-12, atol=1e-12)


def test_solve_system_sparse_failure_fallback():
    """Ensures a failure within the sparse factorization falls back to the dense solver."""
    size = config.DENSE_SOLVE_LIMIT
    lhs = identity(size, format='csr')
    with mock.patch.object(_solvers, 'splu', side_effect=RuntimeError('exactly singular')):
        output, solver = _solvers.solve_system(lhs, np.ones(size))

    assert solver == 'dense'
    assert_allclose(output, np.ones(size), rtol=1e-12, atol=1e-12)


def test_solve_system_dense_failure():
    """Ensures a failure of the dense solver raises a SolveFailureError."""
    lhs = identity(10, format='csr')
    with mock.patch.object(_solvers, 'lstsq', side_effect=LinAlgError('did not converge')):
        with pytest.raises(SolveFailureError):
            _solvers.solve_system(lhs, np.ones(10))


def test_solve_system_non_finite_fails():
    """Ensures non-finite values in the system raise a SolveFailureError."""
    lhs = np.eye(10)
    lhs[2, 2] = np.nan
    with pytest.raises(SolveFailureError):
        _solvers.solve_system(csr_object(lhs), np.ones(10))


def test_solve_failure_is_linalg_error():
    """Ensures SolveFailureError can be caught as a numpy LinAlgError."""
    lhs = identity(10, format='csr')
    with mock.patch.object(_solvers, 'lstsq', side_effect=LinAlgError('did not converge')):
        with pytest.raises(np.linalg.LinAlgError):
            _solvers.solve_system(lhs, np.ones(10))


def test_rank_deficient_warns():
    """Ensures a rank deficient dense system emits a warning and gives the minimum norm solution."""
    lhs = np.array([[1., 1.], [1., 1.], [1., 1.]])
    with pytest.warns(ParameterWarning):
        output, solver = _solvers.solve_system(csr_object(lhs), np.array([2., 2., 2.]))

    assert solver == 'dense'
    assert_allclose(output, [1., 1.], rtol=1e-12, atol=1e-12)


def test_solve_coefficients_none():
    """Ensures no smoothing solves the basis system directly."""
    knots = np.array([0., 0., 0., 0., 2., 3., 4., 6., 6., 6., 6.])
    x = np.arange(7.)
    spline = BSpline([knots], 3)
    basis = spline.basis_matrix(x.reshape(-1, 1))
    y = x**3 - 2 * x

    coefficients, params = _solvers.solve_coefficients(basis, y, 'none')

    assert params['lam'] is None
    assert params['solver'] == 'dense'
    assert_allclose(basis @ coefficients, y, rtol=1e-10, atol=1e-10)


def test_solve_coefficients_identity(penalized_system):
    """Ensures identity smoothing solves the ridge regression system."""
    basis, y, _ = penalized_system
    alpha = 0.5
    coefficients, params = _solvers.solve_coefficients(basis, y, 'identity', alpha)

    B = basis.toarray()
    expected = np.linalg.solve(B.T @ B + alpha * np.eye(B.shape[1]), B.T @ y)
    assert_allclose(coefficients, expected, rtol=1e-10, atol=1e-10)
    assert params['lam'] == alpha
    assert 'lam_history' not in params


def test_ridge_norm_decreases(penalized_system):
    """Ensures increasing alpha does not increase the norm of the coefficients."""
    basis, y, _ = penalized_system
    norms = []
    for alpha in (0, 1e-3, 1e-2, 1e-1, 1, 10, 100, 1e4):
        coefficients, _ = _solvers.solve_coefficients(basis, y, 'identity', alpha)
        norms.append(np.linalg.norm(coefficients))

    assert np.all(np.diff(norms) <= 1e-12)


def test_solve_coefficients_pspline_no_iterations(penalized_system):
    """Ensures no HFS iterations uses alpha as the smoothing parameter."""
    basis, y, penalty = penalized_system
    alpha = 2.
    coefficients, params = _solvers.solve_coefficients(
        basis, y, 'pspline', alpha, penalty, hfs_iters=0
    )

    expected, _, _ = _reference_hfs(basis, y, penalty, alpha, 0)
    assert params['lam'] == alpha
    assert params['lam_history'].shape == (0,)
    assert_allclose(coefficients, expected, rtol=1e-10, atol=1e-10)


@pytest.mark.parametrize('hfs_iters', (1, 2, 5))
def test_solve_coefficients_pspline_hfs(penalized_system, hfs_iters):
    """Ensures the smoothing parameter is updated exactly hfs_iters times."""
    basis, y, penalty = penalized_system
    alpha = 1.
    coefficients, params = _solvers.solve_coefficients(
        basis, y, 'pspline', alpha, penalty, hfs_iters=hfs_iters
    )

    expected_coef, expected_lam, expected_history = _reference_hfs(
        basis, y, penalty, alpha, hfs_iters
    )
    for key in ('lam_history', 'effective_dimension', 'tau_squared', 'sigma_squared'):
        assert params[key].shape == (hfs_iters,)
    assert_allclose(params['lam_history'], expected_history, rtol=1e-8)
    assert_allclose(params['lam'], expected_lam, rtol=1e-8)
    assert params['lam'] == params['lam_history'][-1]
    assert_allclose(coefficients, expected_coef, rtol=1e-7, atol=1e-9)
    assert np.all(params['effective_dimension'] > 0)
    assert np.all(params['effective_dimension'] <= basis.shape[1])


def test_hfs_each_round_uses_previous_lam(penalized_system):
    """Ensures each HFS round continues from the smoothing parameter of the previous round."""
    basis, y, penalty = penalized_system
    _, params_two = _solvers.solve_coefficients(basis, y, 'pspline', 1., penalty, hfs_iters=2)
    _, params_one = _solvers.solve_coefficients(
        basis, y, 'pspline', params_two['lam_history'][0], penalty, hfs_iters=1
    )

    assert_allclose(params_one['lam'], params_two['lam'], rtol=1e-10)


def test_hfs_multivariate_dof(penalized_system):
    """Ensures the number of variables is subtracted from the residual degrees of freedom."""
    basis, y, penalty = penalized_system
    _, params = _solvers.solve_coefficients(
        basis, y, 'pspline', 1., penalty, hfs_iters=1, num_variables=3
    )
    _, expected_lam, _ = _reference_hfs(basis, y, penalty, 1., 1, num_variables=3)

    assert_allclose(params['lam'], expected_lam, rtol=1e-8)


def test_pspline_weights(penalized_system):
    """Ensures weights are used and that zero weights remove samples from the fit."""
    basis, y, penalty = penalized_system
    weights = np.ones(len(y))
    weights[::4] = 0
    coefficients, _ = _solvers.solve_coefficients(
        basis, y, 'pspline', 1., penalty, weights=weights
    )

    mask = weights > 0
    expected, _ = _solvers.solve_coefficients(
        csr_object(basis.toarray()[mask]), y[mask], 'pspline', 1., penalty
    )
    assert_allclose(coefficients, expected, rtol=1e-10, atol=1e-10)

    weighted_expected, _, _ = _reference_hfs(basis, y, penalty, 1., 0, weights=weights)
    assert_allclose(coefficients, weighted_expected, rtol=1e-10, atol=1e-10)


def test_hfs_negative_dof_warns():
    """Ensures a warning is emitted if the effective dimension leaves no residual freedom."""
    x = np.linspace(0, 1, 12)
    spline = BSpline([np.concatenate((np.zeros(4), x[2:-2], np.ones(4)))], 3)
    basis = spline.basis_matrix(x.reshape(-1, 1))
    penalty = second_order_difference_matrix(spline.num_basis_functions_per_variable)
    y = np.sin(5 * x)

    with pytest.warns(ParameterWarning):
        _, params = _solvers.solve_coefficients(
            basis, y, 'pspline', 1e-10, penalty, hfs_iters=1
        )
    assert np.isfinite(params['lam'])


def test_hfs_zero_penalty_warns(penalized_system):
    """Ensures coefficients without second differences warn and keep lam finite."""
    basis, y, penalty = penalized_system
    with mock.patch.object(_solvers, 'inv', return_value=np.zeros((15, 15))):
        with pytest.warns(ParameterWarning):
            lam, params = _solvers.hfs_smoothing(
                basis, y, basis.T @ basis, basis.T @ y, penalty, 1., hfs_iters=1
            )

    assert np.isfinite(lam)
    assert params['tau_squared'][0] > 0


def test_hfs_inversion_failure():
    """Ensures a failed inversion within the HFS iterations raises a SolveFailureError."""
    basis = csr_object(np.eye(5))
    penalty = second_order_difference_matrix([5])
    with mock.patch.object(_solvers, 'inv', side_effect=LinAlgError('singular matrix')):
        with pytest.raises(SolveFailureError):
            _solvers.hfs_smoothing(
                basis, np.ones(5), basis.T @ basis, np.ones(5), penalty, 1., hfs_iters=1
            )


def test_pspline_requires_penalty(penalized_system):
    """Ensures pspline smoothing without a penalty raises an error."""
    basis, y, _ = penalized_system
    with pytest.raises(ValueError):
        _solvers.solve_coefficients(basis, y, 'pspline')


def test_unknown_smoothing_fails(penalized_system):
    """Ensures an unknown smoothing type raises an error."""
    basis, y, _ = penalized_system
    with pytest.raises(ValueError):
        _solvers.solve_coefficients(basis, y, 'unknown')


def test_identity_solve_is_square(penalized_system):
    """Ensures identity smoothing solves a square system with the number of basis functions."""
    basis, y, _ = penalized_system
    with mock.patch.object(_solvers, 'solve_system', wraps=_solvers.solve_system) as mock_solve:
        _solvers.solve_coefficients(basis, y, 'identity', 1.)

    lhs, rhs = mock_solve.call_args[0]
    assert lhs.shape == (basis.shape[1], basis.shape[1])
    assert_array_equal(rhs.shape, (basis.shape[1],))
