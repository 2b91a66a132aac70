# -*- coding: utf-8 -*-
"""The tensor-product B-spline representation.

Created on October 18, 2026

"""

import numpy as np
from scipy.interpolate import BSpline as _ScipyBSpline
from scipy.sparse import kron

from ._compat import csr_object
from ._validation import _check_array, _check_sized_array


def _face_splitting(basis_a, basis_b):
    """
    Performs the face-splitting product of two sparse basis matrices.

    Parameters
    ----------
    basis_a : scipy.sparse.spmatrix or scipy.sparse._sparray, shape (M, P)
        The first sparse basis matrix.
    basis_b : scipy.sparse.spmatrix or scipy.sparse._sparray, shape (M, Q)
        The second sparse basis matrix.

    Returns
    -------
    scipy.sparse.spmatrix or scipy.sparse._sparray, shape (M, ``P * Q``)
        The row-wise Kronecker product of the two matrices, such that row `i` of the
        output is ``kron(basis_a[i], basis_b[i])``.

    References
    ----------
    Eilers, P., et al. Fast and compact smoothing on large multidimensional grids. Computational
    Statistics and Data Analysis, 2006, 50(1), 61-76.

    https://en.wikipedia.org/wiki/Khatri%E2%80%93Rao_product#Face-splitting_product

    """
    ones_a = np.ones((1, basis_a.shape[1]))
    ones_b = np.ones((1, basis_b.shape[1]))
    return kron(basis_a, ones_b, format='csr').multiply(kron(ones_a, basis_b, format='csr'))


class BSpline:
    """
    A tensor-product B-spline defined by a knot vector and degree for each variable.

    The basis functions of the spline are the Kronecker products of the univariate
    basis functions of each variable, ordered such that the basis index of the last
    variable changes fastest. The coefficients follow the same ordering, so that
    ``coefficients.reshape(num_basis_functions_per_variable)`` gives the coefficient
    grid.

    Attributes
    ----------
    degrees : numpy.ndarray, shape (D,)
        The degree of the spline for each variable.
    knot_vectors : list[numpy.ndarray]
        The knot vector for each variable.
    num_variables : int
        The number of variables, `D`.
    params : dict
        Diagnostic values from computing the coefficients. Empty unless the spline was
        created by :meth:`.Builder.build`.

    """

    def __init__(self, knot_vectors, degrees, coefficients=None):
        """
        Initializes the spline from its knot vectors and degrees.

        Parameters
        ----------
        knot_vectors : Sequence[array-like]
            The non-decreasing knot vector for each variable.
        degrees : int or Sequence[int]
            The spline degree for each variable. A single value is used for every
            variable.
        coefficients : array-like, optional
            The spline coefficients. Default is None, which sets all coefficients to 1.

        Raises
        ------
        ValueError
            Raised if the number of degrees does not match the number of knot vectors,
            if any knot vector is decreasing, or if any knot vector is too short for its
            degree or spans an empty domain.

        """
        if not len(knot_vectors):
            raise ValueError('at least one knot vector is required')
        self.num_variables = len(knot_vectors)
        degrees = np.asarray(degrees, dtype=np.intp)
        if degrees.ndim == 0:
            degrees = np.full(self.num_variables, degrees)
        elif degrees.shape != (self.num_variables,):
            raise ValueError(
                f'expected {self.num_variables} degrees but got {degrees.size}'
            )
        if np.any(degrees < 0):
            raise ValueError('spline degree must be >= 0')
        self.degrees = degrees

        self.knot_vectors = []
        num_bases = []
        for knots, degree in zip(knot_vectors, degrees):
            knots = _check_array(knots, dtype=float, check_finite=True).copy()
            if np.any(np.diff(knots) < 0):
                raise ValueError('knot vectors must be non-decreasing')
            num_basis = len(knots) - degree - 1
            if num_basis < degree + 1:
                raise ValueError(
                    f'a knot vector for degree {degree} needs at least {2 * degree + 2} '
                    f'knots but got {len(knots)}'
                )
            elif knots[degree] >= knots[num_basis]:
                raise ValueError('knot vectors must span a non-empty domain')
            self.knot_vectors.append(knots)
            num_bases.append(num_basis)

        self._num_bases = np.array(num_bases, dtype=np.intp)
        self.params = {}
        if coefficients is None:
            self._coefficients = np.ones(self.num_basis_functions)
        else:
            self.coefficients = coefficients

    @property
    def num_basis_functions(self):
        """int: The total number of basis functions."""
        return int(np.prod(self._num_bases))

    @property
    def num_basis_functions_per_variable(self):
        """numpy.ndarray, shape (D,): The number of basis functions for each variable."""
        return self._num_bases.copy()

    @property
    def coefficients(self):
        """numpy.ndarray, shape (``num_basis_functions``,): The spline coefficients."""
        return self._coefficients

    @coefficients.setter
    def coefficients(self, coefficients):
        self._coefficients = _check_sized_array(
            coefficients, self.num_basis_functions, dtype=float, check_finite=True,
            name='coefficients'
        ).copy()

    @property
    def domain(self):
        """numpy.ndarray, shape (D, 2): The (low, high) range of each variable."""
        return np.array([
            [knots[degree], knots[len(knots) - degree - 1]]
            for knots, degree in zip(self.knot_vectors, self.degrees)
        ])

    @property
    def tck(self):
        """
        The knots, spline coefficients, and spline degrees to reconstruct the spline.

        Convenience function for easily reconstructing the spline with outside
        modules, such as with SciPy's `NdBSpline`.

        Notes
        -----
        To use with :class:`scipy.interpolate.NdBSpline`, the setup would look like:

            from scipy.interpolate import NdBSpline
            fit = NdBSpline(*spline.tck)(points)  # fit == spline(points)

        """
        return (
            tuple(self.knot_vectors), self.coefficients.reshape(self._num_bases),
            tuple(int(degree) for degree in self.degrees)
        )

    def _check_points(self, points):
        """
        Validates points and ensures they are within the domain of the spline.

        Parameters
        ----------
        points : array-like, shape (M, D) or (D,)
            The points to check.

        Returns
        -------
        numpy.ndarray, shape (M, D)
            The validated points.

        Raises
        ------
        ValueError
            Raised if the points do not have `D` values or are outside of the spline's domain.

        """
        points = np.asarray(points, dtype=float)
        if points.ndim < 2:
            points = points.reshape(-1, self.num_variables)
        points = _check_sized_array(
            points, self.num_variables, dtype=float, ensure_1d=False, axis=1, name='points'
        )
        domain = self.domain
        if np.any(points < domain[:, 0]) or np.any(points > domain[:, 1]):
            raise ValueError((
                'points are outside of the spline domain; the ranges for each variable '
                f'are {domain.tolist()}'
            ))
        return points

    def _univariate_basis(self, axis, x):
        """
        Creates the sparse basis matrix for a single variable.

        Parameters
        ----------
        axis : int
            The index of the variable.
        x : numpy.ndarray, shape (M,)
            The values of the variable, within the spline's domain.

        Returns
        -------
        scipy.sparse.csr_matrix or scipy.sparse.csr_array, shape (M, P)
            The basis functions of the variable evaluated at `x`.

        """
        return _ScipyBSpline.design_matrix(
            x, self.knot_vectors[axis], self.degrees[axis]
        ).tocsr()

    def eval_basis(self, x):
        """
        Evaluates all basis functions at a single point.

        Parameters
        ----------
        x : array-like, shape (D,)
            The point at which to evaluate the basis functions.

        Returns
        -------
        scipy.sparse.csr_matrix or scipy.sparse.csr_array, shape (1, ``num_basis_functions``)
            The sparse row of basis function values. Only the at most
            ``prod(degrees + 1)`` supported basis functions are stored.

        """
        point = self._check_points(x)
        if point.shape[0] != 1:
            raise ValueError('eval_basis only accepts a single point')

        indices = np.zeros(1, dtype=np.intp)
        values = np.ones(1)
        for axis in range(self.num_variables):
            row = self._univariate_basis(axis, point[0, axis:axis + 1])
            indices = (indices[:, None] * self._num_bases[axis] + row.indices[None, :]).ravel()
            values = np.outer(values, row.data).ravel()

        return csr_object(
            (values, indices, np.array([0, len(values)])), shape=(1, self.num_basis_functions)
        )

    def basis_matrix(self, points):
        """
        Evaluates all basis functions at several points.

        Parameters
        ----------
        points : array-like, shape (M, D)
            The points at which to evaluate the basis functions.

        Returns
        -------
        scipy.sparse.csr_matrix or scipy.sparse.csr_array, shape (M, ``num_basis_functions``)
            The sparse matrix of basis function values, with one row per point.

        """
        points = self._check_points(points)
        basis = self._univariate_basis(0, points[:, 0])
        for axis in range(1, self.num_variables):
            basis = _face_splitting(basis, self._univariate_basis(axis, points[:, axis]))

        return csr_object(basis)

    def __call__(self, points):
        """
        Evaluates the spline.

        Parameters
        ----------
        points : array-like, shape (M, D) or (D,)
            The points at which to evaluate the spline.

        Returns
        -------
        float or numpy.ndarray, shape (M,)
            The spline values. A single float is returned if `points` was a single
            point with shape (D,).

        """
        single_point = np.ndim(points) < 2 and np.size(points) == self.num_variables
        output = self.basis_matrix(points) @ self.coefficients
        if single_point:
            output = float(output[0])
        return output
