# -*- coding: utf-8 -*-
"""The builder for fitting tensor-product B-splines to sample data.

Created on October 18, 2026

"""

from enum import Enum
from functools import wraps
import warnings

import numpy as np

from . import config
from ._penalty_utils import second_order_difference_matrix
from ._solvers import solve_coefficients
from ._spline_utils import _basis_matrix, _compute_knot_vectors
from ._validation import (
    _check_bounds, _check_scalar_variable, _check_sized_array, _check_variable_values
)
from .bspline import BSpline
from .utils import InsufficientDataError, InvalidConfigError, ParameterWarning


class KnotSpacing(Enum):
    """
    The strategies for placing the knots of each variable.

    Attributes
    ----------
    AS_SAMPLED
        Interior knots are moving averages of the unique sample values, so the knot
        spacing follows the sampling.
    EQUIDISTANT
        Interior knots are equally spaced between the bounds of the variable.
    EXPERIMENTAL
        Interior knots are the means of contiguous buckets of the unique sample values,
        with the number of segments limited by :data:`.config.MAX_BUCKET_SEGMENTS`.

    """

    AS_SAMPLED = 'as_sampled'
    EQUIDISTANT = 'equidistant'
    EXPERIMENTAL = 'experimental'


class Smoothing(Enum):
    """
    The regularization used when solving for the spline coefficients.

    Attributes
    ----------
    NONE
        No regularization; the basis matrix system is solved directly.
    IDENTITY
        Ridge regression with the identity matrix, scaled by `alpha`.
    PSPLINE
        A penalty on the second differences of neighboring coefficients, with the
        smoothing parameter optionally refined by HFS iterations.

    """

    NONE = 'none'
    IDENTITY = 'identity'
    PSPLINE = 'pspline'


def _get_member(enum_class, value, variable_name):
    """
    Converts the input to a member of an enum.

    Parameters
    ----------
    enum_class : type[enum.Enum]
        The enum.
    value : enum.Enum or str
        The member itself, or its name or value; strings are case-insensitive.
    variable_name : str
        The name displayed if an error occurs.

    Returns
    -------
    enum.Enum
        The matching member of `enum_class`.

    Raises
    ------
    ValueError
        Raised if `value` does not match any member.

    """
    if isinstance(value, enum_class):
        return value
    elif isinstance(value, str):
        key = value.lower()
        for member in enum_class:
            if key in (member.value, member.name.lower()):
                return member

    valid = [member.value for member in enum_class]
    raise ValueError(f'{value!r} is not a valid {variable_name}; options are {valid}')


def _setter(func):
    """
    Wraps a builder setter so that rejected values raise an InvalidConfigError.

    The wrapped setter returns the builder to allow chaining calls.

    """
    @wraps(func)
    def inner(self, *args, **kwargs):
        try:
            func(self, *args, **kwargs)
        except InvalidConfigError:
            raise
        except ValueError as err:
            raise InvalidConfigError(f'{func.__name__}: {err}') from err
        return self

    return inner


class Builder:
    """
    Fits a tensor-product B-spline to the samples of a data table.

    Settings are configured with chainable methods, which validate their inputs
    immediately and leave the builder unchanged if the input is rejected.

    Parameters
    ----------
    data : DataTable
        The samples to fit. The table is copied, so later changes to it do not
        affect the builder.
    allow_scatter : bool, optional
        If True, allows building from samples that do not form a complete grid. Default
        is None, which uses :data:`.config.ALLOW_SCATTER`.

    Raises
    ------
    InsufficientDataError
        Raised if `data` contains no samples.

    Examples
    --------
    >>> import numpy as np
    >>> from bsplinefit import Builder, DataTable
    >>> x = np.linspace(0, 10, 20)
    >>> table = DataTable.from_arrays(x, np.sin(x))
    >>> spline = Builder(table).degree(3).smoothing('pspline').alpha(0.5).build()

    """

    def __init__(self, data, allow_scatter=None):
        self._data = data.copy()
        if not self._data.num_samples:
            raise InsufficientDataError('the data table must contain at least one sample')
        self._num_variables = self._data.num_variables
        self._allow_scatter = allow_scatter

        self._alpha = 0.1
        self._degree = np.full(self._num_variables, 3, dtype=np.intp)
        self._num_basis_functions = np.zeros(self._num_variables, dtype=np.intp)
        self._knot_spacing = KnotSpacing.AS_SAMPLED
        self._smoothing = Smoothing.NONE
        self._padding = 0.
        self._weights = None
        self._bounds = np.empty((0, 2))
        self._hfs_iters = 0

    @property
    def data(self):
        """DataTable: The builder's copy of the samples."""
        return self._data

    @property
    def settings(self):
        """dict: A snapshot of the current settings."""
        return {
            'alpha': self._alpha,
            'degree': self._degree.copy(),
            'num_basis_functions': self._num_basis_functions.copy(),
            'knot_spacing': self._knot_spacing,
            'smoothing': self._smoothing,
            'padding': self._padding,
            'weights': None if self._weights is None else self._weights.copy(),
            'bounds': self._bounds.copy(),
            'hfs_iters': self._hfs_iters,
            'allow_scatter': self._allow_scatter,
        }

    @_setter
    def alpha(self, alpha):
        """
        Sets the regularization parameter.

        For identity smoothing, `alpha` scales the identity matrix; for pspline
        smoothing, it is the initial smoothing parameter. Must be >= 0. Default is 0.1.

        """
        self._alpha = float(
            _check_scalar_variable(alpha, allow_zero=True, variable_name='alpha', dtype=float)
        )

    @_setter
    def degree(self, degree):
        """
        Sets the spline degree of each variable.

        A single value is used for every variable. Each degree must be an integer in
        [0, 5]. Default is 3.

        """
        self._degree = _check_variable_values(
            degree, self._num_variables, 'spline degree', min_value=0, max_value=5
        )

    @_setter
    def num_basis_functions(self, num_basis_functions):
        """
        Sets the number of basis functions of each variable.

        A single value is used for every variable. A value of 0 (default) uses the
        number of unique sample values. Only used for equidistant knot spacing.

        """
        self._num_basis_functions = _check_variable_values(
            num_basis_functions, self._num_variables, 'number of basis functions'
        )

    @_setter
    def knot_spacing(self, knot_spacing):
        """
        Sets the knot placement strategy.

        Can be a :class:`KnotSpacing` member or its name. Default is 'as_sampled'.

        """
        self._knot_spacing = _get_member(KnotSpacing, knot_spacing, 'knot spacing')

    @_setter
    def smoothing(self, smoothing):
        """
        Sets the smoothing used when solving for the coefficients.

        Can be a :class:`Smoothing` member or its name. Default is 'none'.

        """
        self._smoothing = _get_member(Smoothing, smoothing, 'smoothing')

    @_setter
    def padding(self, padding):
        """
        Sets the fraction of each variable's range added to both of its bounds.

        Must be >= 0. Only used for equidistant knot spacing. Default is 0.

        """
        self._padding = float(
            _check_scalar_variable(padding, allow_zero=True, variable_name='padding', dtype=float)
        )

    @_setter
    def weights(self, weights):
        """
        Sets the weight of each sample.

        Must have one non-negative value per sample. Only used for pspline smoothing.
        Default is None, which gives every sample a weight of 1.

        """
        if weights is None:
            self._weights = None
            return
        output = _check_sized_array(
            weights, self._data.num_samples, dtype=float, check_finite=True, name='weights'
        )
        if np.any(output < 0):
            raise ValueError('weights must be non-negative')
        self._weights = output.copy()

    @_setter
    def bounds(self, bounds):
        """
        Sets the (low, high) bounds of each variable for placing knots.

        Must either be empty or have one pair for each variable. NaN values use the
        minimum or maximum of the samples. Finite bounds must enclose all samples of
        their variable. Only used for equidistant knot spacing. Default is empty.

        """
        output = _check_bounds(bounds, self._num_variables)
        for (low, high), column in zip(output, self._data.table_x()):
            # samples outside of the bounds would fall outside of the spline domain
            if low > column.min() or high < column.max():
                raise ValueError(
                    f'bounds [{low}, {high}] do not enclose the sample range '
                    f'[{column.min()}, {column.max()}]'
                )
        self._bounds = output

    @_setter
    def hfs_iters(self, hfs_iters):
        """
        Sets the number of HFS iterations used to refine the smoothing parameter.

        Must be an integer >= 0. Only used for pspline smoothing. Default is 0.

        """
        self._hfs_iters = int(_check_variable_values(hfs_iters, 1, 'hfs_iters')[0])

    def build(self):
        """
        Fits the spline to the samples using the current settings.

        Returns
        -------
        BSpline
            The fitted spline. Its `params` attribute is a dictionary with the diagnostics
            from :func:`bsplinefit._solvers.solve_coefficients`, containing the following items:

            * 'lam': float or None
                The regularization parameter used for the final solve. Is None if
                no smoothing was used.
            * 'solver': str
                The solver used for the final solve, either 'dense' or 'sparse'.

            Additional items for pspline smoothing:

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
        InsufficientDataError
            Raised if the samples do not form a complete grid and scatter is not allowed,
            if any variable has too few unique values for its degree, or if pspline
            smoothing is used with less than three basis functions for any variable.
        SolveFailureError
            Raised if the coefficients could not be solved.

        """
        if self._allow_scatter is None:
            allow_scatter = config.ALLOW_SCATTER
        else:
            allow_scatter = self._allow_scatter
        if not allow_scatter and not self._data.is_grid_complete():
            raise InsufficientDataError(
                'the samples do not form a complete grid; set allow_scatter to True to '
                'build from scattered samples'
            )

        knot_vectors = _compute_knot_vectors(
            self._data.table_x(), self._degree, self._knot_spacing.value,
            self._num_basis_functions, self._bounds, self._padding
        )
        bspline = BSpline(knot_vectors, self._degree)
        basis = _basis_matrix(bspline, self._data)

        if self._smoothing is Smoothing.PSPLINE:
            penalty = second_order_difference_matrix(bspline.num_basis_functions_per_variable)
            weights = self._weights
        else:
            penalty = None
            weights = None
            if self._weights is not None:
                warnings.warn(
                    'weights are only used for pspline smoothing and will be ignored',
                    ParameterWarning, stacklevel=2
                )

        coefficients, params = solve_coefficients(
            basis, self._data.y, self._smoothing.value, self._alpha, penalty, weights,
            self._hfs_iters, self._num_variables
        )
        bspline.coefficients = coefficients
        bspline.params = params

        return bspline
