# -*- coding: utf-8 -*-
"""Code for validating inputs.

Created on October 18, 2026

"""

import numpy as np


def _check_scalar(data, desired_length, fill_scalar=False, coerce_0d=True, **asarray_kwargs):
    """
    Checks if the input is scalar and potentially coerces it to the desired length.

    Only intended for one dimensional data.

    Parameters
    ----------
    data : array-like
        Either a scalar value or an array. Array-like inputs with only 1 item will also
        be considered scalar.
    desired_length : int
        If `data` is an array, `desired_length` is the length the array must have. If `data`
        is a scalar and `fill_scalar` is True, then `desired_length` is the length of the output.
    fill_scalar : bool, optional
        If True and `data` is a scalar, then will output an array with a length of
        `desired_length`. Default is False, which leaves scalar values unchanged.
    coerce_0d : bool, optional
        If True (default) and `data` is an array-like, `output` will be a scalar. If
        False, `output` will also be an array with shape (1,).
    **asarray_kwargs : dict
        Additional keyword arguments to pass to :func:`numpy.asarray`.

    Returns
    -------
    output : numpy.ndarray or numpy.number
        The array of values or the single array scalar, depending on the input parameters.
    is_scalar : bool
        True if the input was a scalar value or had a length of 1; otherwise, is False.

    Raises
    ------
    ValueError
        Raised if `data` is not a scalar and its length is not equal to `desired_length`.

    """
    output = np.asarray(data, **asarray_kwargs)
    ndim = output.ndim
    if not ndim:
        is_scalar = True
    else:
        if ndim > 1:  # coerce to 1d shape
            output = output.reshape(-1)
        len_output = len(output)
        if len_output == 1 and coerce_0d:
            is_scalar = True
            output = np.asarray(output[0], **asarray_kwargs)
        else:
            is_scalar = False

    if is_scalar:
        if fill_scalar:
            output = np.full(desired_length, output)
        else:
            # index with an empty tuple to get the single scalar while maintaining the numpy dtype
            output = output[()]
    elif desired_length is not None and len_output != desired_length:
        raise ValueError(f'desired length was {desired_length} but instead got {len_output}')

    return output, is_scalar


def _check_scalar_variable(value, allow_zero=False, variable_name='alpha', **asarray_kwargs):
    """
    Ensures the input is a single, finite scalar value with the correct sign.

    Parameters
    ----------
    value : numpy.Number or array-like
        The value to check.
    allow_zero : bool, optional
        If False (default), only allows `value` > 0. If True, allows `value` >= 0.
    variable_name : str, optional
        The name displayed if an error occurs. Default is 'alpha'.
    **asarray_kwargs : dict
        Additional keyword arguments to pass to :func:`numpy.asarray`.

    Returns
    -------
    output : numpy.Number
        The verified scalar value.

    Raises
    ------
    ValueError
        Raised if `value` is not a single finite value, or if it is less than or
        equal to 0 if `allow_zero` is False or less than 0 if `allow_zero` is True.

    """
    output, is_scalar = _check_scalar(value, 1, **asarray_kwargs)
    if not is_scalar:
        raise ValueError(f'{variable_name} must be a single value')
    elif not np.isfinite(output):
        raise ValueError(f'{variable_name} must be finite')

    if allow_zero:
        operation = np.less
        text = 'greater than or equal to'
    else:
        operation = np.less_equal
        text = 'greater than'
    if operation(output, 0):
        raise ValueError(f'{variable_name} must be {text} 0')

    return output


def _check_variable_values(value, num_variables, variable_name, min_value=0, max_value=None):
    """
    Broadcasts an integer setting to every variable and checks its range.

    Parameters
    ----------
    value : int or Sequence[int]
        A single value to use for every variable, or one value for each variable.
    num_variables : int
        The number of variables (dimensions) of the data.
    variable_name : str
        The name displayed if an error occurs.
    min_value : int, optional
        The minimum allowed value. Default is 0.
    max_value : int, optional
        The maximum allowed value. Default is None, which applies no upper bound.

    Returns
    -------
    output : numpy.ndarray, shape (`num_variables`,)
        The integer value for each variable.

    Raises
    ------
    ValueError
        Raised if a sequence is given whose length is not `num_variables`, if any
        value is not an integer, or if any value is outside of the allowed range.

    """
    values = np.asarray(value)
    if values.ndim == 0:
        values = np.full(num_variables, values)
    elif values.ndim > 1 or len(values) != num_variables:
        raise ValueError(
            f'inconsistent length of {variable_name}; expected {num_variables} values '
            f'but got {values.size}'
        )

    if values.size and (
        not np.issubdtype(values.dtype, np.number)
        or np.issubdtype(values.dtype, np.complexfloating)
        or not np.all(np.isfinite(values))
        or np.any(values != np.round(values))
    ):
        raise ValueError(f'{variable_name} must be integers')
    output = values.astype(np.intp)

    if np.any(output < min_value):
        raise ValueError(f'{variable_name} must be greater than or equal to {min_value}')
    elif max_value is not None and np.any(output > max_value):
        raise ValueError(
            f'only {variable_name} in the range [{min_value}, {max_value}] are supported'
        )

    return output


def _check_array(array, dtype=None, order=None, check_finite=False, ensure_1d=True,
                 ensure_2d=False):
    """
    Validates the shape and values of the input array and controls the output parameters.

    Parameters
    ----------
    array : array-like
        The input array to check.
    dtype : type or numpy.dtype, optional
        The dtype to cast the output array. Default is None, which uses the typing of `array`.
    order : {None, 'C', 'F'}, optional
        The order for the output array. Default is None, which will use the default array
        ordering. Other valid options are 'C' for C ordering or 'F' for Fortran ordering.
    check_finite : bool, optional
        If True, will raise an error if any values in `array` are not finite. Default is False,
        which skips the check.
    ensure_1d : bool, optional
        If True (default), will raise an error if the shape of `array` is not a one dimensional
        array with shape (N,) or a two dimensional array with shape (N, 1) or (1, N).
    ensure_2d : bool, optional
        If True, will raise an error if `array` is not a two dimensional array. One
        dimensional inputs are treated as a single row. Default is False. Only used
        if `ensure_1d` is False.

    Returns
    -------
    output : numpy.ndarray
        The array after performing all validations.

    Raises
    ------
    ValueError
        Raised if `ensure_1d` is True and `array` does not have a shape of (N,) or
        (N, 1) or (1, N), or if `ensure_2d` is True and `array` has more than two
        dimensions.

    Notes
    -----
    If `ensure_1d` is True and `array` has a shape of (N, 1) or (1, N), it is reshaped to
    (N,) for better compatibility for all functions.

    """
    if check_finite:
        array_func = np.asarray_chkfinite
    else:
        array_func = np.asarray
    output = array_func(array, dtype=dtype, order=order)
    if ensure_1d:
        output = np.atleast_1d(output)
        dimensions = output.ndim
        if dimensions == 2 and 1 in output.shape:
            output = output.reshape(-1)
        elif dimensions != 1:
            raise ValueError('must be a one dimensional array')
    elif ensure_2d:
        output = np.atleast_2d(output)
        if output.ndim != 2:
            raise ValueError('must be a two dimensional array')

    return output


def _check_sized_array(array, length, dtype=None, order=None, check_finite=False,
                       ensure_1d=True, axis=-1, name='weights'):
    """
    Validates the input array and ensures its length is correct.

    Parameters
    ----------
    array : array-like
        The input array to check.
    length : int
        The length that the input should have on the specified `axis`.
    dtype : type or numpy.dtype, optional
        The dtype to cast the output array. Default is None, which uses the typing of `array`.
    order : {None, 'C', 'F'}, optional
        The order for the output array. Default is None, which will use the default array
        ordering. Other valid options are 'C' for C ordering or 'F' for Fortran ordering.
    check_finite : bool, optional
        If True, will raise an error if any values if `array` are not finite. Default is False,
        which skips the check.
    ensure_1d : bool, optional
        If True (default), will raise an error if the shape of `array` is not a one dimensional
        array with shape (N,) or a two dimensional array with shape (N, 1) or (1, N).
    axis : int, optional
        The axis of the input on which to check its length. Default is -1.
    name : str, optional
        The name for the variable if an exception is raised. Default is 'weights'.

    Returns
    -------
    output : numpy.ndarray
        The array after performing all validations.

    Raises
    ------
    ValueError
        Raised if `array` does not match `length` on the given `axis`.

    """
    output = _check_array(
        array, dtype=dtype, order=order, check_finite=check_finite, ensure_1d=ensure_1d,
        ensure_2d=not ensure_1d
    )
    if output.shape[axis] != length:
        raise ValueError(
            f'length mismatch for {name}; expected {length} but got {output.shape[axis]}'
        )
    return output


def _check_bounds(bounds, num_variables):
    """
    Validates the knot placement bounds for each variable.

    Parameters
    ----------
    bounds : array-like, shape (`num_variables`, 2) or None
        The (low, high) pair for each variable. NaN values denote that the
        corresponding minimum or maximum of the data should be used. Can also
        be None or empty, which denotes no bounds.
    num_variables : int
        The number of variables (dimensions) of the data.

    Returns
    -------
    numpy.ndarray, shape (`num_variables`, 2) or (0, 2)
        The validated bounds.

    Raises
    ------
    ValueError
        Raised if the number of pairs is neither 0 nor `num_variables`, if the pairs
        do not have two values, if any bound is infinite, or if a low bound is not less
        than its high bound.

    """
    if bounds is None:
        return np.empty((0, 2))
    output = np.asarray(bounds, dtype=float)
    if output.size == 0:
        return np.empty((0, 2))
    elif output.ndim == 1 and num_variables == 1:
        output = output.reshape(1, -1)

    if output.ndim != 2 or output.shape[1] != 2:
        raise ValueError('bounds must be a sequence of (low, high) pairs')
    elif output.shape[0] != num_variables:
        raise ValueError(
            f'bounds must be empty or have one pair for each of the {num_variables} variables; '
            f'got {output.shape[0]} pairs'
        )
    elif np.any(np.isinf(output)):
        raise ValueError('bounds must be finite or NaN')
    elif np.any(output[:, 0] >= output[:, 1]):
        raise ValueError('the low bound must be less than the high bound')

    return output
