# -*- coding: utf-8 -*-
"""A simple table of samples used for building splines.

Created on October 18, 2026

"""

import numpy as np

from ._validation import _check_array, _check_sized_array


class DataTable:
    """
    A table of samples, each being a coordinate vector and a scalar response.

    The number of variables (the dimension of the coordinate vectors) is set by the
    first added sample, and all following samples must have the same dimension.
    Samples may be repeated.

    Attributes
    ----------
    num_samples : int
        The number of samples in the table.
    num_variables : int
        The dimension of the coordinate vectors. Is 0 if no samples have been added.

    Examples
    --------
    >>> table = DataTable()
    >>> table.add_sample([0., 1.], 2.)
    >>> table.num_samples, table.num_variables
    (1, 2)

    """

    def __init__(self):
        self._x = []
        self._y = []
        self.num_variables = 0
        self._x_array = None
        self._y_array = None

    @classmethod
    def from_arrays(cls, points, values):
        """
        Creates a table from arrays of sample coordinates and responses.

        Parameters
        ----------
        points : array-like, shape (M, D) or (M,)
            The coordinates of the `M` samples. A one dimensional input is treated as
            `M` samples of a single variable.
        values : array-like, shape (M,)
            The response for each sample.

        Returns
        -------
        DataTable
            The table containing all of the samples.

        Raises
        ------
        ValueError
            Raised if the number of points and values do not match.

        """
        x = np.asarray(points, dtype=float)
        if x.ndim == 1:
            x = x.reshape(-1, 1)
        x = _check_array(x, dtype=float, check_finite=True, ensure_1d=False, ensure_2d=True)
        y = _check_sized_array(
            values, x.shape[0], dtype=float, check_finite=True, name='values'
        )
        table = cls()
        for x_val, y_val in zip(x, y):
            table.add_sample(x_val, y_val)
        return table

    def add_sample(self, x, y):
        """
        Adds a single sample to the table.

        Parameters
        ----------
        x : float or array-like, shape (D,)
            The coordinate vector of the sample.
        y : float
            The response of the sample.

        Raises
        ------
        ValueError
            Raised if the coordinate vector is empty, contains non-finite values, or has a
            different dimension than the previously added samples.

        """
        x_val = _check_array(x, dtype=float, check_finite=True)
        y_val = np.asarray(y, dtype=float).reshape(-1)
        if y_val.size != 1:
            raise ValueError('sample responses must be a single value')
        y_val = float(y_val[0])
        if not np.isfinite(y_val):
            raise ValueError('sample responses must be finite')
        elif not x_val.size:
            raise ValueError('sample coordinates must have at least one value')

        if not self._x:
            self.num_variables = x_val.size
        elif x_val.size != self.num_variables:
            raise ValueError(
                f'inconsistent sample dimension; expected {self.num_variables} values '
                f'but got {x_val.size}'
            )
        self._x.append(x_val)
        self._y.append(y_val)
        self._x_array = None
        self._y_array = None

    @property
    def num_samples(self):
        """The number of samples in the table."""
        return len(self._y)

    @property
    def x(self):
        """numpy.ndarray, shape (M, D): The coordinates of all samples."""
        if self._x_array is None:
            if self._x:
                self._x_array = np.vstack(self._x)
            else:
                self._x_array = np.empty((0, 0))
        return self._x_array

    @property
    def y(self):
        """numpy.ndarray, shape (M,): The responses of all samples."""
        if self._y_array is None:
            self._y_array = np.array(self._y, dtype=float)
        return self._y_array

    def table_x(self):
        """
        Gives the coordinate values of all samples, separated by variable.

        Returns
        -------
        list[numpy.ndarray]
            A list with `num_variables` arrays, each containing the values of that
            variable for every sample.

        """
        x = self.x
        return [x[:, i] for i in range(self.num_variables)]

    def is_grid_complete(self):
        """
        Checks whether the samples fill a complete, regular grid.

        The grid is made of every combination of the unique values of each variable.
        Repeated samples are allowed.

        Returns
        -------
        bool
            True if the table is not empty and every grid point has at least one sample.

        """
        if not self.num_samples:
            return False
        num_grid_points = 1
        for column in self.table_x():
            num_grid_points *= len(np.unique(column))

        return len(np.unique(self.x, axis=0)) == num_grid_points

    def copy(self):
        """
        Creates an independent copy of the table.

        Returns
        -------
        DataTable
            The copied table.

        """
        table = DataTable()
        table._x = [x_val.copy() for x_val in self._x]
        table._y = list(self._y)
        table.num_variables = self.num_variables
        return table

    def __len__(self):
        return self.num_samples

    def __iter__(self):
        """Yields the coordinate vector and response of each sample, in insertion order."""
        yield from zip(self._x, self._y)
