# -*- coding: utf-8 -*-
"""Setup code for testing bsplinefit.

Created on October 18, 2026

"""

import numpy as np
import pytest

from bsplinefit import DataTable


def get_grid_data(num_x=12, num_z=9, noise=0.):
    """
    Creates samples of a smooth surface on a complete, regular grid.

    Parameters
    ----------
    num_x : int, optional
        The number of unique values of the first variable. Default is 12.
    num_z : int, optional
        The number of unique values of the second variable. Default is 9.
    noise : float, optional
        The standard deviation of the normally distributed noise added to
        the responses. Default is 0.

    Returns
    -------
    points : numpy.ndarray, shape (``num_x * num_z``, 2)
        The sample coordinates, with the second variable changing fastest.
    values : numpy.ndarray, shape (``num_x * num_z``,)
        The sample responses.

    """
    x = np.linspace(0, 4, num_x)
    z = np.linspace(-1, 1, num_z)
    X, Z = np.meshgrid(x, z, indexing='ij')
    values = np.sin(X) + 0.5 * Z**2
    if noise:
        values = values + np.random.default_rng(0).normal(0, noise, values.shape)

    return np.column_stack((X.ravel(), Z.ravel())), values.ravel()


@pytest.fixture
def small_data():
    """A small array of data for testing."""
    return np.arange(10, dtype=float)


@pytest.fixture
def table_1d():
    """A table of noiseless samples of a single variable."""
    x = np.linspace(0, 10, 30)
    return DataTable.from_arrays(x, np.sin(x) + 0.1 * x)


@pytest.fixture
def noisy_table_1d():
    """A table of noisy samples of a single variable."""
    x = np.linspace(0, 10, 150)
    y = np.sin(x) + np.random.default_rng(1).normal(0, 0.1, x.shape)
    return DataTable.from_arrays(x, y)


@pytest.fixture
def table_2d():
    """A table of noiseless samples on a complete two dimensional grid."""
    return DataTable.from_arrays(*get_grid_data())


@pytest.fixture
def noisy_table_2d():
    """A table of noisy samples on a complete two dimensional grid."""
    return DataTable.from_arrays(*get_grid_data(20, 15, noise=0.05))


@pytest.fixture
def scattered_table_2d():
    """A table of samples of a single surface that do not form a complete grid."""
    rng = np.random.default_rng(2)
    points = rng.uniform(0, 1, (80, 2))
    # include the corners so the knot extents are well defined
    points[:4] = [[0, 0], [0, 1], [1, 0], [1, 1]]
    return DataTable.from_arrays(points, points[:, 0] + points[:, 1]**2)
