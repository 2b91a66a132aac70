# -*- coding: utf-8 -*-
"""
Knot spacing
------------

This example compares the three strategies for placing knots, set with
:meth:`.Builder.knot_spacing`, for data that is sampled much more densely in
one region than in the rest of its range.

"""

import matplotlib.pyplot as plt
import numpy as np

from bsplinefit import Builder, DataTable, KnotSpacing


# %%
# The samples are clustered near x=0, where the curve changes quickly.
x = np.concatenate((np.linspace(0, 1, 40, endpoint=False), np.linspace(1, 10, 15)))
y = np.exp(-3 * x) * np.cos(8 * x) + 0.02 * x
table = DataTable.from_arrays(x, y)

# %%
# 'as_sampled' places the interior knots at moving averages of the samples, so the
# knots follow the sampling density. 'equidistant' spaces the knots equally over the
# range of the data, and 'experimental' averages the samples within a limited number
# of buckets. Identity smoothing is used since the equidistant strategy can leave
# basis functions without any samples in their support.
x_plot = np.linspace(0, 10, 1000).reshape(-1, 1)
fig, axes = plt.subplots(nrows=3, sharex=True, tight_layout=True)
for ax, knot_spacing in zip(axes, KnotSpacing):
    spline = (
        Builder(table)
        .knot_spacing(knot_spacing)
        .smoothing('identity')
        .alpha(1e-6)
        .build()
    )
    knots = spline.knot_vectors[0]
    ax.plot(x, y, 'o', ms=3)
    ax.plot(x_plot, spline(x_plot))
    ax.plot(knots, np.full(knots.shape, y.min() - 0.1), 'k|', ms=10)
    ax.set_title(f"{knot_spacing.value} ({spline.num_basis_functions} basis functions)")

plt.show()
