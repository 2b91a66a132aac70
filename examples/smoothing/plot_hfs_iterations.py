# -*- coding: utf-8 -*-
"""
HFS iterations
--------------

This example examines how the smoothing parameter, `lam`, of a P-spline fit is refined
by Harville-Fellner-Schall (HFS) iterations, starting from very different initial
values set with :meth:`.Builder.alpha`.

Each iteration estimates the variance of the residuals and the variance of the second
differences of the coefficients and sets `lam` to their ratio, so the final value is
largely independent of the initial guess once enough iterations are done.

"""

import matplotlib.pyplot as plt
import numpy as np

from bsplinefit import Builder, DataTable


# %%
# The data is a noisy sine wave sampled at 200 points.
rng = np.random.default_rng(0)
x = np.linspace(0, 10, 200)
y = np.sin(x) + 0.5 * np.sin(3 * x) + rng.normal(0, 0.2, x.size)
table = DataTable.from_arrays(x, y)

# %%
# The smoothing parameter is refined with 15 HFS iterations for several initial
# values. The history of `lam` for each iteration is stored in the `params`
# attribute of the fitted spline.
num_iterations = 15
_, ax = plt.subplots()
for initial_lam in (1e-3, 1e-1, 1e1, 1e3):
    spline = (
        Builder(table)
        .knot_spacing('equidistant')
        .num_basis_functions(40)
        .smoothing('pspline')
        .alpha(initial_lam)
        .hfs_iters(num_iterations)
        .build()
    )
    ax.semilogy(
        np.arange(num_iterations + 1),
        np.concatenate(([initial_lam], spline.params['lam_history'])),
        'o-', label=f'initial lam={initial_lam:.0e}'
    )
ax.set_xlabel('HFS iteration')
ax.set_ylabel('lam')
ax.legend()

# %%
# The fit using the final `lam` is smooth while still following the underlying
# curve.
_, ax = plt.subplots()
ax.plot(x, y, '.', label='data')
ax.plot(x, spline(x.reshape(-1, 1)), label='P-spline')
ax.plot(x, np.sin(x) + 0.5 * np.sin(3 * x), '--', label='true')
ax.legend()

plt.show()
