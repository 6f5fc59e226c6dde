"""Utility functions for seqbo."""

# Copyright (c) 2025 Alliance for Energy Innovation, LLC

# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.

# You should have received a copy of the GNU General Public License
# along with this program.  If not, see <http://www.gnu.org/licenses/>.

__authors__ = ["Weslley S. Pereira"]

import numpy as np
from scipy.stats import norm


def safe_zscore(delta, sigma) -> np.ndarray:
    """Ratio delta / sigma, defined as 0 where sigma is 0.

    :param delta: Vector of differences to the reference value.
    :param sigma: Vector of non-negative standard deviations.
    """
    delta = np.asarray(delta, dtype=float)
    sigma = np.asarray(sigma, dtype=float)
    return np.divide(
        delta, sigma, out=np.zeros(np.broadcast(delta, sigma).shape),
        where=sigma > 0,
    )


def gp_expected_improvement(delta, sigma):
    """Expected Improvement function for a distribution from [#]_.

    Entries with zero standard deviation have zero expected improvement.

    :param delta: Expected improvement over the current best value,
        :math:`\\mu_n(x) - f^*_n` when maximizing or :math:`f^*_n -
        \\mu_n(x)` when minimizing, minus any margin.
    :param sigma: The standard deviation :math:`\\sigma_n(x)`.

    References
    ----------
    .. [#] Donald R. Jones, Matthias Schonlau, and William J. Welch. Efficient
        global optimization of expensive black-box functions. Journal of Global
        Optimization, 13(4):455–492, 1998.
    """
    delta = np.asarray(delta, dtype=float)
    sigma = np.asarray(sigma, dtype=float)
    z = safe_zscore(delta, sigma)
    ei = delta * norm.cdf(z) + sigma * norm.pdf(z)
    return np.where(sigma > 0, ei, 0.0)


def latin_hypercube(bounds, n: int, seed=None) -> np.ndarray:
    """Latin hypercube design inside a box.

    :param sequence bounds: List with the limits [x_min,x_max] of each
        direction x in the space.
    :param n: Number of points.
    :param seed: Seed for the random number generator.
    :return: n-by-dim matrix of points.
    """
    from scipy.stats import qmc

    bounds = np.asarray(bounds, dtype=float)
    sampler = qmc.LatinHypercube(d=len(bounds), seed=seed)
    return qmc.scale(sampler.random(n), bounds[:, 0], bounds[:, 1])
