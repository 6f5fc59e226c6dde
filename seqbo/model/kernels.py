"""ARD covariance functions evaluated in coded coordinates."""

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

import numpy as np
from scipy.spatial.distance import cdist

from ..types import KernelType

__all__ = [
    "scaled_sqdist",
    "ard_squared_exponential",
    "ard_exponential",
    "ard_matern32",
    "ard_matern52",
    "eval_kernel",
]

_SQRT3 = np.sqrt(3.0)
_SQRT5 = np.sqrt(5.0)


def scaled_sqdist(Xc, Xref, length_scale) -> np.ndarray:
    """Squared Euclidean distances after scaling each dimension.

    :param Xc: m-by-dim matrix of coded points.
    :param Xref: n-by-dim matrix of coded reference points.
    :param length_scale: Length-scale of each dimension.
    :return: m-by-n matrix with :math:`r^2_{ij} = \\sum_k
        ((x_{ik} - y_{jk}) / \\ell_k)^2`.
    """
    length_scale = np.asarray(length_scale, dtype=float)
    Xc = np.atleast_2d(Xc) / length_scale
    Xref = np.atleast_2d(Xref) / length_scale
    return cdist(Xc, Xref, "sqeuclidean")


def ard_squared_exponential(r2: np.ndarray, sigma_f: float) -> np.ndarray:
    r"""Squared exponential kernel :math:`\sigma_f^2 e^{-r^2/2}`."""
    return sigma_f**2 * np.exp(-0.5 * r2)


def ard_exponential(r2: np.ndarray, sigma_f: float) -> np.ndarray:
    r"""Exponential kernel :math:`\sigma_f^2 e^{-r}`."""
    return sigma_f**2 * np.exp(-np.sqrt(r2))


def ard_matern32(r2: np.ndarray, sigma_f: float) -> np.ndarray:
    r"""Matérn 3/2 kernel :math:`\sigma_f^2 (1 + \sqrt{3} r)
    e^{-\sqrt{3} r}`."""
    r = np.sqrt(r2)
    return sigma_f**2 * (1 + _SQRT3 * r) * np.exp(-_SQRT3 * r)


def ard_matern52(r2: np.ndarray, sigma_f: float) -> np.ndarray:
    r"""Matérn 5/2 kernel :math:`\sigma_f^2 (1 + \sqrt{5} r + \frac{5}{3}
    r^2) e^{-\sqrt{5} r}`."""
    r = np.sqrt(r2)
    return sigma_f**2 * (1 + _SQRT5 * r + (5.0 / 3.0) * r2) * np.exp(
        -_SQRT5 * r
    )


_KERNEL_FUNCTIONS = {
    KernelType.ARD_SQUARED_EXPONENTIAL: ard_squared_exponential,
    KernelType.ARD_EXPONENTIAL: ard_exponential,
    KernelType.ARD_MATERN32: ard_matern32,
    KernelType.ARD_MATERN52: ard_matern52,
}


def eval_kernel(
    kernel, Xc, Xref, length_scale, sigma_f: float
) -> np.ndarray:
    """Evaluate an ARD kernel between two sets of coded points.

    :param kernel: :class:`~seqbo.types.KernelType` or its name.
    :param Xc: m-by-dim matrix of coded points.
    :param Xref: n-by-dim matrix of coded reference points.
    :param length_scale: Length-scale of each dimension.
    :param sigma_f: Signal standard deviation.
    :return: m-by-n kernel matrix.
    """
    r2 = scaled_sqdist(Xc, Xref, length_scale)
    return _KERNEL_FUNCTIONS[KernelType(kernel)](r2, sigma_f)
