"""Affine coding of input data onto the canonical interval [-1, 1]."""

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

from .exceptions import DegenerateCodingError

__all__ = ["DataCoder"]


class DataCoder:
    """Map data between raw coordinates and the coded interval [-1, 1].

    The map on each dimension is

    .. math::

        x_c = 2 \\frac{x - m}{b - a}, \\qquad m = \\frac{a + b}{2},

    where :math:`[a, b]` are the coding bounds for that dimension. The map is
    affine, so points outside :math:`[a, b]` are coded outside
    :math:`[-1, 1]` rather than clamped.

    :param lower: Lower coding bound of each dimension.
    :param upper: Upper coding bound of each dimension.
    :raises DegenerateCodingError: If ``upper <= lower`` in any dimension.

    .. attribute:: lower

        Lower coding bounds.

    .. attribute:: upper

        Upper coding bounds.
    """

    def __init__(self, lower, upper) -> None:
        lower = np.atleast_1d(np.asarray(lower, dtype=float))
        upper = np.atleast_1d(np.asarray(upper, dtype=float))
        if lower.ndim != 1 or lower.shape != upper.shape:
            raise DegenerateCodingError(
                "Coding bounds must be vectors of the same length, got "
                f"shapes {lower.shape} and {upper.shape}"
            )
        if not (np.all(np.isfinite(lower)) and np.all(np.isfinite(upper))):
            raise DegenerateCodingError("Coding bounds must be finite")
        bad = np.flatnonzero(upper <= lower)
        if bad.size > 0:
            raise DegenerateCodingError(
                f"Coding bounds are degenerate in dimension(s) {bad.tolist()}"
            )
        self.lower = lower
        self.upper = upper

    @classmethod
    def from_data(cls, X) -> "DataCoder":
        """Create a coder whose bounds are the column extrema of X.

        :param X: m-by-dim data matrix.
        """
        X = np.atleast_2d(np.asarray(X, dtype=float))
        return cls(X.min(axis=0), X.max(axis=0))

    @property
    def dim(self) -> int:
        return self.lower.size

    @property
    def center(self) -> np.ndarray:
        """Midpoint of the coding interval of each dimension."""
        return 0.5 * (self.upper + self.lower)

    @property
    def scale(self) -> np.ndarray:
        """Half-width of the coding interval of each dimension."""
        return 0.5 * (self.upper - self.lower)

    def code(self, X) -> np.ndarray:
        """Map raw data onto the coded space.

        :param X: Point (vector) or m-by-dim matrix of points.
        :return: Coded data with the same shape as X.
        """
        X = np.asarray(X, dtype=float)
        return (X - self.center) / self.scale

    def decode(self, Xc) -> np.ndarray:
        """Map coded data back onto raw coordinates.

        This is the exact inverse of :meth:`code()`.

        :param Xc: Coded point (vector) or m-by-dim matrix of coded points.
        :return: Raw data with the same shape as Xc.
        """
        Xc = np.asarray(Xc, dtype=float)
        return Xc * self.scale + self.center

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(lower={self.lower.tolist()}, "
            f"upper={self.upper.tolist()})"
        )
