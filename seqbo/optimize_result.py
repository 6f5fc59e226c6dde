"""OptimizeResult class for seqbo."""

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

from dataclasses import dataclass
from typing import Optional

import numpy as np

from .model.base import Surrogate
from .types import ProblemType
from .utils import latin_hypercube


@dataclass
class OptimizeResult:
    """Optimization result for :func:`~seqbo.optimize.bayesian_optimization`."""

    x: Optional[np.ndarray] = None  #: Best sample point found so far
    fx: Optional[float] = None  #: Best objective function value
    nit: int = 0  #: Number of active learning iterations
    nfev: int = 0  #: Number of function evaluations taken
    sample: Optional[np.ndarray] = None  #: n-by-dim matrix with all n samples
    fsample: Optional[np.ndarray] = None  #: Vector with all n objective values
    problem: ProblemType = ProblemType.MINIMIZE  #: Maximize or minimize

    def init(
        self,
        fun,
        bounds,
        ninit: int,
        maxeval: int,
        surrogateModel: Surrogate,
        seed=None,
    ) -> None:
        """Initialize :attr:`nfev` and :attr:`sample` and :attr:`fsample` with
        data about the optimization that is starting.

        If the surrogate model has no training data, this routine evaluates
        the objective function on a Latin hypercube design with
        ``min(ninit, maxeval)`` points.

        :param fun: The objective function. Receives an n-by-dim matrix and
            returns n values.
        :param sequence bounds: List with the limits [x_min,x_max] of each
            direction x in the space.
        :param ninit: Size of the initial design.
        :param maxeval: Maximum number of function evaluations.
        :param surrogateModel: Surrogate model to be used.
        :param seed: Seed for the initial design.
        """
        dim = len(bounds)
        assert dim > 0

        self.sample = np.full((maxeval, dim), np.nan)
        self.fsample = np.full(maxeval, np.nan)

        if surrogateModel.ntrain == 0:
            m = min(ninit, maxeval)
            self.sample[0:m] = latin_hypercube(bounds, m, seed=seed)
            self.fsample[0:m] = np.asarray(
                fun(self.sample[0:m]), dtype=float
            ).ravel()
            self.nfev = m

    def init_best_values(
        self, surrogateModel: Optional[Surrogate] = None
    ) -> None:
        """Initialize :attr:`x` and :attr:`fx` based on the best values obtained
        so far.

        :param surrogateModel: Surrogate model. Its training data also
            counts.
        """
        assert self.sample is not None
        assert self.fsample is not None
        m = self.nfev

        combined_x = self.sample[0:m]
        combined_y = self.fsample[0:m]
        if surrogateModel is not None and surrogateModel.ntrain > 0:
            combined_x = np.concatenate((combined_x, surrogateModel.X))
            combined_y = np.concatenate((combined_y, surrogateModel.Y))

        if len(combined_y) == 0:
            return
        if self.problem is ProblemType.MAXIMIZE:
            iBest = np.argmax(combined_y).item()
        else:
            iBest = np.argmin(combined_y).item()
        self.x = combined_x[iBest].copy()
        self.fx = combined_y[iBest].item()

    def add(self, x, y: float) -> None:
        """Record a new evaluation and update the best point.

        :param x: Evaluated point.
        :param y: Objective function value at x.
        """
        self.sample[self.nfev] = x
        self.fsample[self.nfev] = y
        self.nfev += 1

        if (
            self.fx is None
            or (self.problem is ProblemType.MAXIMIZE and y > self.fx)
            or (self.problem is ProblemType.MINIMIZE and y < self.fx)
        ):
            self.x = np.array(x, dtype=float, copy=True)
            self.fx = float(y)
