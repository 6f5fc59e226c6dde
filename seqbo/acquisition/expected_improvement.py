"""Expected improvement acquisition function."""

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

from ..exceptions import HyperparameterError
from ..model.base import Surrogate
from ..types import AcquisitionType, ProblemType
from ..utils import gp_expected_improvement
from .base import AcquisitionFunction

DEFAULT_EI_BETA = 0.01


class ExpectedImprovement(AcquisitionFunction):
    """Expected improvement from [#]_ with an exploration margin.

    The score at x is

    .. math::

        -\\left[(I(x) - \\beta) \\Phi(Z) + \\sigma(x) \\phi(Z)\\right],
        \\qquad Z = \\frac{I(x) - \\beta}{\\sigma(x)},

    where :math:`I(x)` is the predicted improvement over the best response
    in the training set. Points with zero standard deviation score 0.

    :param surrogateModel: Surrogate model.
    :param problem: Whether the black-box function is maximized or
        minimized.
    :param beta: Margin :math:`\\beta \\in [0, 1]`. Larger values favour
        exploration.

    References
    ----------
    .. [#] Donald R. Jones, Matthias Schonlau, and William J. Welch. Efficient
        global optimization of expensive black-box functions. Journal of Global
        Optimization, 13(4):455–492, 1998.
    """

    acquisition_type = AcquisitionType.EI

    def __init__(
        self,
        surrogateModel: Surrogate,
        problem=ProblemType.MAXIMIZE,
        beta: float = DEFAULT_EI_BETA,
    ) -> None:
        super().__init__(surrogateModel, problem)
        self._beta = DEFAULT_EI_BETA
        self.set_hyperparameters(beta)

    @property
    def hyperparameters(self) -> float:
        """Margin beta."""
        return self._beta

    def set_hyperparameters(self, value) -> None:
        value = np.asarray(value, dtype=float)
        if value.size != 1:
            raise HyperparameterError(
                f"Expected a scalar margin, got {value.size} values"
            )
        beta = float(value.item())
        if not 0.0 <= beta <= 1.0:
            raise HyperparameterError(
                f"Margin beta must lie in [0, 1], got {beta}"
            )
        self._beta = beta

    def _score(self, X: np.ndarray) -> np.ndarray:
        mu, sigma, _ = self.surrogateModel.predict(X)
        delta = self.improvement(mu) - self._beta
        return -gp_expected_improvement(delta, sigma)
