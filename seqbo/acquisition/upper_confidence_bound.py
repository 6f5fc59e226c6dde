"""Upper confidence bound acquisition function."""

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

import logging
from typing import Optional

import numpy as np
from scipy.stats import gamma

from ..exceptions import HyperparameterError
from ..model.base import Surrogate
from ..types import AcquisitionType, ProblemType
from .base import AcquisitionFunction

logger = logging.getLogger(__name__)

DEFAULT_UCB_BETA = 0.02
DEFAULT_GAMMA_SCALE = 1.0


class UpperConfidenceBound(AcquisitionFunction):
    """Upper confidence bound acquisition function.

    The score at x is :math:`-(\\mu(x) + \\sqrt{\\beta} \\sigma(x))` when
    maximizing and :math:`-(-\\mu(x) + \\sqrt{\\beta} \\sigma(x))` when
    minimizing.

    At the start of each round, :meth:`begin_round()` draws a new
    :math:`\\beta` with :meth:`sample_gamma()`, so that the amount of
    exploration decays as the number of samples grows.

    :param surrogateModel: Surrogate model.
    :param problem: Whether the black-box function is maximized or
        minimized.
    :param beta: Initial exploration weight, non-negative.
    :param scale: Scale of the gamma distribution used in
        :meth:`sample_gamma()`.
    :param seed: Seed or :class:`numpy.random.Generator` for the draws.

    .. attribute:: rng

        Random number generator used in :meth:`sample_gamma()`.
    """

    acquisition_type = AcquisitionType.UCB

    def __init__(
        self,
        surrogateModel: Surrogate,
        problem=ProblemType.MAXIMIZE,
        beta: float = DEFAULT_UCB_BETA,
        *,
        scale: float = DEFAULT_GAMMA_SCALE,
        seed=None,
    ) -> None:
        super().__init__(surrogateModel, problem)
        self._beta = DEFAULT_UCB_BETA
        self._scale = DEFAULT_GAMMA_SCALE
        self.set_hyperparameters(beta)
        self.set_scale(scale)
        self.rng = np.random.default_rng(seed)

    @property
    def hyperparameters(self) -> float:
        """Exploration weight beta."""
        return self._beta

    def set_hyperparameters(self, value) -> None:
        value = np.asarray(value, dtype=float)
        if value.size != 1:
            raise HyperparameterError(
                f"Expected a scalar exploration weight, got {value.size} "
                "values"
            )
        beta = float(value.item())
        if not (np.isfinite(beta) and beta >= 0):
            raise HyperparameterError(
                f"Exploration weight must be finite and non-negative, got "
                f"{beta}"
            )
        self._beta = beta

    @property
    def scale(self) -> float:
        """Scale of the gamma distribution."""
        return self._scale

    def set_scale(self, scale: float) -> None:
        scale = float(scale)
        if not (np.isfinite(scale) and scale > 0):
            raise HyperparameterError(
                f"Gamma scale must be finite and positive, got {scale}"
            )
        self._scale = scale

    def sample_gamma(self, T: int) -> float:
        """Draw an exploration weight for iteration T.

        The shape of the gamma distribution is

        .. math::

            k_T = \\frac{\\ln((T^2 + 1) / \\sqrt{2\\pi})}{\\ln(1 + s/2)},

        floored at 1, where s is :attr:`scale`. A variate
        :math:`g \\sim \\Gamma(k_T, s)` is drawn and the weight is the gamma
        density at g.

        :param T: Iteration count, positive.
        :return: Finite non-negative weight.
        """
        if not T > 0:
            raise ValueError(f"Iteration count must be positive, got {T}")
        kt = np.log((T**2 + 1) / np.sqrt(2 * np.pi)) / np.log(
            1 + self._scale / 2
        )
        kt = max(float(kt), 1.0)
        g = self.rng.gamma(kt, self._scale)
        return float(gamma.pdf(g, kt, scale=self._scale))

    def begin_round(self, nsample: Optional[int] = None) -> None:
        super().begin_round(nsample)
        if nsample is not None and nsample > 0:
            self.set_hyperparameters(self.sample_gamma(nsample))
            logger.debug(
                "UCB exploration weight for %d samples: %g",
                nsample,
                self._beta,
            )

    def _score(self, X: np.ndarray) -> np.ndarray:
        mu, sigma, _ = self.surrogateModel.predict(X)
        return -(self.problem.sign * mu + np.sqrt(self._beta) * sigma)
