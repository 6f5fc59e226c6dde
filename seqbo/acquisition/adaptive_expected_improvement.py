"""Adaptive expected improvement acquisition function."""

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
from typing import NamedTuple, Optional

import numpy as np
from scipy.stats import norm

from ..exceptions import HyperparameterError
from ..model.base import Surrogate
from ..types import AcquisitionType, ProblemType
from ..utils import safe_zscore
from .base import AcquisitionFunction

logger = logging.getLogger(__name__)


class AEIHyperparameters(NamedTuple):
    """Hyperparameters of :class:`AdaptiveExpectedImprovement`."""

    r0: float = 1.0  #: Initial exploration rate
    m: float = 1.05  #: Growth multiplier of the exploration rate
    delta: float = 0.05  #: Relative distance that counts as a stall
    alpha: float = 0.0  #: Gain of the repulsion penalty


DEFAULT_MIN_EXP_RATE = 0.25
DEFAULT_MAX_EXP_RATE = 2.0

#: Smallest coded distance between candidates that counts as a move
MIN_MOVE = 1e-4


class AdaptiveExpectedImprovement(AcquisitionFunction):
    """Expected improvement with an adaptive exploration rate.

    The score at x is

    .. math::

        -\\left[\\left(I(x) \\Phi(Z) + R \\sigma(x) \\phi(Z)\\right)
        \\mathbb{1}_{\\sigma(x) > 0} - P(x)\\right],
        \\qquad Z = \\frac{I(x)}{\\sigma(x)},

    where :math:`I(x)` is the predicted improvement over the best response in
    the training set, R is the exploration rate and P is a repulsion
    penalty.

    Candidates are processed one at a time, in order. When a candidate is
    closer than :math:`\\delta` to the previous one, in relative L1 distance
    over the coded domain, the stall counter n is incremented and the
    exploration rate grows as

    .. math::

        R = \\min(\\max(R_0 M^n, R_{min}), R_{max}).

    A candidate that moved less than :data:`MIN_MOVE` (coded, but not zero)
    from the previous one is a finite-difference step of the solver. It
    leaves the counter and the last candidate untouched, so the rate is the
    same on every point of a difference quotient.

    The penalty is :math:`P(x) = \\alpha / \\|x_c - x^*_c\\|_2`, with coded
    points, where :math:`x^*` is the point chosen in the previous round, or
    the best training input before the first round. It is zero when
    :math:`x` lies within :data:`MIN_MOVE` of :math:`x^*` or when it is not
    finite. The counter and the last candidate are cleared by
    :meth:`reset()`, which is called at the start of every round.

    :param surrogateModel: Surrogate model.
    :param problem: Whether the black-box function is maximized or
        minimized.
    :param hyperparameters: Sequence (R0, M, Delta) or (R0, M, Delta,
        Alpha). See :class:`AEIHyperparameters`.
    :param min_rate: Smallest exploration rate.
    :param max_rate: Largest exploration rate.
    """

    acquisition_type = AcquisitionType.AEI

    def __init__(
        self,
        surrogateModel: Surrogate,
        problem=ProblemType.MAXIMIZE,
        hyperparameters=AEIHyperparameters(),
        *,
        min_rate: float = DEFAULT_MIN_EXP_RATE,
        max_rate: float = DEFAULT_MAX_EXP_RATE,
    ) -> None:
        super().__init__(surrogateModel, problem)
        self._params = AEIHyperparameters()
        self._min_rate = DEFAULT_MIN_EXP_RATE
        self._max_rate = DEFAULT_MAX_EXP_RATE
        self._count = 0
        self._xlast: Optional[np.ndarray] = None
        self.set_hyperparameters(hyperparameters)
        self.set_exp_rate_limits(min_rate, max_rate)

    @property
    def hyperparameters(self) -> AEIHyperparameters:
        """Current (R0, M, Delta, Alpha)."""
        return self._params

    def set_hyperparameters(self, value) -> None:
        value = np.asarray(value, dtype=float).ravel()
        if value.size not in (3, 4):
            raise HyperparameterError(
                "Expected (R0, M, Delta) or (R0, M, Delta, Alpha), got "
                f"{value.size} values"
            )
        if not np.all(np.isfinite(value)):
            raise HyperparameterError("Hyperparameters must be finite")
        params = AEIHyperparameters(*(float(v) for v in value))
        if params.r0 <= 0:
            raise HyperparameterError(
                f"Initial exploration rate must be positive, got {params.r0}"
            )
        if params.m < 1:
            raise HyperparameterError(
                f"Rate multiplier must be at least 1, got {params.m}"
            )
        if params.delta <= 0:
            raise HyperparameterError(
                f"Stall distance must be positive, got {params.delta}"
            )
        if params.alpha < 0:
            raise HyperparameterError(
                f"Penalty gain must be non-negative, got {params.alpha}"
            )
        self._params = params

    @property
    def exp_rate_limits(self) -> tuple:
        """Smallest and largest exploration rate."""
        return self._min_rate, self._max_rate

    def set_exp_rate_limits(self, min_rate: float, max_rate: float) -> None:
        """Set the clipping interval of the exploration rate.

        :param min_rate: Smallest exploration rate, positive.
        :param max_rate: Largest exploration rate, larger than min_rate.
        """
        min_rate = float(min_rate)
        max_rate = float(max_rate)
        if not (
            np.isfinite(min_rate)
            and np.isfinite(max_rate)
            and 0 < min_rate < max_rate
        ):
            raise HyperparameterError(
                "Exploration rate limits must satisfy 0 < min < max, got "
                f"({min_rate}, {max_rate})"
            )
        self._min_rate = min_rate
        self._max_rate = max_rate

    @property
    def count(self) -> int:
        """Number of stalls detected in the current round."""
        return self._count

    @property
    def xlast(self) -> Optional[np.ndarray]:
        """Last candidate that moved, in raw coordinates."""
        return self._xlast

    @property
    def rate(self) -> float:
        """Current exploration rate."""
        r = self._params.r0 * self._params.m**self._count
        return float(np.clip(r, self._min_rate, self._max_rate))

    def reset(self) -> None:
        self._count = 0
        self._xlast = None

    def begin_round(self, nsample: Optional[int] = None) -> None:
        super().begin_round(nsample)
        self.reset()
        logger.debug("AEI stall counter reset")

    def _step(self, x: np.ndarray, xc: np.ndarray) -> None:
        """Update the stall counter and the last candidate with a candidate
        and its coded counterpart."""
        if self._xlast is not None:
            diff = xc - self.surrogateModel.code(self._xlast)
            move = np.linalg.norm(diff)
            if 0 < move < MIN_MOVE:
                return
            if np.mean(np.abs(diff)) / 2 < self._params.delta:
                self._count += 1
        self._xlast = x.copy()

    def penalty(self, Xc: np.ndarray) -> np.ndarray:
        """Repulsion penalty at the coded points Xc."""
        if self._params.alpha == 0:
            return np.zeros(len(Xc))
        anchor = self.best_x
        if anchor is None:
            anchor = self.surrogateModel.best(self.problem)[0]
        dist = np.linalg.norm(Xc - self.surrogateModel.code(anchor), axis=1)
        with np.errstate(divide="ignore"):
            P = self._params.alpha / dist
        P[(dist < MIN_MOVE) | ~np.isfinite(P)] = 0.0
        return P

    def _score(self, X: np.ndarray) -> np.ndarray:
        mu, sigma, _ = self.surrogateModel.predict(X)
        improvement = self.improvement(mu)
        Z = safe_zscore(improvement, sigma)
        Xc = self.surrogateModel.code(X)
        P = self.penalty(Xc)

        scores = np.empty(len(X))
        for i in range(len(X)):
            self._step(X[i], Xc[i])
            rate, s = self.rate, sigma[i]
            if s > 0:
                ei = improvement[i] * norm.cdf(Z[i])
                ei += rate * s * norm.pdf(Z[i])
            else:
                ei = 0.0
            scores[i] = -(ei - P[i])
        return scores
