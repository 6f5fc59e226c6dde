"""Stopping rules for :func:`seqbo.optimize.bayesian_optimization`."""

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

from abc import ABC, abstractmethod
from typing import Optional

import numpy as np

from .model.base import Surrogate
from .optimize_result import OptimizeResult


class TerminationCondition(ABC):
    """Stopping rule checked by :func:`seqbo.optimize.bayesian_optimization`
    after every iteration.

    :meth:`update()` is called once per iteration and may change the state
    of the condition. :meth:`is_met()` only inspects it.
    """

    @abstractmethod
    def is_met(
        self, out: OptimizeResult, model: Optional[Surrogate] = None
    ) -> bool:
        """Check the condition without changing its state.

        :param out: Current optimization result.
        :param model: Surrogate model of the optimization, if any.
        """
        pass

    def update(
        self, out: OptimizeResult, model: Optional[Surrogate] = None
    ) -> bool:
        """Record one iteration and check the condition.

        :param out: Current optimization result.
        :param model: Surrogate model of the optimization, if any.
        :return: True if the optimization should stop.
        """
        return self.is_met(out, model)

    def reset(self) -> None:
        """Forget every recorded iteration."""
        return None


class IterateNTimes(TerminationCondition):
    """Stop after a fixed number of iterations.

    :param nTimes: Number of iterations.
    """

    def __init__(self, nTimes: int = 1) -> None:
        if nTimes < 0:
            raise ValueError(f"nTimes must be non-negative, got {nTimes}")
        self.nTimes = nTimes
        self.iterationCount = 0

    def is_met(
        self, out: OptimizeResult, model: Optional[Surrogate] = None
    ) -> bool:
        return self.iterationCount >= self.nTimes

    def update(
        self, out: OptimizeResult, model: Optional[Surrogate] = None
    ) -> bool:
        self.iterationCount += 1
        return self.is_met(out, model)

    def reset(self) -> None:
        self.iterationCount = 0


class UnsuccessfulImprovement(TerminationCondition):
    """Stop when the best response stops improving.

    The improvement of :attr:`OptimizeResult.fx` over :attr:`best_value` is
    measured in the direction of :attr:`OptimizeResult.problem`, i.e.,
    ``fx - best_value`` when maximizing and ``best_value - fx`` when
    minimizing. The condition is met when it is below ``threshold`` times the
    spread of the responses seen so far, training data included.

    :param threshold: Relative improvement, non-negative.

    .. attribute:: best_value

        Best response recorded by :meth:`update()`, or None.

    .. attribute:: value_range

        Spread of the responses recorded by :meth:`update()`.
    """

    def __init__(self, threshold: float = 0.001) -> None:
        if not threshold >= 0:
            raise ValueError(
                f"threshold must be non-negative, got {threshold}"
            )
        self.threshold = threshold
        self.best_value: Optional[float] = None
        self.value_range = 0.0

    def improvement(self, out: OptimizeResult) -> float:
        """Improvement of the current best response over :attr:`best_value`.
        Infinite before the first update."""
        if self.best_value is None:
            return np.inf
        return out.problem.sign * (out.fx - self.best_value)

    def is_met(
        self, out: OptimizeResult, model: Optional[Surrogate] = None
    ) -> bool:
        return self.improvement(out) < self.threshold * self.value_range

    def update(
        self, out: OptimizeResult, model: Optional[Surrogate] = None
    ) -> bool:
        met = self.is_met(out, model)

        Y = out.fsample[0 : out.nfev]
        if model is not None and model.ntrain > 0:
            Y = np.concatenate((Y, model.Y))
        self.value_range = max(self.value_range, float(np.ptp(Y)))
        if self.best_value is None or self.improvement(out) > 0:
            self.best_value = float(out.fx)

        return met

    def reset(self) -> None:
        self.best_value = None
        self.value_range = 0.0


class RobustCondition(TerminationCondition):
    """Stop when another condition is met in ``period`` consecutive
    iterations.

    :param termination: Wrapped condition.
    :param period: Number of consecutive iterations, at least 1.

    .. attribute:: streak

        Number of consecutive updates in which the wrapped condition was met.
    """

    def __init__(self, termination: TerminationCondition, period=30) -> None:
        if period < 1:
            raise ValueError(f"period must be at least 1, got {period}")
        self.termination = termination
        self.period = period
        self.streak = 0

    def is_met(
        self, out: OptimizeResult, model: Optional[Surrogate] = None
    ) -> bool:
        if not self.termination.is_met(out, model):
            return False
        return self.streak + 1 >= self.period

    def update(
        self, out: OptimizeResult, model: Optional[Surrogate] = None
    ) -> bool:
        if self.termination.update(out, model):
            self.streak += 1
        else:
            self.streak = 0
        return self.streak >= self.period

    def reset(self) -> None:
        self.streak = 0
        self.termination.reset()
