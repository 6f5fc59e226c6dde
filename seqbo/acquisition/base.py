"""Base class for acquisition functions."""

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
from abc import ABC, abstractmethod
from typing import Optional, Tuple

import numpy as np

from ..model.base import Surrogate
from ..types import AcquisitionState, AcquisitionType, ProblemType
from ..utils import safe_zscore

logger = logging.getLogger(__name__)


class AcquisitionFunction(ABC):
    """Base class for acquisition functions.

    This an abstract class. Subclasses must implement :meth:`_score()`,
    :meth:`set_hyperparameters()` and the property :attr:`hyperparameters`.

    An acquisition function scores candidate points using the posterior of a
    surrogate model. Scores are negated so that the best candidate has the
    smallest score, which is what the solver in
    :meth:`seqbo.optimize.BayesOpt.maximize_acquisition()` minimizes.

    Each acquisition-maximization round goes through the states
    :attr:`~seqbo.types.AcquisitionState.IDLE` (after :meth:`begin_round()`),
    :attr:`~seqbo.types.AcquisitionState.SCORING` (while :meth:`evaluate()` is
    called) and :attr:`~seqbo.types.AcquisitionState.CONVERGED` (after
    :meth:`end_round()`).

    :param surrogateModel: Surrogate model. Stored in :attr:`surrogateModel`.
    :param problem: Whether the black-box function is maximized or
        minimized. Default is to maximize.

    .. attribute:: surrogateModel

        Surrogate model providing the posterior mean and standard deviation.

    .. attribute:: acquisition_type

        Variant of the acquisition function.
    """

    acquisition_type: AcquisitionType

    def __init__(
        self, surrogateModel: Surrogate, problem=ProblemType.MAXIMIZE
    ) -> None:
        self.surrogateModel = surrogateModel
        self._problem = ProblemType(problem)
        self._best_x: Optional[np.ndarray] = None
        self._state = AcquisitionState.IDLE

    @property
    def problem(self) -> ProblemType:
        """Whether the black-box function is maximized or minimized."""
        return self._problem

    def set_problem_type(self, problem) -> None:
        """Set the problem type.

        :param problem: :class:`~seqbo.types.ProblemType` or its name.
        """
        self._problem = ProblemType(problem)

    @property
    def state(self) -> AcquisitionState:
        """Stage of the current acquisition-maximization round."""
        return self._state

    @property
    def best_x(self) -> Optional[np.ndarray]:
        """Last point chosen by maximizing the acquisition function."""
        return self._best_x

    def set_best_x(self, x) -> None:
        self._best_x = (
            None if x is None else np.asarray(x, dtype=float).ravel().copy()
        )

    @property
    def reference(self) -> float:
        """Best response in the training set for the problem type."""
        if self._problem is ProblemType.MAXIMIZE:
            return self.surrogateModel.fmax
        return self.surrogateModel.fmin

    def improvement(self, mu) -> np.ndarray:
        """Predicted improvement over :attr:`reference`.

        :param mu: Vector of posterior means.
        :return: ``mu - fmax`` when maximizing, ``fmin - mu`` when minimizing.
        """
        return self._problem.sign * (np.asarray(mu) - self.reference)

    def calc_zscore(
        self, X, margin: float = 0.0
    ) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
        """Standardized improvement at X.

        .. math::

            Z = \\frac{I(x) - \\xi}{\\sigma(x)},

        where :math:`I(x)` is :meth:`improvement()` and :math:`\\xi` is the
        margin. Rows with zero standard deviation get :math:`Z = 0`.

        :param X: m-by-dim matrix of points in raw coordinates.
        :param margin: Margin :math:`\\xi` subtracted from the improvement.
        :return:

            * Vector with m z-scores.
            * Vector with m posterior means.
            * Vector with m posterior standard deviations.
        """
        mu, sigma, _ = self.surrogateModel.predict(X)
        Z = safe_zscore(self.improvement(mu) - margin, sigma)
        return Z, mu, sigma

    def add_sample(self, Xnew, Ynew) -> None:
        """Add observations to the surrogate model and retrain it."""
        self.surrogateModel.update(Xnew, Ynew)

    # Round lifecycle

    def begin_round(self, nsample: Optional[int] = None) -> None:
        """Start an acquisition-maximization round.

        :param nsample: Number of samples collected so far.
        """
        self._state = AcquisitionState.IDLE

    def end_round(self, x) -> None:
        """Finish the round storing the chosen point.

        :param x: Point in raw coordinates.
        """
        self.set_best_x(x)
        self._state = AcquisitionState.CONVERGED

    def reset(self) -> None:
        """Clear any adaptive state."""
        return None

    # Scores

    def evaluate(self, X, hyperparameters=None) -> np.ndarray:
        """Score the points in X.

        :param X: m-by-dim matrix of points in raw coordinates. A vector
            with dim entries is a single point.
        :param hyperparameters: If given, set with
            :meth:`set_hyperparameters()` before scoring.
        :return: Vector with m scores. Smaller is better.
        """
        if hyperparameters is not None:
            self.set_hyperparameters(hyperparameters)
        self._state = AcquisitionState.SCORING
        return self._score(self.surrogateModel.as_points(X))

    def __call__(self, X) -> np.ndarray:
        return self.evaluate(X)

    @abstractmethod
    def _score(self, X: np.ndarray) -> np.ndarray:
        """Scores of the m-by-dim matrix of points X."""
        pass

    @property
    @abstractmethod
    def hyperparameters(self):
        """Current hyperparameters."""
        pass

    @abstractmethod
    def set_hyperparameters(self, value) -> None:
        """Validate and set the hyperparameters.

        :raises HyperparameterError: If the value is out of bounds. The
            object is left unchanged.
        """
        pass
