"""Base class for surrogate models."""

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
from typing import Optional, Sequence, Tuple

import numpy as np

from ..coding import DataCoder
from ..exceptions import ModelNotTrainedError, TrainingDataError
from ..types import ProblemType, SurrogateType

logger = logging.getLogger(__name__)


class Surrogate(ABC):
    """Base class for surrogate models.

    The surrogate owns the training set, codes inputs onto [-1, 1] with a
    :class:`~seqbo.coding.DataCoder`, and delegates fitting and prediction to
    a regression backend. Subclasses must implement :meth:`_fit()`,
    :meth:`_predict()` and :meth:`sigma()`.

    The coding bounds are the column extrema of the training inputs unless
    they were pinned with :meth:`set_coding_bounds()`.

    :param X: Optional initial m-by-dim matrix of training inputs.
    :param Y: Optional initial vector of m training responses.

    .. attribute:: model_type

        Family of the surrogate model.

    .. attribute:: xnames

        Names of the input variables, if set.

    .. attribute:: yname

        Name of the response variable.
    """

    model_type: SurrogateType

    def __init__(self, X=None, Y=None) -> None:
        self._X = np.empty((0, 0))
        self._Y = np.empty(0)
        self._trained = False
        self._pinned_coder: Optional[DataCoder] = None

        self.xnames: Optional[list] = None
        self.yname = "Y"
        self.xunits: Optional[list] = None
        self.yunits: Optional[str] = None

        if X is not None and Y is not None:
            self.set_training_data(X, Y)

    # Training data

    @property
    def X(self) -> np.ndarray:
        """Training inputs."""
        return self._X

    @property
    def Y(self) -> np.ndarray:
        """Training responses."""
        return self._Y

    @property
    def ntrain(self) -> int:
        """Number of training points."""
        return self._Y.size

    @property
    def dim(self) -> int:
        """Number of input variables."""
        return self._X.shape[1] if self.ntrain > 0 else 0

    @property
    def trained(self) -> bool:
        """True if the model was trained after the last change of data."""
        return self._trained

    @staticmethod
    def _check_data(X, Y) -> Tuple[np.ndarray, np.ndarray]:
        X = np.asarray(X, dtype=float)
        Y = np.asarray(Y, dtype=float)
        if X.ndim == 1:
            X = X.reshape(-1, 1)
        if Y.ndim == 2 and 1 in Y.shape:
            Y = Y.ravel()
        if X.size == 0 or Y.size == 0:
            raise TrainingDataError("Training data must not be empty")
        if X.ndim != 2:
            raise TrainingDataError(
                f"Training inputs must be a matrix, got {X.ndim} dimensions"
            )
        if Y.ndim != 1:
            raise TrainingDataError("Training responses must be a vector")
        if X.shape[0] != Y.size:
            raise TrainingDataError(
                f"Number of input rows ({X.shape[0]}) does not match the "
                f"number of responses ({Y.size})"
            )
        return X, Y

    def set_training_data(self, X, Y) -> None:
        """Replace the training data.

        The model must be trained again with :meth:`train()` before it can
        be used for predictions.

        :param X: m-by-dim matrix of inputs. A vector is a single column.
        :param Y: Vector of m responses.
        """
        X, Y = self._check_data(X, Y)
        if (
            self._pinned_coder is not None
            and X.shape[1] != self._pinned_coder.dim
        ):
            raise TrainingDataError(
                f"Training inputs have {X.shape[1]} columns but the coding "
                f"bounds have {self._pinned_coder.dim}"
            )
        self._trained = False
        self._X = X.copy()
        self._Y = Y.copy()

    def update(self, Xnew, Ynew, **kwargs) -> None:
        """Append new training data and retrain the model.

        :param Xnew: m-by-dim matrix of new inputs. A vector is a single
            point.
        :param Ynew: Vector of m new responses.
        :param kwargs: Forwarded to :meth:`train()`.
        """
        Xnew = np.asarray(Xnew, dtype=float)
        if Xnew.ndim == 1 and self.ntrain > 0:
            Xnew = Xnew.reshape(1, -1)
        Xnew, Ynew = self._check_data(Xnew, np.atleast_1d(Ynew))
        if self.ntrain > 0:
            if Xnew.shape[1] != self.dim:
                raise TrainingDataError(
                    f"New inputs have {Xnew.shape[1]} columns, expected "
                    f"{self.dim}"
                )
            Xnew = np.concatenate((self._X, Xnew), axis=0)
            Ynew = np.concatenate((self._Y, Ynew))
        self.set_training_data(Xnew, Ynew)
        self.train(**kwargs)

    def reset_data(self) -> None:
        """Remove all training data."""
        self._X = np.empty((0, 0))
        self._Y = np.empty(0)
        self._trained = False

    # Coding

    @property
    def coder(self) -> DataCoder:
        """Coder in use: pinned bounds, or bounds derived from the data."""
        if self._pinned_coder is not None:
            return self._pinned_coder
        if self.ntrain == 0:
            raise TrainingDataError(
                "Coding bounds are undefined without training data"
            )
        return DataCoder.from_data(self._X)

    def set_coding_bounds(self, lower, upper) -> None:
        """Pin the coding bounds.

        Changing the coding changes the coded training data, so the model
        must be trained again.

        :param lower: Lower bound of each input variable.
        :param upper: Upper bound of each input variable.
        """
        coder = DataCoder(lower, upper)
        if self.ntrain > 0 and coder.dim != self.dim:
            raise TrainingDataError(
                f"Coding bounds have {coder.dim} dimensions, expected "
                f"{self.dim}"
            )
        self._pinned_coder = coder
        self._trained = False

    def clear_coding_bounds(self) -> None:
        """Go back to coding bounds derived from the training data."""
        if self._pinned_coder is not None:
            self._pinned_coder = None
            self._trained = False

    def code(self, X) -> np.ndarray:
        """Code X onto [-1, 1]."""
        return self.coder.code(X)

    def decode(self, Xc) -> np.ndarray:
        """Map coded data back onto raw coordinates."""
        return self.coder.decode(Xc)

    @property
    def Xc(self) -> np.ndarray:
        """Coded training inputs."""
        return self.code(self._X)

    # Extrema of the training data

    def _require_data(self) -> None:
        if self.ntrain == 0:
            raise TrainingDataError("The training set is empty")

    @property
    def fmax(self) -> float:
        """Largest response in the training set."""
        self._require_data()
        return float(self._Y.max())

    @property
    def fmin(self) -> float:
        """Smallest response in the training set."""
        self._require_data()
        return float(self._Y.min())

    @property
    def xmax(self) -> np.ndarray:
        """Training input with the largest response."""
        self._require_data()
        return self._X[self._Y.argmax()].copy()

    @property
    def xmin(self) -> np.ndarray:
        """Training input with the smallest response."""
        self._require_data()
        return self._X[self._Y.argmin()].copy()

    def best(self, problem=ProblemType.MAXIMIZE) -> Tuple[np.ndarray, float]:
        """Best training point for the given problem type.

        :param problem: :class:`~seqbo.types.ProblemType` or its name.
        :return: Tuple (xbest, ybest).
        """
        if ProblemType(problem) is ProblemType.MAXIMIZE:
            return self.xmax, self.fmax
        return self.xmin, self.fmin

    # Labels

    def set_var_names(self, xnames: Sequence[str], yname: str = "Y") -> None:
        """Set the names of the input and response variables.

        :param xnames: One name per input variable.
        :param yname: Name of the response variable.
        """
        xnames = [str(name) for name in xnames]
        if len(xnames) != self.dim:
            raise TrainingDataError(
                f"Input name vector must have {self.dim} entries"
            )
        self.xnames = xnames
        self.yname = str(yname)

    def set_var_units(self, xunits: Sequence[str], yunits: str) -> None:
        """Set the units of the input and response variables.

        :param xunits: One unit per input variable.
        :param yunits: Unit of the response variable.
        """
        xunits = [str(unit) for unit in xunits]
        if len(xunits) != self.dim:
            raise TrainingDataError(
                f"Input unit vector must have {self.dim} entries"
            )
        self.xunits = xunits
        self.yunits = str(yunits)

    # Model

    def train(self, **kwargs) -> None:
        """Fit the regression backend on the coded training data.

        :param kwargs: Options forwarded to the backend estimator.
        """
        self._require_data()
        logger.debug(
            "Training %s surrogate on %d points in %d dimensions",
            self.model_type.value,
            self.ntrain,
            self.dim,
        )
        self._fit(self.Xc, self._Y, **kwargs)
        self._trained = True

    def _require_trained(self) -> None:
        if not self._trained:
            raise ModelNotTrainedError(
                "Must first train the model using train() before "
                "predictions can be made"
            )

    def predict(
        self, X=None, alpha: float = 0.05
    ) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
        """Posterior mean, standard deviation and prediction interval.

        :param X: m-by-dim matrix of points in raw coordinates. A vector is
            a single point. Defaults to the training inputs.
        :param alpha: The interval covers 100(1 - alpha)% of the predictive
            distribution.
        :return:

            * Vector with m predicted means.
            * Vector with m standard deviations.
            * m-by-2 matrix with the lower and upper interval limits.
        """
        self._require_trained()
        if not 0 < alpha < 1:
            raise ValueError(f"alpha must lie in (0, 1), got {alpha}")
        X = self.as_points(self._X if X is None else X)
        return self._predict(self.code(X), alpha)

    def __call__(self, X) -> np.ndarray:
        """Posterior mean at X."""
        return self.predict(X)[0]

    def as_points(self, X) -> np.ndarray:
        """Return X as an m-by-dim matrix of points.

        A vector with dim entries is a single point. Any other vector is a
        column of one-dimensional points.
        """
        X = np.asarray(X, dtype=float)
        if X.ndim == 1:
            X = X.reshape(1, -1) if X.size == self.dim else X.reshape(-1, 1)
        if X.shape[1] != self.dim:
            raise TrainingDataError(
                f"Points have {X.shape[1]} columns, expected {self.dim}"
            )
        return X

    @abstractmethod
    def _fit(self, Xc: np.ndarray, Y: np.ndarray, **kwargs) -> None:
        """Fit the backend on coded inputs."""
        pass

    @abstractmethod
    def _predict(
        self, Xc: np.ndarray, alpha: float
    ) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
        """Predict at coded inputs."""
        pass

    @abstractmethod
    def sigma(self, X=None) -> np.ndarray:
        """Posterior covariance matrix of the predictions at X.

        :param X: m-by-dim matrix of points in raw coordinates. Defaults to
            the training inputs.
        :return: m-by-m covariance matrix.
        """
        pass
