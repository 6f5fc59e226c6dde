"""Random forest surrogate."""

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

from typing import Optional, Tuple

import numpy as np
from sklearn.ensemble import RandomForestRegressor

from ..types import SurrogateType
from .base import Surrogate


class RandomForest(Surrogate):
    """Random forest surrogate.

    The predictive distribution is the empirical distribution of the
    predictions of the individual trees.

    :param X: Optional initial training inputs.
    :param Y: Optional initial training responses.
    :param n_estimators: Number of trees.
    :param min_samples_leaf: Minimum number of samples in a leaf.
    :param random_state: Seed of the forest.
    :param kwargs: Further arguments for
        :class:`~sklearn.ensemble.RandomForestRegressor`.
    """

    model_type = SurrogateType.RF

    def __init__(
        self,
        X=None,
        Y=None,
        *,
        n_estimators: int = 100,
        min_samples_leaf: int = 1,
        random_state=None,
        **kwargs,
    ) -> None:
        self.n_estimators = n_estimators
        self.min_samples_leaf = min_samples_leaf
        self.random_state = random_state
        self.options = dict(kwargs)
        self.model: Optional[RandomForestRegressor] = None
        super().__init__(X, Y)

    def _fit(self, Xc: np.ndarray, Y: np.ndarray, **kwargs) -> None:
        options = {
            "n_estimators": self.n_estimators,
            "min_samples_leaf": self.min_samples_leaf,
            "random_state": self.random_state,
            **self.options,
            **kwargs,
        }
        self.model = RandomForestRegressor(**options)
        self.model.fit(Xc, Y)

    def _tree_predictions(self, Xc: np.ndarray) -> np.ndarray:
        return np.array([tree.predict(Xc) for tree in self.model.estimators_])

    def _predict(
        self, Xc: np.ndarray, alpha: float
    ) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
        P = self._tree_predictions(Xc)
        mean = P.mean(axis=0)
        std = P.std(axis=0)
        interval = np.percentile(
            P, [50 * alpha, 100 - 50 * alpha], axis=0
        ).T
        return mean, std, interval

    def sigma(self, X=None) -> np.ndarray:
        """Covariance of the tree predictions at X.

        :param X: m-by-dim matrix of points in raw coordinates. Defaults to
            the training inputs.
        :return: m-by-m covariance matrix.
        """
        self._require_trained()
        X = self._X if X is None else self.as_points(X)
        P = self._tree_predictions(self.code(X))
        return np.atleast_2d(np.cov(P, rowvar=False, bias=True))
