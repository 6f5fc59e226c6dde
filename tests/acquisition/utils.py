"""Utilities for the acquisition function tests."""

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

from seqbo.model.base import Surrogate
from seqbo.types import SurrogateType


class MockSurrogateModel(Surrogate):
    """Surrogate with a prescribed posterior.

    :param X: Training inputs.
    :param Y: Training responses.
    :param mean: Function mapping an m-by-dim matrix of raw points to m
        means. Default is the sum of the coordinates.
    :param std: Function mapping an m-by-dim matrix of raw points to m
        standard deviations. Default is 1 everywhere.
    """

    model_type = SurrogateType.GP

    def __init__(self, X, Y, mean=None, std=None):
        super().__init__(X, Y)
        self.mean = (lambda x: x.sum(axis=1)) if mean is None else mean
        self.std = (lambda x: np.ones(len(x))) if std is None else std
        self.ncalls = 0
        self.train()

    def _fit(self, Xc, Y, **kwargs):
        pass

    def _predict(self, Xc, alpha):
        self.ncalls += 1
        X = self.decode(Xc)
        mean = np.asarray(self.mean(X), dtype=float)
        std = np.asarray(self.std(X), dtype=float)
        return mean, std, np.column_stack((mean - 2 * std, mean + 2 * std))

    def sigma(self, X=None):
        X = self.X if X is None else self.as_points(X)
        return np.diag(np.asarray(self.std(X), dtype=float) ** 2)
