"""Factories for surrogate models and acquisition functions."""

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

from typing import Optional

from .acquisition import (
    AcquisitionFunction,
    AdaptiveExpectedImprovement,
    ExpectedImprovement,
    UpperConfidenceBound,
)
from .model import GaussianProcess, RandomForest, Surrogate
from .types import AcquisitionType, ProblemType, SurrogateType

SURROGATES = {
    SurrogateType.GP: GaussianProcess,
    SurrogateType.RF: RandomForest,
}

ACQUISITIONS = {
    AcquisitionType.EI: ExpectedImprovement,
    AcquisitionType.AEI: AdaptiveExpectedImprovement,
    AcquisitionType.UCB: UpperConfidenceBound,
}


def make_surrogate(model, options: Optional[dict] = None) -> Surrogate:
    """Build a surrogate model.

    :param model: :class:`~seqbo.types.SurrogateType` or its name, or an
        already built :class:`~seqbo.model.Surrogate`, returned as is.
    :param options: Keyword arguments for the constructor.
    """
    if isinstance(model, Surrogate):
        return model
    return SURROGATES[SurrogateType(model)](**(options or {}))


def make_acquisition(
    acquisition,
    surrogateModel: Surrogate,
    problem=ProblemType.MAXIMIZE,
    options: Optional[dict] = None,
) -> AcquisitionFunction:
    """Build an acquisition function.

    :param acquisition: :class:`~seqbo.types.AcquisitionType` or its name.
    :param surrogateModel: Surrogate model used by the acquisition function.
    :param problem: Whether the black-box function is maximized or
        minimized.
    :param options: Further keyword arguments for the constructor.
    """
    cls = ACQUISITIONS[AcquisitionType(acquisition)]
    return cls(surrogateModel, problem, **(options or {}))
