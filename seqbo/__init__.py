"""Sequential Bayesian optimization of expensive black-box functions."""

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

from .coding import DataCoder
from .exceptions import (
    DegenerateCodingError,
    HyperparameterError,
    ModelNotTrainedError,
    SeqboError,
    TrainingDataError,
)
from .types import (
    AcquisitionState,
    AcquisitionType,
    KernelType,
    ProblemType,
    SurrogateType,
)
from .model import GaussianProcess, RandomForest, Surrogate
from .acquisition import (
    AcquisitionFunction,
    AdaptiveExpectedImprovement,
    ExpectedImprovement,
    UpperConfidenceBound,
)
from .optimize import BayesOpt, OptimizeResult, bayesian_optimization

__version__ = "0.1.0"
