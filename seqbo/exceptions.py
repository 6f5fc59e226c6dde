"""Exceptions raised by seqbo."""

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

__all__ = [
    "SeqboError",
    "HyperparameterError",
    "TrainingDataError",
    "ModelNotTrainedError",
    "DegenerateCodingError",
]


class SeqboError(Exception):
    """Base class for all errors raised by this package."""


class HyperparameterError(SeqboError, ValueError):
    """An acquisition hyperparameter is outside its declared bounds.

    The object that rejected the value is left unchanged.
    """


class TrainingDataError(SeqboError, ValueError):
    """Training data is empty or its dimensions are inconsistent."""


class ModelNotTrainedError(SeqboError, RuntimeError):
    """A prediction was requested before the surrogate model was trained."""


class DegenerateCodingError(SeqboError, ValueError):
    """Coding bounds are equal (or inverted) in at least one dimension."""
