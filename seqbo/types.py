"""Enumerations used to configure models, acquisitions and problems."""

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

from enum import Enum

__all__ = [
    "ProblemType",
    "KernelType",
    "SurrogateType",
    "AcquisitionType",
    "AcquisitionState",
]


class _LookupEnum(str, Enum):
    """String enumeration with case-insensitive lookup and aliases."""

    @classmethod
    def _aliases(cls) -> dict:
        return {}

    @classmethod
    def _missing_(cls, value):
        if isinstance(value, str):
            key = value.strip().lower()
            for member in cls:
                if member.value.lower() == key or member.name.lower() == key:
                    return member
            aliases = cls._aliases()
            if key in aliases:
                return cls(aliases[key])
        return None


class ProblemType(_LookupEnum):
    """Whether the black-box function is to be maximized or minimized.

    ``True`` is accepted as an alias for :attr:`MAXIMIZE` and ``False`` for
    :attr:`MINIMIZE`.
    """

    MAXIMIZE = "max"
    MINIMIZE = "min"

    @classmethod
    def _aliases(cls) -> dict:
        return {
            "maximize": "max",
            "maximise": "max",
            "maximum": "max",
            "minimize": "min",
            "minimise": "min",
            "minimum": "min",
        }

    @classmethod
    def _missing_(cls, value):
        if isinstance(value, bool):
            return cls.MAXIMIZE if value else cls.MINIMIZE
        return super()._missing_(value)

    @property
    def sign(self) -> float:
        """+1 when maximizing, -1 when minimizing."""
        return 1.0 if self is ProblemType.MAXIMIZE else -1.0


class KernelType(_LookupEnum):
    """ARD covariance functions supported by the Gaussian process."""

    ARD_SQUARED_EXPONENTIAL = "ARDsquaredExponential"
    ARD_EXPONENTIAL = "ARDexponential"
    ARD_MATERN32 = "ARDmatern32"
    ARD_MATERN52 = "ARDmatern52"

    @classmethod
    def _aliases(cls) -> dict:
        return {
            "se": "ARDsquaredExponential",
            "rbf": "ARDsquaredExponential",
            "exponential": "ARDexponential",
            "matern32": "ARDmatern32",
            "matern52": "ARDmatern52",
        }


class SurrogateType(_LookupEnum):
    """Surrogate model families."""

    GP = "gpr"
    RF = "rf"

    @classmethod
    def _aliases(cls) -> dict:
        return {"gaussian_process": "gpr", "random_forest": "rf"}


class AcquisitionType(_LookupEnum):
    """Acquisition function variants."""

    EI = "ei"
    AEI = "aei"
    UCB = "ucb"


class AcquisitionState(str, Enum):
    """Stage of an acquisition-maximization round."""

    IDLE = "idle"
    SCORING = "scoring"
    CONVERGED = "converged"
