"""Problem definitions for interfacing with pymoo."""

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
from pymoo.core.problem import Problem


class PymooProblem(Problem):
    """Continuous single-objective problem for pymoo.

    The objective and the constraints are evaluated on the whole population
    at once.

    :param objfunc: Objective function. Receives an n-by-dim matrix and
        returns n values.
    :param bounds: List with the limits [x_min,x_max] of each direction x
        in the space.
    :param gfunc: Inequality constraints :math:`g(x) \\leq 0`. Receives an
        n-by-dim matrix and returns an n-by-n_ieq_constr matrix.
    :param n_ieq_constr: Number of inequality constraints.
    """

    def __init__(self, objfunc, bounds, gfunc=None, n_ieq_constr: int = 0):
        bounds = np.asarray(bounds, dtype=float)
        if gfunc is None and n_ieq_constr > 0:
            raise ValueError("Inequality constraints need a function")
        self.objfunc = objfunc
        self.gfunc = gfunc
        super().__init__(
            n_var=len(bounds),
            n_obj=1,
            n_ieq_constr=n_ieq_constr,
            xl=bounds[:, 0],
            xu=bounds[:, 1],
            vtype=float,
        )

    def _evaluate(self, x, out, *args, **kwargs):
        x = np.atleast_2d(x)
        out["F"] = np.asarray(self.objfunc(x), dtype=float).reshape(-1, 1)
        if self.gfunc is not None:
            out["G"] = np.asarray(self.gfunc(x), dtype=float).reshape(
                len(x), -1
            )
