"""Bayesian optimization loop."""

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
from collections.abc import Callable
from typing import Optional

import numpy as np

from ..optimize_result import OptimizeResult
from ..termination import TerminationCondition
from ..types import ProblemType
from .bayes_opt import BayesOpt

logger = logging.getLogger(__name__)


def bayesian_optimization(
    fun,
    bounds,
    maxeval: int,
    *,
    optimizer: Optional[BayesOpt] = None,
    ninit: Optional[int] = None,
    problem=ProblemType.MINIMIZE,
    termination: Optional[TerminationCondition] = None,
    seed=None,
    callback: Optional[Callable[[OptimizeResult], None]] = None,
    **kwargs,
) -> OptimizeResult:
    """Optimize a scalar function of one or more variables via active
    learning of a surrogate model.

    The loop works as follows:

        1. If the optimizer has no training data, evaluate the objective
           function on a Latin hypercube design with ``ninit`` points and
           train the surrogate model.

        2. Repeat 3-5 until there are no function evaluations left or the
           termination condition is met.

        3. Maximize the acquisition function inside the bounds.

        4. Evaluate the objective function at the new point.

        5. Add the new observation to the surrogate model and update the
           optimization solution.

    :param fun: The objective function. Receives an n-by-dim matrix and
        returns n values.
    :param bounds: List with the limits [x_min,x_max] of each direction x in
        the search space.
    :param maxeval: Maximum number of function evaluations.
    :param optimizer: Driver to be used. If None, a
        :class:`~seqbo.optimize.BayesOpt` with a Gaussian process and
        expected improvement is used. On exit, the driver holds all points
        evaluated during the optimization.
    :param ninit: Size of the initial design. Default is ``max(2 * dim,
        3)``.
    :param problem: Whether the function is maximized or minimized. Default
        is to minimize.
    :param termination: Termination condition checked after each iteration.
    :param seed: Seed for random number generator.
    :param callback: If provided, the callback function will be called after
        each iteration with the current optimization result.
    :param kwargs: Further arguments for
        :meth:`~seqbo.optimize.BayesOpt.maximize_acquisition()`.
    :return: The optimization result.
    """
    bounds = np.asarray(bounds, dtype=float)
    dim = len(bounds)  # Dimension of the problem
    assert dim > 0
    lb, ub = bounds[:, 0], bounds[:, 1]

    # Initialize optional variables
    rng = np.random.default_rng(seed)
    problem = ProblemType(problem)
    if optimizer is None:
        optimizer = BayesOpt(
            "gpr",
            "ei",
            problem,
            model_options={
                "random_state": rng.integers(np.iinfo(np.int32).max).item()
            },
        )
    else:
        optimizer.set_problem_type(problem)
    if ninit is None:
        ninit = max(2 * dim, 3)

    # Initialize output
    out = OptimizeResult(problem=problem)
    out.init(
        fun,
        bounds,
        ninit,
        maxeval,
        optimizer.model,
        seed=rng.integers(np.iinfo(np.int32).max).item(),
    )

    # Train the surrogate on the search box
    optimizer.model.set_coding_bounds(lb, ub)
    if out.nfev > 0:
        optimizer.set_training_data(
            out.sample[0 : out.nfev], out.fsample[0 : out.nfev]
        )
    else:
        optimizer.model.train()
    out.init_best_values(optimizer.model)

    # Call the callback function
    if callback is not None:
        callback(out)

    while out.nfev < maxeval:
        logger.info(
            "Iteration %d, %d evaluations, best value %g",
            out.nit,
            out.nfev,
            out.fx,
        )

        xnext = optimizer.maximize_acquisition(lb, ub, **kwargs)
        ynext = np.asarray(fun(xnext.reshape(1, -1)), dtype=float).ravel()[0]

        optimizer.add_new_query(xnext, ynext)
        out.add(xnext, ynext)
        out.nit = out.nit + 1

        # Call the callback function
        if callback is not None:
            callback(out)

        if termination is not None and termination.update(
            out, optimizer.model
        ):
            logger.info("Termination condition met")
            break

    # Update output
    out.sample = out.sample[0 : out.nfev].copy()
    out.fsample = out.fsample[0 : out.nfev].copy()

    return out
