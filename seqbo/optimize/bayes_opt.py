"""Sequential Bayesian optimization driver."""

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
from typing import Callable, Optional, Tuple

import numpy as np

from ..exceptions import ModelNotTrainedError
from ..registry import make_acquisition, make_surrogate
from ..solver import solve
from ..types import AcquisitionType, ProblemType, SurrogateType
from ..utils import latin_hypercube

logger = logging.getLogger(__name__)

#: Default number of starting points for local solvers
DEFAULT_NSTARTS = 10


class BayesOpt:
    """Compose a surrogate model and an acquisition function to choose the
    next point to query.

    The caller evaluates the black-box function at the point returned by
    :meth:`maximize_acquisition()` and feeds the result back with
    :meth:`add_new_query()`.

    :param model: :class:`~seqbo.types.SurrogateType` or its name ("gpr" or
        "rf"), or a :class:`~seqbo.model.Surrogate` instance.
    :param acquisition: :class:`~seqbo.types.AcquisitionType` or its name
        ("ei", "aei" or "ucb").
    :param problem: Whether the black-box function is maximized or
        minimized.
    :param model_options: Keyword arguments for the surrogate model.
    :param acquisition_options: Keyword arguments for the acquisition
        function.

    .. attribute:: model

        Surrogate model.

    .. attribute:: acquisition

        Acquisition function.

    .. attribute:: last_solution

        Result of the last solver call, or None.
    """

    def __init__(
        self,
        model="gpr",
        acquisition="ucb",
        problem=ProblemType.MAXIMIZE,
        *,
        model_options: Optional[dict] = None,
        acquisition_options: Optional[dict] = None,
    ) -> None:
        self.model = make_surrogate(model, model_options)
        self.acquisition = make_acquisition(
            acquisition, self.model, problem, acquisition_options
        )
        self.last_solution = None

    # Data

    def set_training_data(self, X, Y, **kwargs) -> None:
        """Replace the training data and train the model.

        :param X: m-by-dim matrix of inputs.
        :param Y: Vector of m responses.
        :param kwargs: Options forwarded to the backend estimator.
        """
        self.model.set_training_data(X, Y)
        self.model.train(**kwargs)
        self.acquisition.set_best_x(None)
        self.acquisition.reset()

    def add_new_query(self, Xnew, Ynew, **kwargs) -> None:
        """Append observations and retrain the model.

        :param Xnew: Point or m-by-dim matrix of new inputs.
        :param Ynew: Response or vector of m new responses.
        :param kwargs: Options forwarded to the backend estimator.
        """
        self.model.update(Xnew, Ynew, **kwargs)

    def predict(
        self, Xnew=None, alpha: float = 0.05
    ) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
        """Posterior mean, standard deviation and prediction interval.

        See :meth:`seqbo.model.Surrogate.predict()`.
        """
        return self.model.predict(Xnew, alpha)

    def configure_coding(self, lower=None, upper=None) -> None:
        """Pin the coding bounds of the model, or unpin them when both are
        None. Retrains the model if it has data."""
        if lower is None and upper is None:
            self.model.clear_coding_bounds()
        else:
            self.model.set_coding_bounds(lower, upper)
        if self.model.ntrain > 0 and not self.model.trained:
            self.model.train()

    def set_problem_type(self, problem) -> None:
        self.acquisition.set_problem_type(problem)

    def set_hyperparameters(self, value) -> None:
        self.acquisition.set_hyperparameters(value)

    # Derived properties

    @property
    def X(self) -> np.ndarray:
        return self.model.X

    @property
    def Y(self) -> np.ndarray:
        return self.model.Y

    @property
    def problem(self) -> ProblemType:
        return self.acquisition.problem

    @property
    def hyperparameters(self):
        return self.acquisition.hyperparameters

    @property
    def model_type(self) -> SurrogateType:
        return self.model.model_type

    @property
    def acquisition_type(self) -> AcquisitionType:
        return self.acquisition.acquisition_type

    @property
    def xnext(self) -> Optional[np.ndarray]:
        """Point chosen by the last call to :meth:`maximize_acquisition()`."""
        return self.acquisition.best_x

    @property
    def xbest(self) -> np.ndarray:
        """Training input with the best response."""
        return self.model.best(self.problem)[0]

    @property
    def ybest(self) -> float:
        """Best response in the training data."""
        return self.model.best(self.problem)[1]

    # Acquisition

    def maximize_acquisition(
        self,
        lb=None,
        ub=None,
        *,
        x0=None,
        A=None,
        b=None,
        Aeq=None,
        beq=None,
        nonlcon: Optional[Callable] = None,
        method: str = "SLSQP",
        options: Optional[dict] = None,
        seed=None,
        nstarts: int = DEFAULT_NSTARTS,
    ) -> np.ndarray:
        """Find the point that maximizes the acquisition function.

        The solver works on coded coordinates. Bounds, starting point and
        linear constraints are coded here. Nonlinear constraints receive
        decoded points.

        :param lb: Lower bounds. Default is the smallest training input in
            each dimension.
        :param ub: Upper bounds. Default is the largest training input in
            each dimension.
        :param x0: First starting point. Default is the last point chosen, or
            the training input with the best response. It is moved inside
            the bounds if needed.
        :param A: Matrix of the linear inequality constraints
            :math:`A x \\leq b`.
        :param b: Right-hand side of the linear inequality constraints.
        :param Aeq: Matrix of the linear equality constraints
            :math:`A_{eq} x = b_{eq}`.
        :param beq: Right-hand side of the linear equality constraints.
        :param nonlcon: Function mapping a point to the tuple (c, ceq), with
            feasible points satisfying :math:`c \\leq 0` and
            :math:`c_{eq} = 0`.
        :param method: Solver method. See :func:`seqbo.solver.solve()`.
        :param options: Options for the solver.
        :param seed: Seed for global solvers and for the extra starting
            points. Default is the number of training points.
        :param nstarts: Number of starting points for local solvers: x0
            followed by ``nstarts - 1`` points of a Latin hypercube design
            inside the bounds. Ignored by global solvers.
        :return: The next point to query, in raw coordinates.
        """
        if nstarts < 1:
            raise ValueError(f"nstarts must be at least 1, got {nstarts}")
        if not self.model.trained:
            raise ModelNotTrainedError(
                "Must first train the model before maximizing the "
                "acquisition function"
            )
        coder = self.model.coder
        X = self.model.X

        lb = X.min(axis=0) if lb is None else np.asarray(lb, dtype=float)
        ub = X.max(axis=0) if ub is None else np.asarray(ub, dtype=float)
        lbc = coder.code(np.broadcast_to(lb, (self.model.dim,)))
        ubc = coder.code(np.broadcast_to(ub, (self.model.dim,)))
        if np.any(ubc < lbc):
            raise ValueError("Lower bounds must not exceed upper bounds")

        if x0 is None:
            x0 = self.acquisition.best_x
        if x0 is None:
            x0 = self.xbest
        x0c = coder.code(np.asarray(x0, dtype=float).ravel())
        x0c_clipped = np.clip(x0c, lbc, ubc)
        if not np.array_equal(x0c, x0c_clipped):
            logger.warning("Starting point moved inside the bounds")

        # Linear constraints in coded coordinates
        Ac = bc = Aeqc = beqc = None
        if A is not None:
            A = np.atleast_2d(np.asarray(A, dtype=float))
            Ac = A * coder.scale
            bc = np.asarray(b, dtype=float).ravel() - A @ coder.center
        if Aeq is not None:
            Aeq = np.atleast_2d(np.asarray(Aeq, dtype=float))
            Aeqc = Aeq * coder.scale
            beqc = np.asarray(beq, dtype=float).ravel() - Aeq @ coder.center

        nonlcon_c = None
        if nonlcon is not None:

            def nonlcon_c(xc):
                return nonlcon(coder.decode(xc))

        def objective(Xc):
            return self.acquisition.evaluate(coder.decode(Xc))

        if seed is None:
            seed = self.model.ntrain
        starts = x0c_clipped.reshape(1, -1)
        if nstarts > 1:
            U = latin_hypercube(
                [[0.0, 1.0]] * len(lbc), nstarts - 1, seed=seed
            )
            starts = np.vstack((starts, lbc + U * (ubc - lbc)))

        self.acquisition.begin_round(self.model.ntrain)
        res = solve(
            objective,
            starts,
            lbc,
            ubc,
            A=Ac,
            b=bc,
            Aeq=Aeqc,
            beq=beqc,
            nonlcon=nonlcon_c,
            method=method,
            options=options,
            seed=seed,
        )
        self.last_solution = res
        if not res.success:
            logger.warning(
                "Acquisition maximization was not successful: %s",
                res.message,
            )

        xnext = coder.decode(res.x)
        self.acquisition.end_round(xnext)
        logger.info("Next query point: %s", xnext)
        return xnext
