"""Constrained solvers for the acquisition problem."""

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
from typing import Callable, Optional

import numpy as np

# Scipy imports
from scipy.optimize import (
    Bounds,
    LinearConstraint,
    NonlinearConstraint,
    OptimizeResult,
    minimize,
)

# Pymoo imports
from pymoo.algorithms.soo.nonconvex.de import DE
from pymoo.optimize import minimize as pymoo_minimize

# Local imports
from .problem import PymooProblem

logger = logging.getLogger(__name__)

#: Solver method that runs pymoo's Differential Evolution
GLOBAL_METHOD = "DE"


def _nonlcon_parts(nonlcon, x0):
    """Sizes of the inequality and equality parts of a nonlinear constraint
    function at x0."""
    c, ceq = nonlcon(x0)
    nc = 0 if c is None else np.atleast_1d(c).size
    nceq = 0 if ceq is None else np.atleast_1d(ceq).size
    return nc, nceq


def _scipy_constraints(x0, A, b, Aeq, beq, nonlcon) -> list:
    constraints = []
    if A is not None:
        constraints.append(LinearConstraint(A, -np.inf, b))
    if Aeq is not None:
        constraints.append(LinearConstraint(Aeq, beq, beq))
    if nonlcon is not None:
        nc, nceq = _nonlcon_parts(nonlcon, x0)
        if nc > 0:
            constraints.append(
                NonlinearConstraint(
                    lambda x: np.atleast_1d(nonlcon(x)[0]), -np.inf, 0.0
                )
            )
        if nceq > 0:
            constraints.append(
                NonlinearConstraint(
                    lambda x: np.atleast_1d(nonlcon(x)[1]), 0.0, 0.0
                )
            )
    return constraints


def _solve_de(objective, x0, lb, ub, A, b, nonlcon, options, seed):
    options = dict(options or {})
    maxiter = options.pop("maxiter", None)

    nA = 0 if A is None else A.shape[0]
    nc = 0
    if nonlcon is not None:
        nc, nceq = _nonlcon_parts(nonlcon, x0)
        if nceq > 0:
            raise ValueError(
                f"Method {GLOBAL_METHOD} does not support equality constraints"
            )

    gfunc = None
    if nA + nc > 0:

        def gfunc(X):
            G = np.empty((len(X), nA + nc))
            if nA > 0:
                G[:, :nA] = X @ A.T - b
            if nc > 0:
                G[:, nA:] = [np.atleast_1d(nonlcon(x)[0]) for x in X]
            return G

    problem = PymooProblem(
        objective,
        np.column_stack((lb, ub)),
        gfunc=gfunc,
        n_ieq_constr=nA + nc,
    )
    res = pymoo_minimize(
        problem,
        DE(**options),
        ("n_gen", maxiter) if maxiter is not None else None,
        seed=seed,
        verbose=False,
    )

    if res.X is None:
        return OptimizeResult(
            x=np.array(x0, copy=True),
            fun=float(objective(np.atleast_2d(x0))[0]),
            success=False,
            message="No feasible point was found",
            nfev=res.algorithm.evaluator.n_eval,
        )
    return OptimizeResult(
        x=np.asarray(res.X, dtype=float).ravel(),
        fun=float(np.asarray(res.F).ravel()[0]),
        success=True,
        message="Optimization terminated successfully",
        nfev=res.algorithm.evaluator.n_eval,
    )


def _better(res, best) -> bool:
    """True if the local solution res beats best."""
    if bool(res.success) != bool(best.success):
        return bool(res.success)
    return res.fun < best.fun


def solve(
    objective: Callable[[np.ndarray], np.ndarray],
    x0,
    lb,
    ub,
    *,
    A=None,
    b=None,
    Aeq=None,
    beq=None,
    nonlcon: Optional[Callable] = None,
    method: str = "SLSQP",
    options: Optional[dict] = None,
    seed=None,
) -> OptimizeResult:
    """Minimize an objective inside a box subject to optional constraints.

    The problem is

    .. math::

        \\min_{lb \\leq x \\leq ub} f(x) \\quad \\text{s.t.} \\quad
        A x \\leq b, \\quad A_{eq} x = b_{eq}, \\quad c(x) \\leq 0,
        \\quad c_{eq}(x) = 0.

    Local methods are those of :func:`scipy.optimize.minimize`, e.g.,
    "SLSQP", "trust-constr" or "COBYLA". They run once from each starting
    point and keep the best solution, preferring successful runs. The method
    "DE" runs pymoo's Differential Evolution, which supports inequality
    constraints only.

    :param objective: Objective function. Receives an n-by-dim matrix and
        returns n values.
    :param x0: Starting point, or matrix with one starting point per row.
        "DE" ignores it except when no feasible point is found, in which
        case the first row is returned.
    :param lb: Lower bounds.
    :param ub: Upper bounds.
    :param A: Matrix of the linear inequality constraints.
    :param b: Right-hand side of the linear inequality constraints.
    :param Aeq: Matrix of the linear equality constraints.
    :param beq: Right-hand side of the linear equality constraints.
    :param nonlcon: Function mapping a point to the tuple (c, ceq) of
        nonlinear inequality and equality constraint values. Either may be
        None.
    :param method: Solver method.
    :param options: Options for the solver. For "DE", "maxiter" sets the
        number of generations and the remaining entries go to
        :class:`pymoo.algorithms.soo.nonconvex.de.DE`.
    :param seed: Seed for "DE".
    :return: The optimization result with attributes x, fun, success,
        message and nfev. For local methods, nfev adds up all runs.
    """
    X0 = np.atleast_2d(np.asarray(x0, dtype=float))
    lb = np.asarray(lb, dtype=float).ravel()
    ub = np.asarray(ub, dtype=float).ravel()
    if A is not None:
        A = np.atleast_2d(np.asarray(A, dtype=float))
        b = np.asarray(b, dtype=float).ravel()
    if Aeq is not None:
        Aeq = np.atleast_2d(np.asarray(Aeq, dtype=float))
        beq = np.asarray(beq, dtype=float).ravel()

    logger.debug(
        "Solving with %s from %d starting point(s), x0 = %s",
        method,
        len(X0),
        X0[0],
    )

    if method.upper() == GLOBAL_METHOD:
        if Aeq is not None:
            raise ValueError(
                f"Method {GLOBAL_METHOD} does not support equality constraints"
            )
        return _solve_de(objective, X0[0], lb, ub, A, b, nonlcon, options, seed)

    constraints = _scipy_constraints(X0[0], A, b, Aeq, beq, nonlcon)
    best = None
    nfev = 0
    for x0 in X0:
        res = minimize(
            lambda x: float(objective(x.reshape(1, -1))[0]),
            x0,
            method=method,
            bounds=Bounds(lb, ub),
            constraints=constraints,
            options=options,
        )
        res.x = np.clip(res.x, lb, ub)
        nfev += res.get("nfev", 0)
        if best is None or _better(res, best):
            best = res
    best.nfev = nfev
    return best
