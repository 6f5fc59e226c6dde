"""Gaussian process surrogate."""

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
from typing import Optional, Tuple

import numpy as np
from scipy.linalg import cho_factor, cho_solve
from scipy.stats import norm

from sklearn.gaussian_process import GaussianProcessRegressor
from sklearn.gaussian_process.kernels import (
    RBF,
    ConstantKernel,
    Kernel,
    Matern,
    WhiteKernel,
)

from ..types import KernelType, SurrogateType
from .base import Surrogate
from .kernels import eval_kernel

logger = logging.getLogger(__name__)


class GaussianProcess(Surrogate):
    """Gaussian process surrogate with an ARD covariance function.

    Fitting and prediction are delegated to scikit-learn's
    :class:`~sklearn.gaussian_process.GaussianProcessRegressor`, which
    estimates the length-scales, the signal variance and, if ``noise`` is
    True, the noise variance by maximizing the log-marginal likelihood. The
    posterior covariance :meth:`sigma()` is computed here from the fitted
    hyperparameters with the exact kernel forms in
    :mod:`seqbo.model.kernels`.

    The backend kernel is ``ConstantKernel * base [+ WhiteKernel]`` with
    ``base`` one of

    - :attr:`~seqbo.types.KernelType.ARD_SQUARED_EXPONENTIAL`: ``RBF``
    - :attr:`~seqbo.types.KernelType.ARD_EXPONENTIAL`: ``Matern(nu=0.5)``
    - :attr:`~seqbo.types.KernelType.ARD_MATERN32`: ``Matern(nu=1.5)``
    - :attr:`~seqbo.types.KernelType.ARD_MATERN52`: ``Matern(nu=2.5)``

    :param X: Optional initial training inputs.
    :param Y: Optional initial training responses.
    :param kernel: Covariance function. Default is the ARD squared
        exponential.
    :param noise: If True, fit a white noise term.
    :param noise_level: Initial noise variance when ``noise`` is True.
    :param n_restarts_optimizer: Number of restarts of the marginal
        likelihood optimizer.
    :param random_state: Seed for the marginal likelihood restarts.
    :param kwargs: Further arguments for
        :class:`~sklearn.gaussian_process.GaussianProcessRegressor`.

    .. attribute:: kernel

        Covariance function in use.

    .. attribute:: model

        Fitted :class:`~sklearn.gaussian_process.GaussianProcessRegressor`,
        or None before training.
    """

    model_type = SurrogateType.GP

    def __init__(
        self,
        X=None,
        Y=None,
        *,
        kernel=KernelType.ARD_SQUARED_EXPONENTIAL,
        noise: bool = True,
        noise_level: float = 1e-4,
        n_restarts_optimizer: int = 0,
        random_state=None,
        **kwargs,
    ) -> None:
        self.kernel = KernelType(kernel)
        self.noise = noise
        self.noise_level = noise_level
        self.n_restarts_optimizer = n_restarts_optimizer
        self.random_state = random_state
        self.options = dict(kwargs)
        self.model: Optional[GaussianProcessRegressor] = None
        super().__init__(X, Y)

    def set_kernel(self, kernel) -> None:
        """Set the covariance function.

        :param kernel: :class:`~seqbo.types.KernelType` or its name.
        """
        self.kernel = KernelType(kernel)
        self._trained = False

    def _backend_kernel(self, dim: int) -> Kernel:
        length_scale = np.ones(dim)
        bounds = (1e-3, 1e3)
        if self.kernel is KernelType.ARD_SQUARED_EXPONENTIAL:
            base = RBF(length_scale, length_scale_bounds=bounds)
        else:
            nu = {
                KernelType.ARD_EXPONENTIAL: 0.5,
                KernelType.ARD_MATERN32: 1.5,
                KernelType.ARD_MATERN52: 2.5,
            }[self.kernel]
            base = Matern(length_scale, length_scale_bounds=bounds, nu=nu)
        k = ConstantKernel(1.0, constant_value_bounds=(1e-5, 1e5)) * base
        if self.noise:
            k = k + WhiteKernel(
                noise_level=self.noise_level, noise_level_bounds=(1e-10, 1e1)
            )
        return k

    def _fit(self, Xc: np.ndarray, Y: np.ndarray, **kwargs) -> None:
        if "kernel" in kwargs:
            raise ValueError(
                "The backend kernel is built from the covariance function. "
                "Use set_kernel() with a KernelType instead of passing "
                "kernel to train()"
            )
        options = {
            "n_restarts_optimizer": self.n_restarts_optimizer,
            "random_state": self.random_state,
            **self.options,
            **kwargs,
            "kernel": self._backend_kernel(Xc.shape[1]),
        }
        self.model = GaussianProcessRegressor(**options)
        self.model.fit(Xc, Y)
        logger.debug("Fitted kernel: %s", self.model.kernel_)

    def _predict(
        self, Xc: np.ndarray, alpha: float
    ) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
        mean, std = self.model.predict(Xc, return_std=True)
        z = norm.ppf(1 - alpha / 2)
        interval = np.column_stack((mean - z * std, mean + z * std))
        return mean, std, interval

    # Fitted hyperparameters

    def _fitted_parts(self):
        self._require_trained()
        k = self.model.kernel_
        white = None
        if isinstance(k.k2, WhiteKernel):
            white = k.k2
            k = k.k1
        return k.k1, k.k2, white

    @property
    def length_scale(self) -> np.ndarray:
        """Fitted length-scale of each input dimension."""
        _, base, _ = self._fitted_parts()
        return np.broadcast_to(
            np.atleast_1d(base.length_scale).astype(float), (self.dim,)
        ).copy()

    @property
    def sigma_f(self) -> float:
        """Fitted signal standard deviation."""
        const, _, _ = self._fitted_parts()
        return float(np.sqrt(const.constant_value))

    @property
    def sigma_n(self) -> float:
        """Fitted noise standard deviation, including the backend jitter."""
        _, _, white = self._fitted_parts()
        variance = float(np.max(self.model.alpha))
        if white is not None:
            variance += white.noise_level
        return float(np.sqrt(variance))

    # Kernel matrices

    def eval_kernel(self, X, Xref=None) -> np.ndarray:
        """Kernel matrix between points given in raw coordinates.

        :param X: m-by-dim matrix of points.
        :param Xref: n-by-dim matrix of reference points. Defaults to the
            training inputs.
        :return: m-by-n kernel matrix.
        """
        X = self.as_points(X)
        Xref = self._X if Xref is None else self.as_points(Xref)
        return eval_kernel(
            self.kernel,
            self.code(X),
            self.code(Xref),
            self.length_scale,
            self.sigma_f,
        )

    def sigma(self, X=None) -> np.ndarray:
        """Posterior covariance matrix of the predictions at X.

        .. math::

            \\Sigma = K_{**} - K_{*x} (K + \\sigma_n^2 I)^{-1} K_{*x}^T

        :param X: m-by-dim matrix of points in raw coordinates. Defaults to
            the training inputs.
        :return: m-by-m covariance matrix.
        """
        self._require_trained()
        X = self._X if X is None else self.as_points(X)
        K = self.eval_kernel(self._X)
        Kstar = self.eval_kernel(X, X)
        Ksx = self.eval_kernel(X)

        K[np.diag_indices_from(K)] += self.sigma_n**2
        factor = cho_factor(K, lower=True)
        return Kstar - Ksx @ cho_solve(factor, Ksx.T)

    @property
    def cov(self) -> np.ndarray:
        """Posterior covariance matrix at the training inputs."""
        return self.sigma(self._X)
