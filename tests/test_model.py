"""Test the surrogate models."""

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
import pytest

from seqbo.exceptions import (
    DegenerateCodingError,
    ModelNotTrainedError,
    TrainingDataError,
)
from seqbo.model import GaussianProcess, RandomForest
from seqbo.model.kernels import (
    ard_exponential,
    ard_matern32,
    ard_matern52,
    ard_squared_exponential,
    scaled_sqdist,
)
from seqbo.types import KernelType, ProblemType, SurrogateType


def sample_data(n: int = 8, dim: int = 2, seed: int = 0):
    rng = np.random.default_rng(seed)
    X = rng.uniform(-2.0, 3.0, size=(n, dim))
    Y = np.sin(X).sum(axis=1) + 0.1 * X[:, 0] ** 2
    return X, Y


class TestKernelFunctions:
    """Test suite for the kernel functions."""

    def test_scaled_sqdist(self):
        X = np.array([[0.0, 0.0], [1.0, 2.0]])
        r2 = scaled_sqdist(X, X, [1.0, 2.0])
        assert np.allclose(r2, [[0.0, 2.0], [2.0, 0.0]])

    @pytest.mark.parametrize(
        "kernel",
        [ard_squared_exponential, ard_exponential, ard_matern32, ard_matern52],
    )
    def test_value_at_zero_distance(self, kernel):
        assert np.isclose(kernel(np.array(0.0), 1.5), 2.25)

    @pytest.mark.parametrize(
        "kernel",
        [ard_squared_exponential, ard_exponential, ard_matern32, ard_matern52],
    )
    def test_decreasing_with_distance(self, kernel):
        values = kernel(np.array([0.0, 0.5, 1.0, 4.0, 9.0]), 1.0)
        assert np.all(np.diff(values) < 0)
        assert np.all(values > 0)

    def test_closed_forms(self):
        r2 = np.array(4.0)
        assert np.isclose(ard_squared_exponential(r2, 1.0), np.exp(-2.0))
        assert np.isclose(ard_exponential(r2, 1.0), np.exp(-2.0))
        assert np.isclose(
            ard_matern32(r2, 1.0),
            (1 + 2 * np.sqrt(3)) * np.exp(-2 * np.sqrt(3)),
        )
        assert np.isclose(
            ard_matern52(r2, 1.0),
            (1 + 2 * np.sqrt(5) + 20 / 3) * np.exp(-2 * np.sqrt(5)),
        )


class TestSurrogateData:
    """Test suite for the training data handling of surrogate models."""

    def test_mismatched_rows(self):
        gp = GaussianProcess()
        with pytest.raises(TrainingDataError):
            gp.set_training_data(np.zeros((3, 2)), np.zeros(2))

    def test_empty_data(self):
        gp = GaussianProcess()
        with pytest.raises(TrainingDataError):
            gp.set_training_data(np.empty((0, 2)), np.empty(0))

    def test_vector_is_a_column(self):
        gp = GaussianProcess()
        gp.set_training_data([0.0, 1.0, 2.0], [1.0, 2.0, 3.0])
        assert gp.X.shape == (3, 1)
        assert gp.dim == 1 and gp.ntrain == 3

    def test_set_training_data_clears_trained(self):
        X, Y = sample_data()
        gp = GaussianProcess(X, Y)
        gp.train()
        assert gp.trained
        gp.set_training_data(X, Y)
        assert not gp.trained

    def test_not_trained(self):
        X, Y = sample_data()
        gp = GaussianProcess(X, Y)
        with pytest.raises(ModelNotTrainedError):
            gp.predict(X)
        with pytest.raises(ModelNotTrainedError):
            gp.sigma(X)

    def test_update_appends_and_trains(self):
        X, Y = sample_data(6)
        gp = GaussianProcess(X[:4], Y[:4])
        gp.update(X[4:], Y[4:])
        assert gp.ntrain == 6
        assert gp.trained
        gp.update(X[0], 1.0)
        assert gp.ntrain == 7
        assert gp.Y[-1] == 1.0

    def test_update_width_mismatch(self):
        X, Y = sample_data(4)
        gp = GaussianProcess(X, Y)
        with pytest.raises(TrainingDataError):
            gp.update(np.zeros((1, 3)), [0.0])

    def test_extrema(self):
        X = np.array([[0.0], [1.0], [2.0]])
        Y = np.array([3.0, -1.0, 5.0])
        gp = GaussianProcess(X, Y)
        assert gp.fmax == 5.0 and gp.fmin == -1.0
        assert np.array_equal(gp.xmax, [2.0])
        assert np.array_equal(gp.xmin, [1.0])
        xbest, ybest = gp.best(ProblemType.MINIMIZE)
        assert ybest == -1.0 and np.array_equal(xbest, [1.0])
        assert gp.best("max")[1] == 5.0

    def test_extrema_without_data(self):
        with pytest.raises(TrainingDataError):
            GaussianProcess().fmax

    def test_var_names_and_units(self):
        X, Y = sample_data()
        gp = GaussianProcess(X, Y)
        gp.set_var_names(["a", "b"], "cost")
        gp.set_var_units(["m", "s"], "USD")
        assert gp.xnames == ["a", "b"] and gp.yname == "cost"
        assert gp.xunits == ["m", "s"] and gp.yunits == "USD"
        with pytest.raises(TrainingDataError):
            gp.set_var_names(["a"])
        with pytest.raises(TrainingDataError):
            gp.set_var_units(["m", "s", "kg"], "USD")


class TestSurrogateCoding:
    """Test suite for the coding of inputs in surrogate models."""

    def test_default_bounds_from_data(self):
        X, Y = sample_data()
        gp = GaussianProcess(X, Y)
        Xc = gp.Xc
        assert np.allclose(Xc.min(axis=0), -1.0)
        assert np.allclose(Xc.max(axis=0), 1.0)
        assert np.allclose(gp.decode(Xc), X)

    def test_pinned_bounds(self):
        X, Y = sample_data()
        gp = GaussianProcess(X, Y)
        gp.set_coding_bounds([-4.0, -4.0], [4.0, 4.0])
        assert np.allclose(gp.code([[0.0, 2.0]]), [[0.0, 0.5]])
        gp.clear_coding_bounds()
        assert np.allclose(gp.Xc.max(axis=0), 1.0)

    def test_pinned_bounds_untrain(self):
        X, Y = sample_data()
        gp = GaussianProcess(X, Y)
        gp.train()
        gp.set_coding_bounds([-4.0, -4.0], [4.0, 4.0])
        assert not gp.trained

    def test_pinned_bounds_wrong_dimension(self):
        X, Y = sample_data()
        gp = GaussianProcess(X, Y)
        with pytest.raises(TrainingDataError):
            gp.set_coding_bounds([0.0], [1.0])

    def test_degenerate_data(self):
        gp = GaussianProcess([[1.0, 0.0], [1.0, 1.0]], [0.0, 1.0])
        with pytest.raises(DegenerateCodingError):
            gp.train()

    def test_no_data(self):
        with pytest.raises(TrainingDataError):
            GaussianProcess().coder


class TestGaussianProcess:
    """Test suite for the GaussianProcess class."""

    def test_model_type(self):
        assert GaussianProcess.model_type is SurrogateType.GP

    def test_backend_kernel_is_not_replaceable(self):
        from sklearn.gaussian_process.kernels import RBF

        X, Y = sample_data()
        gp = GaussianProcess(X, Y, random_state=0)
        with pytest.raises(ValueError):
            gp.train(kernel=RBF())
        assert not gp.trained
        with pytest.raises(ValueError):
            GaussianProcess(kernel=RBF())

        gp.train(alpha=1e-8)
        assert gp.model.alpha == 1e-8
        assert gp.length_scale.shape == (2,)
        assert gp.sigma_f > 0

    def test_interpolates_noise_free_data(self):
        X = np.linspace(0.0, 1.0, 8).reshape(-1, 1)
        Y = np.sin(6 * X).ravel()
        gp = GaussianProcess(X, Y, noise=False)
        gp.train()
        mean, std, _ = gp.predict(X)
        assert np.allclose(mean, Y, atol=1e-3)
        assert np.all(std < 1e-2)

    def test_predict_shapes(self):
        X, Y = sample_data()
        gp = GaussianProcess(X, Y, random_state=0)
        gp.train()
        Xnew = np.array([[0.0, 0.0], [1.0, -1.0], [2.5, 2.5]])
        mean, std, interval = gp.predict(Xnew)
        assert mean.shape == (3,) and std.shape == (3,)
        assert interval.shape == (3, 2)
        assert np.all(interval[:, 0] <= mean)
        assert np.all(mean <= interval[:, 1])
        assert np.allclose(gp(Xnew), mean)

    def test_wider_interval_for_smaller_alpha(self):
        X, Y = sample_data()
        gp = GaussianProcess(X, Y)
        gp.train()
        Xnew = np.array([[0.5, 0.5]])
        _, _, i95 = gp.predict(Xnew, alpha=0.05)
        _, _, i99 = gp.predict(Xnew, alpha=0.01)
        assert i99[0, 1] - i99[0, 0] > i95[0, 1] - i95[0, 0]
        with pytest.raises(ValueError):
            gp.predict(Xnew, alpha=1.5)

    def test_single_point(self):
        X, Y = sample_data()
        gp = GaussianProcess(X, Y)
        gp.train()
        mean, std, interval = gp.predict([0.5, 0.5])
        assert mean.shape == (1,) and interval.shape == (1, 2)

    def test_fitted_hyperparameters(self):
        X, Y = sample_data()
        gp = GaussianProcess(X, Y)
        gp.train()
        assert gp.length_scale.shape == (2,)
        assert np.all(gp.length_scale > 0)
        assert gp.sigma_f > 0
        assert gp.sigma_n > 0

    def test_fitted_hyperparameters_not_trained(self):
        X, Y = sample_data()
        gp = GaussianProcess(X, Y)
        with pytest.raises(ModelNotTrainedError):
            gp.length_scale

    @pytest.mark.parametrize("kernel", list(KernelType))
    def test_eval_kernel_matches_backend(self, kernel):
        X, Y = sample_data()
        gp = GaussianProcess(X, Y, kernel=kernel, noise=False)
        gp.train()
        K = gp.eval_kernel(X, X)
        assert np.allclose(K, K.T)
        assert np.allclose(np.diag(K), gp.sigma_f**2)
        assert np.allclose(K, gp.model.kernel_(gp.Xc))

    def test_eval_kernel_default_reference(self):
        X, Y = sample_data()
        gp = GaussianProcess(X, Y)
        gp.train()
        Xnew = np.array([[0.0, 0.0], [1.0, 1.0], [2.0, 0.0]])
        assert gp.eval_kernel(Xnew).shape == (3, len(X))

    def test_set_kernel(self):
        X, Y = sample_data()
        gp = GaussianProcess(X, Y)
        gp.train()
        gp.set_kernel("matern52")
        assert gp.kernel is KernelType.ARD_MATERN52
        assert not gp.trained
        with pytest.raises(ValueError):
            gp.set_kernel("cubic")

    def test_sigma_matches_backend_variance(self):
        """Diagonal of the posterior covariance is the predictive
        variance."""
        X, Y = sample_data(10)
        gp = GaussianProcess(X, Y, noise=False)
        gp.train()
        Xnew = np.array([[0.1, 0.2], [-1.5, 2.0], [2.9, -0.5]])
        S = gp.sigma(Xnew)
        _, std, _ = gp.predict(Xnew)
        assert S.shape == (3, 3)
        assert np.allclose(S, S.T)
        assert np.allclose(np.diag(S), std**2, rtol=1e-4, atol=1e-8)

    def test_cov_at_training_points(self):
        X, Y = sample_data()
        gp = GaussianProcess(X, Y, noise=False)
        gp.train()
        C = gp.cov
        assert C.shape == (len(X), len(X))
        assert np.all(np.abs(np.diag(C)) < 1e-4 * gp.sigma_f**2)

    def test_train_forwards_options(self):
        X, Y = sample_data()
        gp = GaussianProcess(X, Y)
        gp.train(n_restarts_optimizer=2, random_state=1)
        assert gp.model.n_restarts_optimizer == 2


class TestRandomForest:
    """Test suite for the RandomForest class."""

    def make_model(self):
        X, Y = sample_data(30)
        rf = RandomForest(X, Y, n_estimators=25, random_state=0)
        rf.train()
        return rf

    def test_model_type(self):
        assert RandomForest.model_type is SurrogateType.RF

    def test_predict(self):
        rf = self.make_model()
        Xnew = np.array([[0.0, 0.0], [1.0, 2.0]])
        mean, std, interval = rf.predict(Xnew)
        assert mean.shape == (2,) and std.shape == (2,)
        assert np.all(std >= 0)
        assert interval.shape == (2, 2)
        assert np.all(interval[:, 0] <= interval[:, 1])

    def test_sigma_diagonal_is_variance(self):
        rf = self.make_model()
        Xnew = np.array([[0.0, 0.0], [1.0, 2.0], [-1.0, 0.5]])
        S = rf.sigma(Xnew)
        _, std, _ = rf.predict(Xnew)
        assert S.shape == (3, 3)
        assert np.allclose(np.diag(S), std**2)

    def test_sigma_single_point(self):
        rf = self.make_model()
        assert rf.sigma([[0.0, 0.0]]).shape == (1, 1)

    def test_not_trained(self):
        X, Y = sample_data()
        rf = RandomForest(X, Y)
        with pytest.raises(ModelNotTrainedError):
            rf.predict(X)
