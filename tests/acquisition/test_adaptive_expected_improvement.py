"""Test the AdaptiveExpectedImprovement acquisition function."""

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
from scipy.stats import norm

from seqbo.acquisition import (
    AdaptiveExpectedImprovement,
    AEIHyperparameters,
)
from seqbo.exceptions import HyperparameterError
from seqbo.types import AcquisitionType
from tests.acquisition.utils import MockSurrogateModel


def make_model(**kwargs):
    return MockSurrogateModel(np.array([[0.0], [1.0]]), np.array([0.0, 1.0]), **kwargs)


class TestAdaptiveExpectedImprovement:
    """Test suite for the AdaptiveExpectedImprovement class."""

    def test_defaults(self):
        aei = AdaptiveExpectedImprovement(make_model())
        assert aei.hyperparameters == AEIHyperparameters(1.0, 1.05, 0.05, 0.0)
        assert aei.exp_rate_limits == (0.25, 2.0)
        assert aei.count == 0
        assert aei.xlast is None
        assert aei.rate == 1.0
        assert aei.acquisition_type is AcquisitionType.AEI

    def test_three_hyperparameters(self):
        aei = AdaptiveExpectedImprovement(make_model(), hyperparameters=[2.0, 1.1, 0.1])
        assert aei.hyperparameters == AEIHyperparameters(2.0, 1.1, 0.1, 0.0)

    def test_repeated_candidate_increases_rate_until_clipped(self):
        aei = AdaptiveExpectedImprovement(make_model())
        aei.begin_round(2)
        rates = []
        for _ in range(25):
            aei.evaluate([[0.5]])
            rates.append(aei.rate)

        assert rates[0] == 1.0
        for previous, current in zip(rates[:-1], rates[1:]):
            if previous < 2.0:
                assert current > previous
            else:
                assert current == 2.0
        assert rates[-1] == 2.0
        assert aei.count == 24

    def test_distant_candidates_do_not_stall(self):
        aei = AdaptiveExpectedImprovement(make_model())
        for _ in range(5):
            aei.evaluate([[0.0], [1.0]])
        assert aei.count == 0
        assert aei.rate == 1.0

    def test_rows_are_processed_in_order(self):
        aei = AdaptiveExpectedImprovement(make_model())
        aei.evaluate([[0.5], [0.5], [0.5]])
        assert aei.count == 2
        assert np.array_equal(aei.xlast, [0.5])

    def test_begin_round_resets_state(self):
        aei = AdaptiveExpectedImprovement(make_model())
        aei.evaluate([[0.5], [0.5], [0.5]])
        aei.begin_round(2)
        assert aei.count == 0
        assert aei.xlast is None
        assert aei.rate == 1.0

    def test_rate_clipped_below(self):
        aei = AdaptiveExpectedImprovement(
            make_model(), hyperparameters=(0.1, 1.05, 0.05)
        )
        assert aei.rate == 0.25

    def test_score_maximize(self):
        aei = AdaptiveExpectedImprovement(make_model())
        score = aei.evaluate([[2.0]])
        # mu = 2, fmax = 1, sigma = 1, rate = 1
        assert np.allclose(score, -(norm.cdf(1.0) + norm.pdf(1.0)))

    def test_score_minimize(self):
        aei = AdaptiveExpectedImprovement(make_model(), "min")
        score = aei.evaluate([[-1.0]])
        # fmin = 0, improvement = 1
        assert np.allclose(score, -(norm.cdf(1.0) + norm.pdf(1.0)))

    def test_rate_scales_exploration(self):
        model = make_model(mean=lambda x: np.ones(len(x)))
        aei = AdaptiveExpectedImprovement(model, hyperparameters=(2.0, 1.0, 0.05))
        # Improvement 0: score is -rate * sigma * pdf(0)
        assert np.allclose(aei.evaluate([[0.3]]), -2.0 * norm.pdf(0.0))

    def test_penalty(self):
        aei = AdaptiveExpectedImprovement(
            make_model(), hyperparameters=(1.0, 1.0, 0.05, 1.0)
        )
        # Repelled from the best training input, 1.0, coded 1.0
        s0 = aei.evaluate([[2.0]])
        assert np.allclose(s0, -(norm.cdf(1.0) + norm.pdf(1.0) - 0.5))

        # Repelled from the last chosen point, 1.5, coded 2.0
        aei.set_best_x([1.5])
        s1 = aei.evaluate([[2.25]])
        ei = 1.25 * norm.cdf(1.25) + norm.pdf(1.25)
        assert np.allclose(s1, -(ei - 1.0 / 1.5))

    def test_penalty_does_not_depend_on_order(self):
        aei = AdaptiveExpectedImprovement(
            make_model(), hyperparameters=(1.0, 1.0, 0.05, 1.0)
        )
        s = aei.evaluate([[2.0], [2.0 + 1e-9], [2.0]])
        assert np.allclose(s, s[0])

    def test_penalty_undefined_is_zero(self):
        aei = AdaptiveExpectedImprovement(
            make_model(), hyperparameters=(1.0, 1.0, 0.05, 1.0)
        )
        aei.set_best_x([0.5])
        s = aei.evaluate([[0.5], [0.5 + 1e-7]])
        assert np.all(np.isfinite(s))
        # improvement 0.5 - 1 = -0.5 and no penalty
        ei = -0.5 * norm.cdf(-0.5) + norm.pdf(-0.5)
        assert np.allclose(s, -ei)

    def test_zero_std_keeps_penalty(self):
        model = make_model(std=lambda x: np.zeros(len(x)))
        aei = AdaptiveExpectedImprovement(
            model, hyperparameters=(1.0, 1.0, 0.05, 1.0)
        )
        s = aei.evaluate([[0.0], [1.0]])
        # Coded distance between 0 and the best input 1 is 2
        assert np.allclose(s, [0.5, 0.0])

    def test_finite_difference_steps_do_not_stall(self):
        aei = AdaptiveExpectedImprovement(make_model())
        aei.evaluate([[0.5]])
        for h in (1.5e-8, -1.5e-8, 1e-6):
            aei.evaluate([[0.5 + h]])
        assert aei.count == 0
        assert np.array_equal(aei.xlast, [0.5])

        # A coded move of 0.04 is a stall: relative L1 distance 0.02
        aei.evaluate([[0.52]])
        assert aei.count == 1
        assert np.array_equal(aei.xlast, [0.52])

    def test_finite_difference_steps_share_rate(self):
        model = make_model(mean=lambda x: np.ones(len(x)))
        aei = AdaptiveExpectedImprovement(model, hyperparameters=(1.0, 1.5, 0.05))
        aei.evaluate([[0.3]])
        s0 = aei.evaluate([[0.31]])
        s1 = aei.evaluate([[0.31 + 1.5e-8]])
        # Improvement is 0 everywhere: score is -rate * pdf(0)
        assert np.allclose(s0, -1.5 * norm.pdf(0.0))
        assert np.allclose(s1, s0)

    @pytest.mark.parametrize(
        "value",
        [
            (0.0, 1.05, 0.05),
            (1.0, 0.9, 0.05),
            (1.0, 1.05, 0.0),
            (1.0, 1.05, 0.05, -1.0),
            (1.0, 1.05),
            (1.0, np.inf, 0.05),
        ],
    )
    def test_invalid_hyperparameters(self, value):
        aei = AdaptiveExpectedImprovement(make_model())
        with pytest.raises(HyperparameterError):
            aei.set_hyperparameters(value)
        assert aei.hyperparameters == AEIHyperparameters()

    @pytest.mark.parametrize("limits", [(2.0, 1.0), (0.0, 1.0), (1.0, 1.0)])
    def test_invalid_rate_limits(self, limits):
        aei = AdaptiveExpectedImprovement(make_model())
        with pytest.raises(HyperparameterError):
            aei.set_exp_rate_limits(*limits)
        assert aei.exp_rate_limits == (0.25, 2.0)

    def test_rate_limits(self):
        aei = AdaptiveExpectedImprovement(make_model(), min_rate=0.5, max_rate=1.1)
        for _ in range(5):
            aei.evaluate([[0.5]])
        assert aei.rate == 1.1
