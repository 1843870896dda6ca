import os

import numpy as np
import pandas as pd
import pytest

from chisq_lecture import data_preprocess
from chisq_lecture.tests.simulation import monte_carlo_p_value, run_null_simulation, simulate_null_statistics


class TestSimulateNullStatistics:
    def test_length_and_batches(self):
        stats = simulate_null_statistics([0.25] * 4, 200, 230, random_state=1, jobs=1, batch_size=100)
        assert stats.shape == (230,)
        assert (stats >= 0).all()

    def test_reproducible(self):
        a = simulate_null_statistics([0.25] * 4, 200, 150, random_state=7, jobs=1, batch_size=50)
        b = simulate_null_statistics([0.25] * 4, 200, 150, random_state=7, jobs=1, batch_size=50)
        np.testing.assert_array_equal(a, b)

    def test_independent_of_job_count(self):
        a = simulate_null_statistics([0.5, 0.3, 0.2], 60, 120, random_state=3, jobs=1, batch_size=40)
        b = simulate_null_statistics([0.5, 0.3, 0.2], 60, 120, random_state=3, jobs=2, batch_size=40)
        np.testing.assert_array_equal(a, b)

    def test_mean_close_to_degrees_of_freedom(self):
        stats = simulate_null_statistics([0.25] * 4, 200, 2000, random_state=423, jobs=1, batch_size=500)
        assert stats.mean() == pytest.approx(3.0, abs=0.3)

    def test_rejects_bad_probabilities(self):
        with pytest.raises(ValueError):
            simulate_null_statistics([1.0], 10, 10, random_state=0)
        with pytest.raises(ValueError):
            simulate_null_statistics([0.5, 0.5, 0.0], 10, 10, random_state=0)

    def test_rejects_bad_sizes(self):
        with pytest.raises(ValueError):
            simulate_null_statistics([0.5, 0.5], 0, 10, random_state=0)


def test_monte_carlo_p_value():
    assert monte_carlo_p_value([1.0, 2.0, 3.0], 2.0) == pytest.approx(0.75)
    assert monte_carlo_p_value([1.0, 2.0, 3.0], 10.0) == pytest.approx(0.25)


class TestRunNullSimulation:
    def test_butterfly_example(self, test_config, results_manager):
        result = run_null_simulation(data_preprocess.butterfly_colors(), test_config, results_manager)
        assert result['observed_chi2'] == pytest.approx(8.8)
        assert result['degrees_of_freedom'] == 3
        assert result['n_simulations'] == 400
        assert 0 < result['p_value'] <= 1
        assert result['p_value'] < 0.15
        assert result['asymptotic_p_value'] == pytest.approx(0.0321, abs=1e-3)

    def test_outputs_written(self, test_config, results_manager):
        run_null_simulation(data_preprocess.butterfly_colors(), test_config, results_manager)
        test_dir = os.path.join(results_manager.run_dir, "null_simulation")
        assert os.path.exists(os.path.join(test_dir, "null_distribution.png"))
        null_stats = pd.read_csv(os.path.join(test_dir, "null_statistics.csv"))
        assert len(null_stats) == 400

    def test_invalid_table_returns_none(self, test_config, results_manager):
        df = pd.DataFrame({'category': ['a', 'b'], 'observed': [0, 0]})
        assert run_null_simulation(df, test_config, results_manager) is None
