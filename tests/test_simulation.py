import pytest
import numpy as np
import pandas as pd
import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
from unittest.mock import Mock
import sys
import os

# Add the src directory to the path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from seeded_draw.data import champions_league_2021
from seeded_draw.draw import FirstSeededTeam, InfeasibleDrawError, SecondSeededTeam
from seeded_draw.simulation import (
    DrawAnalyzer,
    DrawSimulator,
    SimulationConfig,
    SimulationResult,
    enumerate_feasible_pairings,
    exact_uniform_probabilities
)


@pytest.fixture(scope="module")
def pools_2021():
    return champions_league_2021()


@pytest.fixture(scope="module")
def result_2021(pools_2021):
    config = SimulationConfig(n_draws=200, seed=123)
    return DrawSimulator(*pools_2021, config=config).run()


@pytest.fixture
def trap_pools():
    """Pools where drawing D for S5 first leaves a dead end the lookahead cannot see."""
    d = FirstSeededTeam("D", "gD")
    a = FirstSeededTeam("A", "gA")
    b = FirstSeededTeam("B", "gBC")
    c = FirstSeededTeam("C", "gBC")
    e = FirstSeededTeam("E", "gE")
    second = [
        SecondSeededTeam("S5", "gX", prior_partner=a),
        SecondSeededTeam("S1", "gE", prior_partner=c),
        SecondSeededTeam("S2", "gE", prior_partner=a),
        SecondSeededTeam("S3", "gE", prior_partner=b),
        SecondSeededTeam("S4", "gBC", prior_partner=e),
    ]
    return [d, a, b, c, e], second


class TestSimulationConfig:
    """Test cases for simulation configuration."""

    def test_defaults(self):
        config = SimulationConfig()
        assert config.n_draws == 1000
        assert config.seed == 42
        assert config.max_attempts == 10
        assert config.exact_feasibility is False

    def test_from_dict_ignores_unknown_keys(self):
        config = SimulationConfig.from_dict({'n_draws': 5, 'seed': 1, 'colour': 'blue'})
        assert config.n_draws == 5
        assert config.seed == 1


class TestSimulationResult:
    """Test cases for the counters of a simulation result."""

    def test_failure_rate_counts_each_attempt_once(self):
        result = SimulationResult(draws=[], n_failed_attempts=10, n_abandoned=1)
        assert result.failure_rate == 1.0

    def test_failure_rate_mixed(self):
        result = SimulationResult(draws=[[], [], []], n_failed_attempts=1)
        assert result.failure_rate == 0.25

    def test_failure_rate_without_attempts(self):
        assert SimulationResult().failure_rate == 0.0


class TestDrawSimulator:
    """Test cases for Monte Carlo runs of the draw."""

    def test_every_draw_completes(self, result_2021):
        assert isinstance(result_2021, SimulationResult)
        assert result_2021.n_successful == 200
        assert result_2021.n_abandoned == 0
        assert result_2021.n_failed_attempts == 0
        assert result_2021.failure_rate == 0.0
        assert result_2021.elapsed is not None

    def test_no_constraint_violations(self, result_2021):
        violations = result_2021.violations()
        assert isinstance(violations, pd.DataFrame)
        assert violations.empty

    def test_match_table(self, result_2021):
        frame = result_2021.to_frame()
        assert list(frame.columns) == ['draw_id', 'match_index', 'first_seeded', 'second_seeded']
        assert len(frame) == 200 * 8
        per_draw = frame.groupby('draw_id')
        assert (per_draw['first_seeded'].nunique() == 8).all()
        assert (per_draw['second_seeded'].nunique() == 8).all()

    def test_reproducible(self, pools_2021):
        config = SimulationConfig(n_draws=10, seed=9)
        first = DrawSimulator(*pools_2021, config=config).run().to_frame()
        second = DrawSimulator(*pools_2021, config=config).run().to_frame()
        pd.testing.assert_frame_equal(first, second)

    def test_abandoned_draw_with_single_attempt(self, trap_pools):
        simulator = DrawSimulator(*trap_pools, config=SimulationConfig(n_draws=1, max_attempts=1))
        simulator.rng = Mock()
        simulator.rng.randint.return_value = 0
        result = simulator.run()
        assert result.n_successful == 0
        assert result.n_abandoned == 1
        assert result.n_failed_attempts == 1
        assert result.failure_rate == 1.0
        assert result.to_frame().empty

    def test_every_attempt_of_abandoned_draw_is_counted(self, trap_pools):
        simulator = DrawSimulator(*trap_pools, config=SimulationConfig(n_draws=1, max_attempts=3))
        simulator.rng = Mock()
        simulator.rng.randint.return_value = 0
        result = simulator.run()
        assert result.n_abandoned == 1
        assert result.n_failed_attempts == 3
        # Three selections per attempt: S5, its opponent D, then S1 with no opponent
        assert simulator.rng.randint.call_count == 9
        assert result.failure_rate == 1.0

    def test_restart_after_dead_end(self, trap_pools):
        simulator = DrawSimulator(*trap_pools, config=SimulationConfig(n_draws=1, max_attempts=2))
        simulator.rng = Mock()
        # First attempt pairs S5 with D and gets stuck, second pairs S5 with E
        simulator.rng.randint.side_effect = [0, 0, 0] + [0, 1] + [0] * 8
        result = simulator.run()
        assert result.n_successful == 1
        assert result.n_failed_attempts == 1
        assert result.n_abandoned == 0
        assert result.failure_rate == 0.5
        pairs = {(m.second_seeded.name, m.first_seeded.name) for m in result.draws[0]}
        assert pairs == {("S5", "E"), ("S1", "D"), ("S2", "B"), ("S3", "C"), ("S4", "A")}
        assert result.violations().empty

    def test_infeasible_pools_rejected_upfront(self):
        a1 = FirstSeededTeam("A1", "X")
        a2 = FirstSeededTeam("A2", "Y")
        b1 = SecondSeededTeam("B1", "Y", prior_partner=a1)
        b2 = SecondSeededTeam("B2", "X", prior_partner=a2)
        with pytest.raises(InfeasibleDrawError):
            DrawSimulator([a1, a2], [b1, b2])


class TestExactEnumeration:
    """Test cases for the enumeration of complete draws."""

    def test_forced_draw_has_one_pairing(self):
        a1 = FirstSeededTeam("A1", "X")
        a2 = FirstSeededTeam("A2", "Y")
        b1 = SecondSeededTeam("B1", "Z", prior_partner=a1)
        b2 = SecondSeededTeam("B2", "W", prior_partner=a2)
        pairings = enumerate_feasible_pairings([a1, a2], [b1, b2])
        assert pairings == [(1, 0)]

        probabilities = exact_uniform_probabilities([a1, a2], [b1, b2])
        assert probabilities.loc["B1", "A2"] == 1.0
        assert probabilities.loc["B2", "A1"] == 1.0
        assert probabilities.loc["B1", "A1"] == 0.0

    def test_uniform_probabilities_2021(self, pools_2021):
        probabilities = exact_uniform_probabilities(*pools_2021)
        assert probabilities.shape == (8, 8)
        np.testing.assert_allclose(probabilities.sum(axis=1), 1.0)
        np.testing.assert_allclose(probabilities.sum(axis=0), 1.0)
        assert probabilities.loc["Chelsea", "Juventus"] == 0.0
        assert probabilities.loc["Villareal", "Real Madrid"] == 0.0

    def test_too_large_to_enumerate(self):
        first = [FirstSeededTeam(f"A{i}", f"G{i}") for i in range(11)]
        second = [
            SecondSeededTeam(f"B{i}", f"G{i}", prior_partner=first[(i + 1) % 11])
            for i in range(11)
        ]
        with pytest.raises(ValueError):
            enumerate_feasible_pairings(first, second)


class TestDrawAnalyzer:
    """Test cases for the analysis of simulation results."""

    def test_pairing_frequencies(self, pools_2021, result_2021):
        analyzer = DrawAnalyzer(*pools_2021)
        frequencies = analyzer.pairing_frequencies(result_2021)
        assert list(frequencies.index) == [t.name for t in pools_2021[1]]
        assert list(frequencies.columns) == [t.name for t in pools_2021[0]]
        np.testing.assert_allclose(frequencies.sum(axis=1), 1.0)
        assert frequencies.loc["Chelsea", "Liverpool"] == 0.0
        assert frequencies.loc["RB Salzburg", "Lille"] == 0.0

    def test_frequencies_of_empty_result(self, pools_2021):
        analyzer = DrawAnalyzer(*pools_2021)
        frequencies = analyzer.pairing_frequencies(SimulationResult())
        assert frequencies.shape == (8, 8)
        assert (frequencies.values == 0).all()

    def test_compare_to_uniform(self, pools_2021, result_2021):
        comparison = DrawAnalyzer(*pools_2021).compare_to_uniform(result_2021)
        assert comparison['n_feasible_pairings'] > 0
        assert 0.0 <= comparison['max_abs_deviation'] <= 1.0
        assert 0.0 <= comparison['mean_total_variation'] <= 1.0
        assert comparison['empirical'].shape == comparison['uniform'].shape

    def test_goodness_of_fit(self, pools_2021, result_2021):
        test = DrawAnalyzer(*pools_2021).opponent_goodness_of_fit(result_2021, "RB Salzburg")
        assert test['statistic'] >= 0.0
        assert 0.0 <= test['p_value'] <= 1.0

    def test_summary(self, pools_2021, result_2021):
        summary = DrawAnalyzer(*pools_2021).summarize(result_2021)
        assert summary['n_successful'] == 200
        assert summary['n_violations'] == 0
        assert summary['failure_rate'] == 0.0

    def test_plot_pairing_frequencies(self, pools_2021, result_2021, tmp_path):
        analyzer = DrawAnalyzer(*pools_2021)
        save_path = tmp_path / "heatmap.png"
        fig = analyzer.plot_pairing_frequencies(result_2021, save_path=str(save_path))
        assert isinstance(fig, plt.Figure)
        assert save_path.exists()
        plt.close(fig)
