import numpy as np
import pandas as pd
from typing import Any, Dict, List, Optional, Sequence, Tuple
from itertools import permutations
import logging
from scipy import stats

from ..draw import ConstraintChecker, FirstSeededTeam, SecondSeededTeam
from ..utils.plotting import plot_pairing_heatmap
from .simulator import SimulationResult

logger = logging.getLogger(__name__)

# Beyond this pool size the permutation enumeration gets too slow
MAX_ENUMERATION_SIZE = 10


def enumerate_feasible_pairings(
    first_seeded: Sequence[FirstSeededTeam],
    second_seeded: Sequence[SecondSeededTeam],
    checker: Optional[ConstraintChecker] = None
) -> List[Tuple[int, ...]]:
    """
    Enumerate every complete draw that respects the constraints.

    Args:
        first_seeded: Teams of the first pot
        second_seeded: Teams of the second pot
        checker: Constraint checker (optional, will create if None)

    Returns:
        List of assignments; entry i of an assignment is the index in
        ``first_seeded`` of the opponent of ``second_seeded[i]``

    Raises:
        ValueError: If the pools are too large to enumerate
    """
    if len(second_seeded) > MAX_ENUMERATION_SIZE:
        raise ValueError(
            f"Cannot enumerate pools larger than {MAX_ENUMERATION_SIZE} teams"
        )
    checker = checker or ConstraintChecker()
    allowed = checker.admissibility_matrix(second_seeded, first_seeded)
    rows = range(len(second_seeded))

    return [
        assignment for assignment in permutations(range(len(first_seeded)), len(second_seeded))
        if all(allowed[i, assignment[i]] for i in rows)
    ]


def exact_uniform_probabilities(
    first_seeded: Sequence[FirstSeededTeam],
    second_seeded: Sequence[SecondSeededTeam],
    checker: Optional[ConstraintChecker] = None
) -> pd.DataFrame:
    """
    Pairing probabilities if every complete draw were equally likely.

    Args:
        first_seeded: Teams of the first pot
        second_seeded: Teams of the second pot
        checker: Constraint checker (optional, will create if None)

    Returns:
        DataFrame indexed by second seeded names, columns first seeded names
    """
    pairings = enumerate_feasible_pairings(first_seeded, second_seeded, checker)
    counts = np.zeros((len(second_seeded), len(first_seeded)))
    for assignment in pairings:
        for i, j in enumerate(assignment):
            counts[i, j] += 1

    if pairings:
        counts /= len(pairings)

    return pd.DataFrame(
        counts,
        index=[team.name for team in second_seeded],
        columns=[team.name for team in first_seeded]
    )


class DrawAnalyzer:
    """Analyze the outcome of a Monte Carlo run of the draw."""

    def __init__(
        self,
        first_seeded: Sequence[FirstSeededTeam],
        second_seeded: Sequence[SecondSeededTeam]
    ):
        """
        Initialize analyzer.

        Args:
            first_seeded: Teams of the first pot
            second_seeded: Teams of the second pot
        """
        self.first_seeded = list(first_seeded)
        self.second_seeded = list(second_seeded)
        self.logger = logger

    def pairing_frequencies(self, result: SimulationResult) -> pd.DataFrame:
        """
        Empirical probability of every pairing.

        Args:
            result: Output of DrawSimulator.run()

        Returns:
            DataFrame indexed by second seeded names, columns first seeded names
        """
        matches = result.to_frame()
        index = [team.name for team in self.second_seeded]
        columns = [team.name for team in self.first_seeded]

        if matches.empty:
            return pd.DataFrame(0.0, index=index, columns=columns)

        counts = pd.crosstab(matches['second_seeded'], matches['first_seeded'])
        counts = counts.reindex(index=index, columns=columns, fill_value=0)
        return counts / result.n_successful

    def compare_to_uniform(self, result: SimulationResult) -> Dict[str, Any]:
        """
        Compare the empirical pairing probabilities with the uniform law over complete draws.

        The greedy draw is not uniform over complete draws; this measures by how much.

        Args:
            result: Output of DrawSimulator.run()

        Returns:
            Dictionary with the two probability tables and distance metrics
        """
        empirical = self.pairing_frequencies(result)
        uniform = exact_uniform_probabilities(self.first_seeded, self.second_seeded)
        difference = (empirical - uniform).abs()

        return {
            'empirical': empirical,
            'uniform': uniform,
            'max_abs_deviation': float(difference.values.max()),
            # Each row is a distribution over opponents
            'mean_total_variation': float(0.5 * difference.sum(axis=1).mean()),
            'n_feasible_pairings': len(
                enumerate_feasible_pairings(self.first_seeded, self.second_seeded)
            )
        }

    def opponent_goodness_of_fit(
        self,
        result: SimulationResult,
        team_name: str
    ) -> Dict[str, float]:
        """
        Chi-square test of one second seeded team's opponents against the uniform law.

        Args:
            result: Output of DrawSimulator.run()
            team_name: Name of the second seeded team

        Returns:
            Dictionary with chi-square statistic and p-value
        """
        observed = self.pairing_frequencies(result).loc[team_name] * result.n_successful
        expected = exact_uniform_probabilities(self.first_seeded, self.second_seeded).loc[team_name]

        support = expected > 0
        if observed[support].sum() == 0 or support.sum() < 2:
            return {'statistic': np.nan, 'p_value': np.nan}

        f_obs = observed[support].values
        f_exp = expected[support].values / expected[support].sum() * f_obs.sum()
        statistic, p_value = stats.chisquare(f_obs, f_exp)
        return {'statistic': float(statistic), 'p_value': float(p_value)}

    def summarize(self, result: SimulationResult) -> Dict[str, Any]:
        """
        Headline numbers of a simulation run.

        Args:
            result: Output of DrawSimulator.run()

        Returns:
            Dictionary with draw counts, failure rate and constraint violations
        """
        return {
            'n_successful': result.n_successful,
            'n_failed_attempts': result.n_failed_attempts,
            'n_abandoned': result.n_abandoned,
            'failure_rate': result.failure_rate,
            'n_violations': len(result.violations()),
            'elapsed': result.elapsed
        }

    def plot_pairing_frequencies(
        self,
        result: SimulationResult,
        save_path: Optional[str] = None,
        title: str = "Pairing Probabilities"
    ):
        """Plot the empirical pairing probabilities as a heatmap."""
        frequencies = self.pairing_frequencies(result)
        if result.n_successful == 0:
            self.logger.warning("No successful draws available for plotting")
            return None
        return plot_pairing_heatmap(frequencies, title=title, save_path=save_path)
