"""
Feasibility checks for partial draw configurations.

A configuration is the set of first seeded teams still in the pot together
with the second seeded teams still waiting for an opponent. It is feasible
when every waiting team can still be given a distinct admissible opponent.
"""

import numpy as np
from typing import FrozenSet, List, Optional, Sequence
import logging
from scipy.sparse import csr_matrix
from scipy.sparse.csgraph import maximum_bipartite_matching

from .constraints import ConstraintChecker
from .teams import FirstSeededTeam, SecondSeededTeam

logger = logging.getLogger(__name__)


class FeasibilityAnalyzer:
    """One-step lookahead pruning for the draw."""

    def __init__(self, checker: Optional[ConstraintChecker] = None):
        """
        Initialize analyzer.

        Args:
            checker: Constraint checker used for the direct rules (optional,
                will create if None)
        """
        self.checker = checker or ConstraintChecker()

    def would_cause_dead_end(
        self,
        candidate: FirstSeededTeam,
        remaining_first_seeded: Sequence[FirstSeededTeam],
        other_second_seeded: Sequence[SecondSeededTeam]
    ) -> bool:
        """
        Check whether taking ``candidate`` out of the pot blocks the rest of the draw.

        Two infeasibility patterns are detected on the reduced configuration:
        a waiting team with no admissible opponent at all, and n waiting teams
        whose opponent sets all fit inside a set of m < n opponents (for
        instance {A}, {B} and {A, B}). Deeper dead ends are not searched for.

        Args:
            candidate: First seeded team hypothetically removed from the pot
            remaining_first_seeded: First seeded teams still in the pot,
                ``candidate`` included
            other_second_seeded: Second seeded teams still waiting, the team
                currently being matched excluded

        Returns:
            True if the reduced configuration is infeasible
        """
        reduced_pool = [team for team in remaining_first_seeded if team != candidate]

        opponent_sets: List[FrozenSet[FirstSeededTeam]] = []
        for second in other_second_seeded:
            allowed = frozenset(self.checker.admissible_opponents(second, reduced_pool))
            if not allowed:
                logger.debug(
                    f"Removing {candidate.name} leaves {second.name} without opponents"
                )
                return True
            opponent_sets.append(allowed)

        # Biggest sets first, so that each set is compared with the ones that may fit in it
        opponent_sets.sort(key=len, reverse=True)

        for i in range(len(opponent_sets) - 1):
            biggest = opponent_sets[i]
            n_contained = 1  # a set contains itself
            for smaller in opponent_sets[i + 1:]:
                if smaller <= biggest:
                    n_contained += 1
            if n_contained > len(biggest):
                logger.debug(
                    f"Removing {candidate.name} leaves {n_contained} teams sharing "
                    f"{len(biggest)} opponents"
                )
                return True

        return False

    def has_complete_pairing(
        self,
        first_seeded: Sequence[FirstSeededTeam],
        second_seeded: Sequence[SecondSeededTeam]
    ) -> bool:
        """
        Exact check: can every second seeded team get a distinct admissible opponent?

        Solved as a maximum bipartite matching on the admissibility matrix.

        Args:
            first_seeded: First seeded teams in the pot
            second_seeded: Second seeded teams waiting for an opponent

        Returns:
            True if a complete pairing of ``second_seeded`` exists
        """
        if not second_seeded:
            return True
        if len(first_seeded) < len(second_seeded):
            return False

        matrix = self.checker.admissibility_matrix(second_seeded, first_seeded)
        if not matrix.any(axis=1).all():
            return False

        graph = csr_matrix(matrix.astype(np.int8))
        matching = maximum_bipartite_matching(graph, perm_type='column')
        return bool(np.all(matching >= 0))

    def would_cause_dead_end_exact(
        self,
        candidate: FirstSeededTeam,
        remaining_first_seeded: Sequence[FirstSeededTeam],
        other_second_seeded: Sequence[SecondSeededTeam]
    ) -> bool:
        """Same contract as :meth:`would_cause_dead_end`, using :meth:`has_complete_pairing`."""
        reduced_pool = [team for team in remaining_first_seeded if team != candidate]
        return not self.has_complete_pairing(reduced_pool, other_second_seeded)
