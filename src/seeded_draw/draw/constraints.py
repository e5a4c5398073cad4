import numpy as np
from typing import Iterable, List, Sequence
import logging

from .teams import FirstSeededTeam, SecondSeededTeam

logger = logging.getLogger(__name__)


class ConstraintChecker:
    """Pairwise admissibility rules between a second and a first seeded team.

    Only the direct constraints are checked here: same group and prior
    partner. Whether a pairing leaves the rest of the draw solvable is the
    job of :class:`~seeded_draw.draw.feasibility.FeasibilityAnalyzer`.
    """

    def is_admissible(
        self,
        second_seeded: SecondSeededTeam,
        first_seeded: FirstSeededTeam
    ) -> bool:
        """
        Check whether two teams may be drawn against each other.

        Args:
            second_seeded: Team drawn from the second pot
            first_seeded: Candidate opponent from the first pot

        Returns:
            False if the teams share a group or already met, True otherwise
        """
        if first_seeded.group == second_seeded.group:
            return False
        if first_seeded == second_seeded.prior_partner:
            return False
        return True

    def admissible_opponents(
        self,
        second_seeded: SecondSeededTeam,
        first_seeded_pool: Iterable[FirstSeededTeam]
    ) -> List[FirstSeededTeam]:
        """Return the teams of ``first_seeded_pool`` admissible for ``second_seeded``, in pool order."""
        return [
            team for team in first_seeded_pool
            if self.is_admissible(second_seeded, team)
        ]

    def admissibility_matrix(
        self,
        second_seeded_pool: Sequence[SecondSeededTeam],
        first_seeded_pool: Sequence[FirstSeededTeam]
    ) -> np.ndarray:
        """
        Build the boolean admissibility matrix of two pools.

        Args:
            second_seeded_pool: Rows of the matrix
            first_seeded_pool: Columns of the matrix

        Returns:
            Array of shape (len(second_seeded_pool), len(first_seeded_pool))
        """
        matrix = np.zeros((len(second_seeded_pool), len(first_seeded_pool)), dtype=bool)
        for i, second in enumerate(second_seeded_pool):
            for j, first in enumerate(first_seeded_pool):
                matrix[i, j] = self.is_admissible(second, first)
        return matrix
