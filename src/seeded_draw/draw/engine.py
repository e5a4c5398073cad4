import numpy as np
from typing import Any, Dict, List, Optional, Sequence
from dataclasses import dataclass, field
from enum import Enum
import logging
import time

from .constraints import ConstraintChecker
from .exceptions import (
    EmptyPoolError,
    InfeasibleDrawError,
    InvalidDrawInputError,
    NoFeasiblePairingError
)
from .feasibility import FeasibilityAnalyzer
from .teams import FirstSeededTeam, SecondSeededTeam

logger = logging.getLogger(__name__)


class DrawState(Enum):
    """Lifecycle of a draw."""
    READY = "ready"          # Pools full, no match drawn yet
    DRAWING = "drawing"      # Some matches drawn
    COMPLETE = "complete"    # Every team paired


@dataclass
class DrawConfig:
    """Configuration for a single draw."""

    seed: Optional[int] = None           # Random seed, None for a fresh entropy source
    step_delay: float = 0.0              # Cosmetic pause between matches, in seconds
    validate_input: bool = True          # Check the pools eagerly on construction
    exact_feasibility: bool = False      # Prune with the exact matching check instead of the heuristic

    @classmethod
    def from_dict(cls, config: Dict[str, Any]) -> 'DrawConfig':
        """Create from the ``draw`` section of a configuration dictionary."""
        known = {k: v for k, v in config.items() if k in cls.__dataclass_fields__}
        return cls(**known)


@dataclass(frozen=True)
class Match:
    """A finalized pairing of the draw."""

    first_seeded: FirstSeededTeam
    second_seeded: SecondSeededTeam
    index: int                           # Position in the draw, starting at 1

    def to_dict(self) -> Dict[str, Any]:
        """Convert match to dictionary."""
        return {
            'match_index': self.index,
            'first_seeded': self.first_seeded.name,
            'second_seeded': self.second_seeded.name
        }

    def __str__(self) -> str:
        return f"{self.second_seeded.name} - {self.first_seeded.name}"


@dataclass
class DrawStep:
    """Diagnostics recorded while drawing one match."""

    index: int
    second_seeded: SecondSeededTeam
    candidates: List[FirstSeededTeam] = field(default_factory=list)
    first_seeded: Optional[FirstSeededTeam] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert step to dictionary."""
        return {
            'match_index': self.index,
            'second_seeded': self.second_seeded.name,
            'candidates': [team.name for team in self.candidates],
            'first_seeded': self.first_seeded.name if self.first_seeded else None
        }


class DrawEngine:
    """
    Draw the second seeded teams against the first seeded ones, one match at a time.

    Each match draws a second seeded team uniformly at random, lists the
    first seeded teams it may face without blocking the rest of the draw,
    and draws its opponent uniformly among them. The draw is greedy: a dead
    end is reported with :class:`NoFeasiblePairingError` and never undone.
    """

    def __init__(
        self,
        first_seeded: Sequence[FirstSeededTeam],
        second_seeded: Sequence[SecondSeededTeam],
        config: Optional[DrawConfig] = None,
        rng: Optional[np.random.RandomState] = None,
        checker: Optional[ConstraintChecker] = None,
        analyzer: Optional[FeasibilityAnalyzer] = None
    ):
        """
        Initialize draw engine.

        Args:
            first_seeded: Teams of the first pot
            second_seeded: Teams of the second pot, same size as ``first_seeded``
            config: Draw configuration (optional, defaults used if None)
            rng: Random source (optional, seeded from ``config.seed`` if None)
            checker: Constraint checker (optional, will create if None)
            analyzer: Feasibility analyzer (optional, will create if None)

        Raises:
            InvalidDrawInputError: If validation is enabled and the pools are malformed
            InfeasibleDrawError: If validation is enabled and no complete pairing exists
        """
        self.config = config or DrawConfig()
        self.rng = rng if rng is not None else np.random.RandomState(self.config.seed)
        self.checker = checker or ConstraintChecker()
        self.analyzer = analyzer or FeasibilityAnalyzer(self.checker)

        if self.config.validate_input:
            self._validate_pools(first_seeded, second_seeded)

        # Pools keyed by name: insertion ordered, O(1) removal
        self._first_seeded: Dict[str, FirstSeededTeam] = {t.name: t for t in first_seeded}
        self._second_seeded: Dict[str, SecondSeededTeam] = {t.name: t for t in second_seeded}

        self.n_matches = len(self._second_seeded)
        self.matches: List[Match] = []
        self.steps: List[DrawStep] = []

    @property
    def state(self) -> DrawState:
        """Current state of the draw."""
        if not self._second_seeded:
            return DrawState.COMPLETE
        if self.matches:
            return DrawState.DRAWING
        return DrawState.READY

    @property
    def remaining_first_seeded(self) -> List[FirstSeededTeam]:
        """First seeded teams still in the pot."""
        return list(self._first_seeded.values())

    @property
    def remaining_second_seeded(self) -> List[SecondSeededTeam]:
        """Second seeded teams still in the pot."""
        return list(self._second_seeded.values())

    def allowed_opponents(
        self,
        second_seeded: SecondSeededTeam,
        other_second_seeded: Optional[Sequence[SecondSeededTeam]] = None
    ) -> List[FirstSeededTeam]:
        """
        List the first seeded teams ``second_seeded`` may be drawn against.

        A team is allowed when the direct constraints hold and taking it out
        of the pot leaves the remaining teams a complete draw.

        Args:
            second_seeded: Team whose opponent is being drawn
            other_second_seeded: Teams still waiting once ``second_seeded`` is
                matched (defaults to the remaining pot minus ``second_seeded``)

        Returns:
            Allowed first seeded teams, in pot order
        """
        if other_second_seeded is None:
            other_second_seeded = [
                team for team in self._second_seeded.values() if team != second_seeded
            ]
        remaining_first = self.remaining_first_seeded

        if self.config.exact_feasibility:
            dead_end = self.analyzer.would_cause_dead_end_exact
        else:
            dead_end = self.analyzer.would_cause_dead_end

        allowed = []
        for candidate in remaining_first:
            if not self.checker.is_admissible(second_seeded, candidate):
                continue
            if dead_end(candidate, remaining_first, other_second_seeded):
                continue
            allowed.append(candidate)
        return allowed

    def draw_one_match(self) -> Match:
        """
        Draw the next match.

        Returns:
            The finalized match

        Raises:
            EmptyPoolError: If every team is already paired
            NoFeasiblePairingError: If the drawn team has no allowed opponent
        """
        if not self._second_seeded:
            raise EmptyPoolError("Draw is complete: no second seeded team left")

        index = len(self.matches) + 1
        logger.info(f"Match number {index}:")

        second_pool = self.remaining_second_seeded
        second_drawn = second_pool[self.rng.randint(len(second_pool))]
        logger.info(f"Second seeded team drawn: {second_drawn.name}")

        others = [team for team in second_pool if team != second_drawn]
        candidates = self.allowed_opponents(second_drawn, others)
        step = DrawStep(index=index, second_seeded=second_drawn, candidates=candidates)
        self.steps.append(step)

        if not candidates:
            logger.warning(f"No feasible opponent left for {second_drawn.name}")
            raise NoFeasiblePairingError(second_drawn.name, index)

        logger.info(f"It can play against: {', '.join(t.name for t in candidates)}")

        first_drawn = candidates[self.rng.randint(len(candidates))]
        step.first_seeded = first_drawn

        del self._second_seeded[second_drawn.name]
        del self._first_seeded[first_drawn.name]

        match = Match(first_seeded=first_drawn, second_seeded=second_drawn, index=index)
        self.matches.append(match)
        logger.info(f"First seeded team drawn: {first_drawn.name}")
        logger.info(f"So the game is: {match}")
        return match

    def run_full_draw(self) -> List[Match]:
        """
        Draw the matches left in the pots.

        Matches already drawn with :meth:`draw_one_match` are kept.

        Returns:
            The ordered list of all the matches of the draw

        Raises:
            EmptyPoolError: If the draw was already complete
            NoFeasiblePairingError: If the draw runs into a dead end
        """
        if not self._second_seeded:
            raise EmptyPoolError("Draw is complete: no second seeded team left")

        for _ in range(len(self._second_seeded)):
            self.draw_one_match()
            if self.config.step_delay > 0:
                time.sleep(self.config.step_delay)
        return list(self.matches)

    def _validate_pools(
        self,
        first_seeded: Sequence[FirstSeededTeam],
        second_seeded: Sequence[SecondSeededTeam]
    ) -> None:
        """Check pool sizes, types, names and prior partners, then overall feasibility."""
        issues = []

        if len(first_seeded) != len(second_seeded):
            issues.append(
                f"pool sizes differ: {len(first_seeded)} first seeded, "
                f"{len(second_seeded)} second seeded"
            )
        if not first_seeded or not second_seeded:
            issues.append("pools must not be empty")

        if not all(isinstance(t, FirstSeededTeam) for t in first_seeded):
            issues.append("first pot must only contain FirstSeededTeam objects")
        if not all(isinstance(t, SecondSeededTeam) for t in second_seeded):
            issues.append("second pot must only contain SecondSeededTeam objects")

        names = [t.name for t in first_seeded] + [t.name for t in second_seeded]
        duplicates = sorted({name for name in names if names.count(name) > 1})
        if duplicates:
            issues.append(f"duplicate team names: {duplicates}")

        first_names = {t.name for t in first_seeded}
        for team in second_seeded:
            if not isinstance(team, SecondSeededTeam):
                continue
            if team.prior_partner.name not in first_names:
                issues.append(
                    f"prior partner '{team.prior_partner.name}' of '{team.name}' is not in the first pot"
                )

        if issues:
            raise InvalidDrawInputError(f"Invalid draw input: {issues}")

        if not self.analyzer.has_complete_pairing(list(first_seeded), list(second_seeded)):
            raise InfeasibleDrawError("Pools admit no complete pairing")
