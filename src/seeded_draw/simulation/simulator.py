import numpy as np
import pandas as pd
from typing import Any, Dict, List, Optional, Sequence
from dataclasses import dataclass, field
import logging

from ..draw import (
    ConstraintChecker,
    DrawConfig,
    DrawEngine,
    FirstSeededTeam,
    Match,
    NoFeasiblePairingError,
    SecondSeededTeam
)
from ..utils.timers import Timer

logger = logging.getLogger(__name__)

MATCH_COLUMNS = ['draw_id', 'match_index', 'first_seeded', 'second_seeded']


@dataclass
class SimulationConfig:
    """Configuration for a Monte Carlo run of the draw."""

    n_draws: int = 1000                 # Number of complete draws to produce
    seed: Optional[int] = 42            # Random seed for reproducibility
    max_attempts: int = 10              # Restarts allowed per draw after a dead end
    exact_feasibility: bool = False     # Passed on to every DrawConfig
    log_every: int = 100                # Progress message frequency, in draws

    @classmethod
    def from_dict(cls, config: Dict[str, Any]) -> 'SimulationConfig':
        """Create from the ``simulation`` section of a configuration dictionary."""
        known = {k: v for k, v in config.items() if k in cls.__dataclass_fields__}
        return cls(**known)


@dataclass
class SimulationResult:
    """Outcome of :meth:`DrawSimulator.run`."""

    draws: List[List[Match]] = field(default_factory=list)
    n_failed_attempts: int = 0          # Dead ends hit, then restarted
    n_abandoned: int = 0                # Draws given up after max_attempts
    elapsed: Optional[float] = None     # Wall-clock seconds

    @property
    def n_successful(self) -> int:
        return len(self.draws)

    @property
    def failure_rate(self) -> float:
        """Share of draw attempts that ran into a dead end.

        Every abandoned draw already counts its attempts in ``n_failed_attempts``.
        """
        attempts = self.n_successful + self.n_failed_attempts
        return self.n_failed_attempts / attempts if attempts else 0.0

    def to_frame(self) -> pd.DataFrame:
        """Long-format table with one row per match."""
        rows = []
        for draw_id, matches in enumerate(self.draws):
            for match in matches:
                row = match.to_dict()
                row['draw_id'] = draw_id
                rows.append(row)
        return pd.DataFrame(rows, columns=MATCH_COLUMNS)

    def violations(self, checker: Optional[ConstraintChecker] = None) -> pd.DataFrame:
        """Matches that break a direct constraint (empty for a correct engine)."""
        checker = checker or ConstraintChecker()
        rows = []
        for draw_id, matches in enumerate(self.draws):
            for match in matches:
                if not checker.is_admissible(match.second_seeded, match.first_seeded):
                    row = match.to_dict()
                    row['draw_id'] = draw_id
                    rows.append(row)
        return pd.DataFrame(rows, columns=MATCH_COLUMNS)


class DrawSimulator:
    """Repeat the draw many times to stress-test it and estimate pairing probabilities."""

    def __init__(
        self,
        first_seeded: Sequence[FirstSeededTeam],
        second_seeded: Sequence[SecondSeededTeam],
        config: Optional[SimulationConfig] = None
    ):
        """
        Initialize draw simulator.

        Args:
            first_seeded: Teams of the first pot
            second_seeded: Teams of the second pot
            config: Simulation configuration (optional, defaults used if None)
        """
        self.first_seeded = list(first_seeded)
        self.second_seeded = list(second_seeded)
        self.config = config or SimulationConfig()
        self.rng = np.random.RandomState(self.config.seed)

        self.logger = logger
        self._failed_attempts = 0

        # Validate once here, the engines built per draw skip it
        self._new_engine(validate=True)

    def _new_engine(self, validate: bool = False) -> DrawEngine:
        draw_config = DrawConfig(
            validate_input=validate,
            exact_feasibility=self.config.exact_feasibility
        )
        return DrawEngine(
            self.first_seeded,
            self.second_seeded,
            config=draw_config,
            rng=self.rng
        )

    def simulate_single_draw(self, draw_id: int = 0) -> Optional[List[Match]]:
        """
        Produce one complete draw, restarting after dead ends.

        Args:
            draw_id: Draw index, for log messages

        Returns:
            The matches, or None if every attempt ran into a dead end
        """
        for attempt in range(1, self.config.max_attempts + 1):
            engine = self._new_engine()
            try:
                return engine.run_full_draw()
            except NoFeasiblePairingError as e:
                self.logger.warning(f"Draw {draw_id} attempt {attempt} failed: {e}")
                self._failed_attempts += 1
        return None

    def run(self) -> SimulationResult:
        """
        Run the Monte Carlo simulation.

        Returns:
            SimulationResult with the successful draws and failure counts
        """
        self.logger.info(f"Running draw simulation with {self.config.n_draws} draws")
        result = SimulationResult()
        self._failed_attempts = 0

        # Per-match progress is only interesting for a single draw
        engine_logger = logging.getLogger(DrawEngine.__module__)
        previous_level = engine_logger.level
        engine_logger.setLevel(max(previous_level, logging.WARNING))
        try:
            with Timer("draw simulation", log_level=logging.DEBUG) as timer:
                for draw_id in range(self.config.n_draws):
                    if self.config.log_every and draw_id % self.config.log_every == 0:
                        self.logger.info(f"Processing draw {draw_id}/{self.config.n_draws}")

                    matches = self.simulate_single_draw(draw_id)
                    if matches is None:
                        self.logger.error(
                            f"Draw {draw_id} abandoned after {self.config.max_attempts} attempts"
                        )
                        result.n_abandoned += 1
                    else:
                        result.draws.append(matches)
                        timer.tick()
        finally:
            engine_logger.setLevel(previous_level)

        result.n_failed_attempts = self._failed_attempts
        result.elapsed = timer.elapsed
        self.logger.info(
            f"Draw simulation completed: {result.n_successful} draws, "
            f"{result.n_failed_attempts} dead ends"
        )
        return result
