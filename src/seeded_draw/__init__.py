"""
Seeded Draw
===========

Random draw of a knockout round between two pots of teams under the two
classic constraints:
- teams of the same nation cannot be drawn against each other
- teams that already met in an earlier stage cannot meet again

The draw is made one match at a time. Before an opponent is drawn, every
candidate whose removal would leave the remaining teams without a valid
draw is discarded.

Key Components:
- Team value objects and the pairwise constraint checker
- Feasibility analysis of partial draws
- The draw engine itself
- Monte Carlo simulation and analysis of many draws
"""

__version__ = "1.0.0"

from .draw import (
    Team,
    FirstSeededTeam,
    SecondSeededTeam,
    ConstraintChecker,
    FeasibilityAnalyzer,
    DrawEngine,
    DrawConfig,
    DrawState,
    Match,
    DrawError,
    EmptyPoolError,
    NoFeasiblePairingError,
    InvalidDrawInputError,
    InfeasibleDrawError
)
from .data import champions_league_2021, teams_from_config
from .utils.config import DrawSetup, load_config, load_draw_setup
from .utils.logging_utils import setup_logging

__all__ = [
    'Team',
    'FirstSeededTeam',
    'SecondSeededTeam',
    'ConstraintChecker',
    'FeasibilityAnalyzer',
    'DrawEngine',
    'DrawConfig',
    'DrawState',
    'Match',
    'DrawError',
    'EmptyPoolError',
    'NoFeasiblePairingError',
    'InvalidDrawInputError',
    'InfeasibleDrawError',
    'champions_league_2021',
    'teams_from_config',
    'DrawSetup',
    'load_config',
    'load_draw_setup',
    'setup_logging'
]
