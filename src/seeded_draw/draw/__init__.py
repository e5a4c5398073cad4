"""
Constrained random draw of second seeded teams against first seeded teams.

Teams of the same group (nation) cannot meet, and neither can two teams that
already met in an earlier stage. The engine prunes, at every match, the
opponents that would leave the rest of the draw without a solution.
"""

from .teams import Team, FirstSeededTeam, SecondSeededTeam
from .constraints import ConstraintChecker
from .feasibility import FeasibilityAnalyzer
from .engine import DrawEngine, DrawConfig, DrawState, DrawStep, Match
from .exceptions import (
    DrawError,
    EmptyPoolError,
    NoFeasiblePairingError,
    InvalidDrawInputError,
    InfeasibleDrawError
)

__all__ = [
    'Team',
    'FirstSeededTeam',
    'SecondSeededTeam',
    'ConstraintChecker',
    'FeasibilityAnalyzer',
    'DrawEngine',
    'DrawConfig',
    'DrawState',
    'DrawStep',
    'Match',
    'DrawError',
    'EmptyPoolError',
    'NoFeasiblePairingError',
    'InvalidDrawInputError',
    'InfeasibleDrawError'
]
