"""
Monte Carlo runs of the draw and analysis of their outcome.
"""

from .simulator import DrawSimulator, SimulationConfig, SimulationResult
from .analysis import (
    DrawAnalyzer,
    enumerate_feasible_pairings,
    exact_uniform_probabilities
)

__all__ = [
    'DrawSimulator',
    'SimulationConfig',
    'SimulationResult',
    'DrawAnalyzer',
    'enumerate_feasible_pairings',
    'exact_uniform_probabilities'
]
