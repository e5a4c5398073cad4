"""Team pools for the draw: the 2021 round of 16 and config-driven pools."""

from typing import Any, Dict, List, Tuple

from ..draw import FirstSeededTeam, SecondSeededTeam

Pools = Tuple[List[FirstSeededTeam], List[SecondSeededTeam]]

# Group winners of the 2021/22 group stage
FIRST_SEEDED_2021 = [
    ("Real Madrid", "Spain"),
    ("Juventus", "Italy"),
    ("Liverpool", "England"),
    ("Manchester City", "England"),
    ("Manchester United", "England"),
    ("Bayern München", "Germany"),
    ("Ajax", "Netherlands"),
    ("Lille", "France"),
]

# Runners-up, with the group winner they met in the group stage
SECOND_SEEDED_2021 = [
    ("Villareal", "Spain", "Manchester United"),
    ("Chelsea", "England", "Juventus"),
    ("Inter Milan", "Italy", "Real Madrid"),
    ("RB Salzburg", "Austria", "Lille"),
    ("Sporting Clube Portugal", "Portugal", "Ajax"),
    ("Benfica", "Portugal", "Bayern München"),
    ("PSG", "France", "Manchester City"),
    ("Atletico Madrid", "Spain", "Liverpool"),
]


def champions_league_2021() -> Pools:
    """Return fresh first and second seeded pools for the 2021 round of 16."""
    first = [FirstSeededTeam(name, group) for name, group in FIRST_SEEDED_2021]
    by_name = {team.name: team for team in first}
    second = [
        SecondSeededTeam(name, group, by_name[partner])
        for name, group, partner in SECOND_SEEDED_2021
    ]
    return first, second


def teams_from_config(config: Dict[str, Any]) -> Pools:
    """
    Build the pools from the ``teams`` section of a configuration.

    Args:
        config: Dictionary with ``first_seeded`` and ``second_seeded`` lists;
            second seeded entries reference their prior partner by name

    Returns:
        Tuple of (first seeded teams, second seeded teams)

    Raises:
        KeyError: If a section is missing or a prior partner is unknown
    """
    first = [FirstSeededTeam.from_dict(entry) for entry in config['first_seeded']]
    by_name = {team.name: team for team in first}
    second = [
        SecondSeededTeam.from_dict(entry, by_name)
        for entry in config['second_seeded']
    ]
    return first, second
