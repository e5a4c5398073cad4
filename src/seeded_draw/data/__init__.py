from .fixtures import champions_league_2021, teams_from_config

__all__ = ['champions_league_2021', 'teams_from_config']
