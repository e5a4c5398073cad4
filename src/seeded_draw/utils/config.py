import yaml
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Union

from ..data import champions_league_2021, teams_from_config
from ..draw import DrawConfig, FirstSeededTeam, SecondSeededTeam
from ..simulation.simulator import SimulationConfig

logger = logging.getLogger(__name__)

# Top-level sections understood by build_draw_setup
DRAW_SECTIONS = ('draw', 'simulation', 'logging', 'teams')

_MISSING = object()


@dataclass
class DrawSetup:
    """Everything needed to run a draw or a simulation, built from a config file."""

    draw: DrawConfig = field(default_factory=DrawConfig)
    simulation: SimulationConfig = field(default_factory=SimulationConfig)
    first_seeded: List[FirstSeededTeam] = field(default_factory=list)
    second_seeded: List[SecondSeededTeam] = field(default_factory=list)
    log_level: str = "INFO"
    draw_progress: bool = True      # Per-match INFO messages of the engine


def load_config(path: Union[str, Path]) -> Dict[str, Any]:
    """
    Load a YAML draw configuration and return a nested dict.

    Args:
        path: Path to the YAML configuration file

    Returns:
        Dictionary containing the configuration (empty for an empty file)

    Raises:
        FileNotFoundError: If the config file doesn't exist
        yaml.YAMLError: If the YAML is malformed
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            config = yaml.safe_load(f)
        logger.info(f"Loaded draw config from {path}")
        return config or {}
    except FileNotFoundError:
        logger.error(f"Draw config not found: {path}")
        raise
    except yaml.YAMLError as e:
        logger.error(f"Malformed draw config {path}: {e}")
        raise


def validate_config(config: Dict[str, Any], required_keys: List[str]) -> None:
    """
    Validate that a configuration contains required keys.

    Args:
        config: Configuration dictionary to validate
        required_keys: Required keys, dot notation for nested ones (e.g. 'teams.first_seeded')

    Raises:
        ValueError: If any required key is missing
    """
    missing_keys = []
    for key in required_keys:
        if get_nested_value(config, key, _MISSING) is _MISSING:
            missing_keys.append(key)

    if missing_keys:
        raise ValueError(f"Missing required config keys: {missing_keys}")


def get_nested_value(config: Dict[str, Any], key: str, default: Any = None) -> Any:
    """Get a value using dot notation (e.g. 'draw.seed'), or ``default``."""
    current = config
    try:
        for part in key.split('.'):
            current = current[part]
        return current
    except (KeyError, TypeError):
        return default


def set_nested_value(config: Dict[str, Any], key: str, value: Any) -> None:
    """Set a value using dot notation, creating the missing sections."""
    *sections, last = key.split('.')
    current = config
    for part in sections:
        current = current.setdefault(part, {})
    current[last] = value


def build_draw_setup(config: Dict[str, Any]) -> DrawSetup:
    """
    Turn a configuration dictionary into draw and simulation settings plus pools.

    Without a ``teams`` section the 2021 round of 16 pools are used.

    Args:
        config: Configuration with optional ``draw``, ``simulation``,
            ``logging`` and ``teams`` sections

    Returns:
        DrawSetup instance

    Raises:
        ValueError: If a section is not a mapping or ``teams`` lacks a pot
        KeyError: If a second seeded team references an unknown prior partner
    """
    for section in config:
        if section not in DRAW_SECTIONS:
            logger.warning(f"Ignoring unknown config section '{section}'")

    for section in DRAW_SECTIONS:
        if not isinstance(config.get(section, {}), dict):
            raise ValueError(f"Config section '{section}' must be a mapping")

    if 'teams' in config:
        validate_config(config, ['teams.first_seeded', 'teams.second_seeded'])
        first_seeded, second_seeded = teams_from_config(config['teams'])
    else:
        first_seeded, second_seeded = champions_league_2021()

    logging_section = config.get('logging', {})
    setup = DrawSetup(
        draw=DrawConfig.from_dict(config.get('draw', {})),
        simulation=SimulationConfig.from_dict(config.get('simulation', {})),
        first_seeded=first_seeded,
        second_seeded=second_seeded,
        log_level=str(logging_section.get('level', 'INFO')),
        draw_progress=bool(logging_section.get('draw_progress', True))
    )
    logger.debug(f"Draw setup with {len(first_seeded)} first seeded teams")
    return setup


def load_draw_setup(path: Union[str, Path]) -> DrawSetup:
    """Load a YAML file and build its DrawSetup."""
    return build_draw_setup(load_config(path))
