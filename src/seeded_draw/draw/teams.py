from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional


@dataclass(frozen=True, eq=False)
class Team:
    """A team taking part in the draw.

    Attributes:
        name: Team name, unique within a draw
        group: Mutual-exclusion label (the nation): teams sharing a group
            cannot be drawn against each other
    """

    name: str
    group: str

    def get_name(self) -> str:
        """Return the name of the team."""
        return self.name

    def get_group(self) -> str:
        """Return the group (nation) of the team."""
        return self.group

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Team):
            return NotImplemented
        return self.name == other.name

    def __hash__(self) -> int:
        return hash(self.name)

    def __str__(self) -> str:
        return self.name

    def to_dict(self) -> Dict[str, Any]:
        """Convert team to dictionary."""
        return {'name': self.name, 'group': self.group}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'Team':
        """Create from dictionary."""
        return cls(name=str(data['name']), group=str(data['group']))


@dataclass(frozen=True, eq=False)
class FirstSeededTeam(Team):
    """A team of the first pot (PoolA)."""


@dataclass(frozen=True, eq=False)
class SecondSeededTeam(Team):
    """A team of the second pot (PoolB).

    Attributes:
        prior_partner: The first seeded team already met in an earlier stage;
            the two cannot be drawn together again
    """

    prior_partner: FirstSeededTeam

    def to_dict(self) -> Dict[str, Any]:
        """Convert team to dictionary, referencing the prior partner by name."""
        data = super().to_dict()
        data['prior_partner'] = self.prior_partner.name
        return data

    @classmethod
    def from_dict(
        cls,
        data: Mapping[str, Any],
        first_seeded: Optional[Mapping[str, FirstSeededTeam]] = None
    ) -> 'SecondSeededTeam':
        """
        Create from dictionary.

        Args:
            data: Mapping with ``name``, ``group`` and ``prior_partner`` keys
            first_seeded: First seeded teams keyed by name, used to resolve
                ``prior_partner``

        Returns:
            SecondSeededTeam instance

        Raises:
            KeyError: If the prior partner is not among ``first_seeded``
        """
        first_seeded = first_seeded or {}
        partner_name = str(data['prior_partner'])
        if partner_name not in first_seeded:
            raise KeyError(
                f"Prior partner '{partner_name}' of '{data['name']}' is not a first seeded team"
            )
        return cls(
            name=str(data['name']),
            group=str(data['group']),
            prior_partner=first_seeded[partner_name]
        )
