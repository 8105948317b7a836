from dataclasses import dataclass
from typing import Optional

from tourney.models.phase import FormatConfiguration


@dataclass(frozen=True)
class Group:
    id: str
    name: str
    teams: tuple = ()

    @property
    def team_ids(self):
        return [team.id for team in self.teams]


@dataclass(frozen=True)
class Division:
    id: str
    name: str
    groups: tuple = ()
    format: Optional[FormatConfiguration] = None

    def get_group(self, group_id):
        return next((g for g in self.groups if g.id == group_id), None)
