from dataclasses import dataclass
import enum


class SourceType(enum.Enum):
    GROUP_POSITION = "group-position"
    MATCH_WINNER = "match-winner"
    MATCH_LOSER = "match-loser"


@dataclass(frozen=True)
class GroupPositionSource:
    """The team finishing at ``position`` (1-based) in a group."""

    group_id: str
    position: int

    type = SourceType.GROUP_POSITION


@dataclass(frozen=True)
class MatchWinnerSource:
    match_id: str

    type = SourceType.MATCH_WINNER


@dataclass(frozen=True)
class MatchLoserSource:
    match_id: str

    type = SourceType.MATCH_LOSER


@dataclass(frozen=True)
class Placeholder:
    """Stand-in for a team that is not known yet.

    Placeholder ids live in the same namespace as team ids.
    """

    id: str
    name: str
    source: object

    def __str__(self):
        return self.name
