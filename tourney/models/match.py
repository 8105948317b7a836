from dataclasses import dataclass
from datetime import datetime
from typing import Optional
import enum

from tourney.models.placeholder import Placeholder


class MatchStatus(enum.Enum):
    SCHEDULED = "scheduled"
    LIVE = "live"
    FINISHED = "finished"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class Resolved:
    """A match slot occupied by a concrete team.

    ``source`` is kept when the slot used to hold a placeholder, so bracket
    edges survive resolution.
    """

    team_id: str
    source: Optional[object] = None

    is_placeholder = False


@dataclass(frozen=True)
class Pending:
    """A match slot still waiting for its team."""

    placeholder: Placeholder

    is_placeholder = True

    @property
    def source(self):
        return self.placeholder.source


@dataclass(frozen=True)
class Match:
    id: str
    home: Optional[object] = None
    away: Optional[object] = None
    home_score: Optional[int] = None
    away_score: Optional[int] = None
    status: MatchStatus = MatchStatus.SCHEDULED
    group_id: Optional[str] = None
    round: Optional[int] = None
    round_label: Optional[str] = None
    match_label: Optional[str] = None
    start_time: Optional[datetime] = None
    penalty_winner_id: Optional[str] = None

    @property
    def home_team_id(self):
        return self.home.team_id if isinstance(self.home, Resolved) else None

    @property
    def away_team_id(self):
        return self.away.team_id if isinstance(self.away, Resolved) else None

    @property
    def is_finished(self):
        return self.status == MatchStatus.FINISHED

    def __repr__(self):
        return f"<Match {self.id}: {self.home!r} vs {self.away!r}>"
