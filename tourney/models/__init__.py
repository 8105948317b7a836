from tourney.models.team import Team
from tourney.models.placeholder import (
    SourceType,
    GroupPositionSource,
    MatchWinnerSource,
    MatchLoserSource,
    Placeholder,
)
from tourney.models.match import Match, MatchStatus, Resolved, Pending
from tourney.models.phase import (
    PhaseType,
    TournamentFormat,
    SeedingMethod,
    BracketType,
    GroupSettings,
    KnockoutSettings,
    PlayoffSettings,
    Phase,
    FormatConfiguration,
)
from tourney.models.group import Group, Division
from tourney.models.placement import PlacementFormat, PlacementBracket, PlacementConfiguration
from tourney.models.standing import Standing

__all__ = [
    "Team",
    "SourceType",
    "GroupPositionSource",
    "MatchWinnerSource",
    "MatchLoserSource",
    "Placeholder",
    "Match",
    "MatchStatus",
    "Resolved",
    "Pending",
    "PhaseType",
    "TournamentFormat",
    "SeedingMethod",
    "BracketType",
    "GroupSettings",
    "KnockoutSettings",
    "PlayoffSettings",
    "Phase",
    "FormatConfiguration",
    "Group",
    "Division",
    "PlacementFormat",
    "PlacementBracket",
    "PlacementConfiguration",
    "Standing",
]
