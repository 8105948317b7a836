from dataclasses import dataclass
from typing import Optional, Union
import enum

from tourney.errors import EngineValidationError


class PhaseType(enum.Enum):
    GROUP = "group"
    KNOCKOUT = "knockout"
    PLAYOFF = "playoff"


class TournamentFormat(enum.Enum):
    ROUND_ROBIN_ONLY = "round-robin-only"
    KNOCKOUT_ONLY = "knockout-only"
    HYBRID_GROUPS_KNOCKOUT = "hybrid-groups-knockout"
    HYBRID_GROUPS_PLAYOFF = "hybrid-groups-playoff"
    CUSTOM = "custom"


class SeedingMethod(enum.Enum):
    GROUP_STANDINGS = "group-standings"
    RANDOM = "random"
    MANUAL = "manual"


class BracketType(enum.Enum):
    SINGLE_ELIMINATION = "single-elimination"
    DOUBLE_ELIMINATION = "double-elimination"


TIEBREAKER_RULES = ("points", "goal-difference", "goals-scored", "head-to-head")
PLAYOFF_BRACKET_SIZES = (4, 6, 8)
DEFAULT_TIEBREAKER_RULES = ("points", "goal-difference", "goals-scored")


@dataclass(frozen=True)
class GroupSettings:
    min_teams_per_group: int
    max_teams_per_group: int
    teams_advance: int = 0
    tiebreaker_rules: tuple = DEFAULT_TIEBREAKER_RULES


@dataclass(frozen=True)
class KnockoutSettings:
    include_third_place: bool = False
    seeding_method: SeedingMethod = SeedingMethod.GROUP_STANDINGS
    bracket_type: BracketType = BracketType.SINGLE_ELIMINATION


@dataclass(frozen=True)
class PlayoffSettings:
    include_third_place: bool = True
    include_fifth_place: bool = False
    bracket_size: int = 4


SETTINGS_TYPES = {
    PhaseType.GROUP: GroupSettings,
    PhaseType.KNOCKOUT: KnockoutSettings,
    PhaseType.PLAYOFF: PlayoffSettings,
}


@dataclass(frozen=True)
class Phase:
    id: str
    type: PhaseType
    name: str
    order: int
    settings: Union[GroupSettings, KnockoutSettings, PlayoffSettings]
    enabled: bool = True
    description: Optional[str] = None

    def __post_init__(self):
        expected = SETTINGS_TYPES[self.type]
        if not isinstance(self.settings, expected):
            raise EngineValidationError(
                f'Phase "{self.name}": a {self.type.value} phase needs '
                f"{expected.__name__}, got {type(self.settings).__name__}",
                location=f"phase:{self.id}",
            )

    @property
    def is_group(self):
        return self.type == PhaseType.GROUP

    @property
    def is_elimination(self):
        return self.type in (PhaseType.KNOCKOUT, PhaseType.PLAYOFF)


@dataclass(frozen=True)
class FormatConfiguration:
    """A division's phase sequence."""

    phases: tuple = ()
    division_id: Optional[str] = None
    format: TournamentFormat = TournamentFormat.CUSTOM

    @property
    def enabled_phases(self):
        return [p for p in self.phases if p.enabled]

    def get_phase(self, phase_id):
        return next((p for p in self.phases if p.id == phase_id), None)
