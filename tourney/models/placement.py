from dataclasses import dataclass
import enum


class PlacementFormat(enum.Enum):
    SINGLE_ELIMINATION = "single-elimination"
    PLAYOFF = "playoff"
    CROSS_GROUP = "cross-group"


@dataclass(frozen=True)
class PlacementBracket:
    """Placement matches for the teams finishing at ``positions`` in every group."""

    id: str
    name: str
    positions: tuple
    match_format: PlacementFormat = PlacementFormat.SINGLE_ELIMINATION
    include_third_place: bool = False
    include_fifth_place: bool = False


@dataclass(frozen=True)
class PlacementConfiguration:
    name: str
    brackets: tuple = ()
