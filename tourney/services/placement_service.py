"""Placement matches after the group stage.

Handles:
- Checking a placement configuration before anything is generated
- Building each placement bracket from group-position placeholders, as a
  knockout, a fixed playoff or direct cross-group pairings
"""
import logging
from dataclasses import dataclass

from tourney.errors import EngineValidationError
from tourney.models.match import Match, MatchStatus
from tourney.models.phase import PLAYOFF_BRACKET_SIZES, PlayoffSettings
from tourney.models.placement import PlacementFormat
from tourney.services.bracket_service import (
    generate_knockout_bracket,
    generate_playoff_bracket,
    group_position_slot,
)
from tourney.services.format_service import FormatValidation

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlacementResult:
    bracket_id: str
    bracket_name: str
    matches: tuple = ()


def validate_placement_configuration(config):
    errors = []

    if not config.name or not config.name.strip():
        errors.append("Placement system name is required")

    if not config.brackets:
        errors.append("At least one bracket must be defined")

    bracket_ids = [b.id for b in config.brackets]
    if len(bracket_ids) != len(set(bracket_ids)):
        errors.append("Bracket IDs must be unique")

    positions = [p for b in config.brackets for p in b.positions]
    if len(positions) != len(set(positions)):
        errors.append("Team positions cannot be assigned to multiple brackets")

    for bracket in config.brackets:
        if not bracket.positions:
            errors.append(f'Bracket "{bracket.name}" has no positions')

    return FormatValidation(errors=errors, warnings=[])


def _ordinal(n):
    if 10 <= n % 100 <= 20:
        suffix = "th"
    else:
        suffix = {1: "st", 2: "nd", 3: "rd"}.get(n % 10, "th")
    return f"{n}{suffix}"


def _bracket_entrants(groups, positions):
    """Position-major order: every group's 1st, then every group's 2nd, ...

    Groups too small to have a position contribute nothing for it.
    """
    return [
        group_position_slot(group, position)
        for position in sorted(positions)
        for group in groups
        if position <= len(group.teams)
    ]


def _cross_group_matches(groups, bracket):
    """Same-position pairings between consecutive groups: 1A v 1B, 2A v 2B, ...

    Within a pair of groups the position-``p`` match decides place 2p - 1.
    """
    if len(groups) % 2:
        raise EngineValidationError(
            f'Bracket "{bracket.name}": cross-group pairing needs an even number of groups',
            location=f"bracket:{bracket.id}",
        )

    matches = []
    for position in sorted(bracket.positions):
        for home_group, away_group in zip(groups[::2], groups[1::2]):
            if position > len(home_group.teams) or position > len(away_group.teams):
                continue
            number = len(matches) + 1
            matches.append(
                Match(
                    id=f"{bracket.id}-m{number}",
                    home=group_position_slot(home_group, position),
                    away=group_position_slot(away_group, position),
                    status=MatchStatus.SCHEDULED,
                    group_id=bracket.id,
                    round=1,
                    round_label=f"{_ordinal(2 * position - 1)} place",
                    match_label=f"Match {number}",
                )
            )
    return matches


def _playoff_matches(entrants, bracket):
    size = next(
        (s for s in PLAYOFF_BRACKET_SIZES if s >= len(entrants)),
        PLAYOFF_BRACKET_SIZES[-1],
    )
    settings = PlayoffSettings(
        include_third_place=bracket.include_third_place,
        include_fifth_place=bracket.include_fifth_place,
        bracket_size=size,
    )
    return generate_playoff_bracket(entrants, bracket.id, settings).matches


def generate_placement_matches(groups, config):
    """Build the matches of every placement bracket in ``config``.

    Entrants are group-position placeholders, so the groups need their teams
    for the positions that exist. A single-elimination bracket over positions
    1 and 2 of two groups pairs 1A v 2B and 1B v 2A.

    Returns one PlacementResult per bracket, in configuration order.
    """
    groups = list(groups)
    validation = validate_placement_configuration(config)
    if not validation.is_valid:
        raise EngineValidationError("; ".join(validation.errors), location="placement")

    results = []
    for bracket in config.brackets:
        entrants = _bracket_entrants(groups, bracket.positions)

        if bracket.match_format == PlacementFormat.CROSS_GROUP:
            matches = _cross_group_matches(groups, bracket)
        elif bracket.match_format == PlacementFormat.PLAYOFF:
            matches = _playoff_matches(entrants, bracket)
        else:
            matches = generate_knockout_bracket(
                entrants, bracket.id, include_third_place=bracket.include_third_place
            ).matches

        logger.info(
            "Placement bracket %s: %d entrants, %d matches",
            bracket.id,
            len(entrants),
            len(matches),
        )
        results.append(
            PlacementResult(
                bracket_id=bracket.id,
                bracket_name=bracket.name,
                matches=tuple(matches),
            )
        )

    return results
