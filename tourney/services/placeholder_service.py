"""Placeholder resolution for later-phase matches.

Handles:
- Finding the placeholders still sitting in a division's match slots
- Resolving group-position sources once the group's table is settled
- Resolving match-winner / match-loser sources once the source match is finished
- Substituting the resolved team into every slot that referenced a placeholder
"""
import logging
from dataclasses import dataclass, field, replace

from tourney.models.match import MatchStatus, Pending, Resolved
from tourney.models.phase import PhaseType
from tourney.models.placeholder import GroupPositionSource, MatchLoserSource, MatchWinnerSource
from tourney.services.standings import (
    compute_group_standings,
    group_progress,
    tiebreaker_from_rules,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResolutionError:
    placeholder_id: str
    error: str


@dataclass(frozen=True)
class ResolutionResult:
    """Outcome of one resolution pass.

    ``matches`` is the full match list with substitutions applied,
    ``placeholders`` the ones still unresolved and ``substitutions`` maps each
    placeholder resolved in this pass to its team id.
    """

    resolved_count: int = 0
    errors: tuple = ()
    matches: tuple = ()
    placeholders: tuple = ()
    substitutions: dict = field(default_factory=dict)


def collect_placeholders(matches):
    """Placeholders referenced by Pending slots, first occurrence order, no duplicates."""
    seen = {}
    for m in matches:
        for slot in (m.home, m.away):
            if isinstance(slot, Pending) and slot.placeholder.id not in seen:
                seen[slot.placeholder.id] = slot.placeholder
    return list(seen.values())


def _pending_ids(matches):
    return {p.id for p in collect_placeholders(matches)}


def _substitute(matches, substitutions):
    """Replace every Pending slot whose placeholder is in ``substitutions``.

    The new Resolved slot keeps the placeholder's source.
    Returns (updated matches, number of slots replaced).
    """
    updated = []
    replaced = 0

    for m in matches:
        changes = {}
        for side in ("home", "away"):
            slot = getattr(m, side)
            if isinstance(slot, Pending) and slot.placeholder.id in substitutions:
                changes[side] = Resolved(
                    substitutions[slot.placeholder.id], source=slot.placeholder.source
                )
        if changes:
            replaced += len(changes)
            m = replace(m, **changes)
        updated.append(m)

    return updated, replaced


def _division_tiebreaker(division):
    """Tiebreaker from the first enabled group phase of the division's format."""
    if division.format is None:
        return None
    for phase in division.format.enabled_phases:
        if phase.type == PhaseType.GROUP:
            return tiebreaker_from_rules(phase.settings.tiebreaker_rules)
    return None


def _match_outcome(match):
    """Return (winner_id, loser_id, error) for a finished match.

    A level score is decided by ``penalty_winner_id`` when it is set;
    otherwise the match has no winner and an error is returned.
    """
    home_id, away_id = match.home_team_id, match.away_team_id
    if home_id is None or away_id is None:
        return None, None, f"Match {match.id} is finished but its teams are not known"

    if match.home_score is None or match.away_score is None:
        return None, None, f"Match {match.id} is finished but has no score"

    if match.home_score > match.away_score:
        return home_id, away_id, None
    if match.home_score < match.away_score:
        return away_id, home_id, None

    if match.penalty_winner_id is None:
        return None, None, f"Match {match.id} ended in a draw; winner and loser cannot be determined"
    if match.penalty_winner_id == home_id:
        return home_id, away_id, None
    if match.penalty_winner_id == away_id:
        return away_id, home_id, None
    return None, None, (
        f"Penalty winner {match.penalty_winner_id} did not play in match {match.id}"
    )


def _resolve_group_position(placeholder, division, tables, progress):
    """Return (team_id, error) for a group-position placeholder."""
    source = placeholder.source
    group = division.get_group(source.group_id)
    if group is None:
        return None, f"Group {source.group_id} not found in division {division.id}"

    status = progress[group.id]
    if not status["complete"]:
        return None, (
            f"{group.name} is not decided yet "
            f"({status['remaining']} of {status['total']} matches remaining)"
        )

    table = tables[group.id]
    if not 1 <= source.position <= len(table):
        return None, f"{group.name} has no position {source.position}"

    return table[source.position - 1].team_id, None


def _resolve_match_outcome(placeholder, matches_by_id):
    """Return (team_id, error) for a match-winner / match-loser placeholder.

    (None, None) means the source match is not finished yet, which is not an
    error.
    """
    source = placeholder.source
    match = matches_by_id.get(source.match_id)
    if match is None:
        return None, f"Source match {source.match_id} not found"

    if match.status == MatchStatus.CANCELLED:
        return None, f"Source match {match.id} was cancelled"
    if match.status != MatchStatus.FINISHED:
        return None, None

    winner_id, loser_id, error = _match_outcome(match)
    if error:
        return None, error
    if isinstance(source, MatchWinnerSource):
        return winner_id, None
    return loser_id, None


def resolve_placeholders(division, placeholders, matches, tiebreaker=None):
    """Resolve placeholders into concrete teams.

    Order:
      1. Standings for every group of the division, from FINISHED matches
      2. Group-position placeholders: team at that rank of a decided group
      3. Match-winner / match-loser placeholders, against the matches as
         updated by step 2: skipped while the source match is unfinished

    ``tiebreaker`` defaults to the one named by the division's group phase
    rules. Placeholders no match slot refers to any more are already resolved
    and are ignored, so running the pass again on its own output changes
    nothing. Unresolvable placeholders are reported in ``errors``. Invalid
    input, such as a team listed twice in a group or a tiebreaker returning
    the wrong ids, still raises ``EngineValidationError``.
    """
    matches = list(matches)
    if placeholders is None:
        placeholders = collect_placeholders(matches)
    if tiebreaker is None:
        tiebreaker = _division_tiebreaker(division)

    pending = _pending_ids(matches)
    active = []
    seen = set()
    for p in placeholders:
        if p.id in pending and p.id not in seen:
            seen.add(p.id)
            active.append(p)

    tables = {}
    progress = {}
    for group in division.groups:
        tables[group.id] = compute_group_standings(group, matches, tiebreaker=tiebreaker)
        progress[group.id] = group_progress(group, matches)

    errors = []
    substitutions = {}

    # Group positions first: their teams can feed the match-outcome sources
    for p in active:
        if not isinstance(p.source, GroupPositionSource):
            continue
        team_id, error = _resolve_group_position(p, division, tables, progress)
        if error:
            errors.append(ResolutionError(p.id, error))
        else:
            substitutions[p.id] = team_id

    matches, replaced = _substitute(matches, substitutions)

    outcome_substitutions = {}
    matches_by_id = {m.id: m for m in matches}
    for p in active:
        if not isinstance(p.source, (MatchWinnerSource, MatchLoserSource)):
            continue
        team_id, error = _resolve_match_outcome(p, matches_by_id)
        if error:
            errors.append(ResolutionError(p.id, error))
        elif team_id is not None:
            outcome_substitutions[p.id] = team_id

    matches, outcome_replaced = _substitute(matches, outcome_substitutions)
    substitutions.update(outcome_substitutions)

    unresolved = [p for p in active if p.id not in substitutions]

    logger.info(
        "Resolved %d of %d placeholders in division %s (%d slots updated)",
        len(substitutions),
        len(active),
        division.id,
        replaced + outcome_replaced,
    )
    for err in errors:
        logger.warning("Placeholder %s unresolved: %s", err.placeholder_id, err.error)

    return ResolutionResult(
        resolved_count=len(substitutions),
        errors=tuple(errors),
        matches=tuple(matches),
        placeholders=tuple(unresolved),
        substitutions=substitutions,
    )
