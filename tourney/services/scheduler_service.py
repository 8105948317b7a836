import enum
import logging
import math
import random
from dataclasses import dataclass
from typing import Optional

from tourney.errors import EngineValidationError
from tourney.models.group import Group
from tourney.models.match import Match, MatchStatus, Resolved

logger = logging.getLogger(__name__)


# ── Round-Robin ──────────────────────────────────────────────────────────────

def round_robin_match_count(team_count):
    """n(n-1)/2 matches for a single round-robin."""
    if team_count < 2:
        return 0
    return team_count * (team_count - 1) // 2


def round_robin_round_count(team_count):
    """n-1 rounds for an even team count, n for an odd one (one bye per round)."""
    if team_count < 2:
        return 0
    return team_count - 1 if team_count % 2 == 0 else team_count


def _circle_rounds(team_count):
    """Assign every index pair (i, j), i < j, a round number with the circle method.

    Index 0 stays fixed while the others rotate one step per round. For an odd
    count a bye slot (None) is added and pairings against it are dropped.
    """
    slots = list(range(team_count))
    if team_count % 2 != 0:
        slots.append(None)

    n = len(slots)
    half = n // 2
    fixed = slots[0]
    rotating = slots[1:]
    rounds = {}

    for r in range(1, n):
        round_pairs = [(fixed, rotating[0])]
        for i in range(1, half):
            round_pairs.append((rotating[i], rotating[n - 1 - i]))

        for a, b in round_pairs:
            if a is None or b is None:
                continue
            rounds[(min(a, b), max(a, b))] = r

        rotating = [rotating[-1]] + rotating[:-1]

    return rounds


def generate_round_robin(teams, group_id):
    """Generate a single round-robin for one group.

    One match per unordered pair of teams, n(n-1)/2 in total. Pairs are
    enumerated i < j over the input order (so A, B, C, D gives AB, AC, AD,
    BC, BD, CD) with the earlier team at home. Every match is SCHEDULED with
    no start time; the round number comes from the circle method so that no
    team plays twice in one round.

    Fewer than 2 teams yields an empty list.
    """
    teams = list(teams)
    if len(teams) < 2:
        return []

    seen = set()
    for team in teams:
        if team.id in seen:
            raise EngineValidationError(
                f"Team {team.id} appears more than once in group {group_id}",
                location=f"group:{group_id}",
            )
        seen.add(team.id)

    rounds = _circle_rounds(len(teams))
    matches = []

    for i in range(len(teams)):
        for j in range(i + 1, len(teams)):
            round_number = rounds[(i, j)]
            matches.append(
                Match(
                    id=f"{group_id}-m{len(matches) + 1}",
                    home=Resolved(teams[i].id),
                    away=Resolved(teams[j].id),
                    status=MatchStatus.SCHEDULED,
                    group_id=group_id,
                    round=round_number,
                    round_label=f"Round {round_number}",
                )
            )

    logger.debug(
        "Generated %d round-robin matches over %d rounds for group %s",
        len(matches),
        round_robin_round_count(len(teams)),
        group_id,
    )
    return matches


# ── Bulk generation ──────────────────────────────────────────────────────────

class FixtureStatus(enum.Enum):
    GENERATED = "generated"
    SKIPPED_INSUFFICIENT_TEAMS = "skipped_insufficient_teams"
    SKIPPED_ALREADY_EXISTS = "skipped_already_exists"
    FAILED = "failed"


@dataclass(frozen=True)
class GroupFixtureOutcome:
    group_id: str
    status: FixtureStatus
    matches: tuple = ()
    warning: Optional[str] = None
    error: Optional[str] = None


def generate_group_fixtures(groups, existing_matches=(), max_teams=None):
    """Generate round-robin fixtures for many groups at once.

    Each group is reported on its own; a group that is skipped or fails never
    stops its siblings. Groups that already have matches in
    ``existing_matches`` are left alone. Groups larger than ``max_teams`` are
    still generated but carry a warning.
    """
    existing_groups = {m.group_id for m in existing_matches if m.group_id is not None}
    outcomes = []

    for group in groups:
        if group.id in existing_groups:
            outcomes.append(
                GroupFixtureOutcome(group.id, FixtureStatus.SKIPPED_ALREADY_EXISTS)
            )
            continue

        if len(group.teams) < 2:
            outcomes.append(
                GroupFixtureOutcome(group.id, FixtureStatus.SKIPPED_INSUFFICIENT_TEAMS)
            )
            continue

        try:
            matches = generate_round_robin(group.teams, group.id)
        except EngineValidationError as err:
            logger.warning("Fixture generation failed for group %s: %s", group.id, err)
            outcomes.append(
                GroupFixtureOutcome(group.id, FixtureStatus.FAILED, error=err.message)
            )
            continue

        warning = None
        if max_teams is not None and len(group.teams) > max_teams:
            warning = (
                f"{group.name} has {len(group.teams)} teams; "
                f"round-robin is recommended for at most {max_teams}"
            )

        outcomes.append(
            GroupFixtureOutcome(
                group.id, FixtureStatus.GENERATED, matches=tuple(matches), warning=warning
            )
        )

    generated = sum(1 for o in outcomes if o.status == FixtureStatus.GENERATED)
    logger.info("Generated fixtures for %d of %d groups", generated, len(outcomes))
    return outcomes


# ── Group Draw ───────────────────────────────────────────────────────────────

class AssignmentStrategy(enum.Enum):
    BALANCED = "balanced"
    SEEDED = "seeded"
    RANDOM = "random"


def generate_group_names(count):
    """A, B, ..., Z, AA, AB, ..."""
    names = []
    for i in range(count):
        name = ""
        n = i + 1
        while n:
            n, rem = divmod(n - 1, 26)
            name = chr(65 + rem) + name
        names.append(name)
    return names


def suggest_group_count(team_count, max_teams_per_group):
    if max_teams_per_group < 1:
        raise EngineValidationError(
            "max_teams_per_group must be at least 1", location="max_teams_per_group"
        )
    return math.ceil(team_count / max_teams_per_group)


def assign_teams_to_groups(
    teams,
    group_count,
    strategy=AssignmentStrategy.BALANCED,
    max_teams_per_group=None,
    rng=None,
    id_prefix="group-",
):
    """Split teams into ``group_count`` groups named A, B, C, ...

    Strategies:
      balanced: contiguous blocks in input order, sizes differ by at most one
      seeded:   snake draft in input order (1st to A, 2nd to B, ..., then back)
      random:   shuffled with ``rng``, then dealt one per group in turn
    """
    teams = list(teams)
    strategy = AssignmentStrategy(strategy)

    if group_count < 1:
        raise EngineValidationError("group_count must be at least 1", location="group_count")

    if max_teams_per_group is not None and len(teams) > group_count * max_teams_per_group:
        raise EngineValidationError(
            f"{len(teams)} teams do not fit into {group_count} groups "
            f"of at most {max_teams_per_group}",
            location="max_teams_per_group",
        )

    buckets = [[] for _ in range(group_count)]

    if strategy == AssignmentStrategy.BALANCED:
        base, remainder = divmod(len(teams), group_count)
        index = 0
        for group_index in range(group_count):
            size = base + (1 if group_index < remainder else 0)
            buckets[group_index].extend(teams[index:index + size])
            index += size

    elif strategy == AssignmentStrategy.SEEDED:
        for i, team in enumerate(teams):
            group_index = i % group_count
            if (i // group_count) % 2 == 1:
                group_index = group_count - 1 - group_index
            buckets[group_index].append(team)

    else:
        shuffled = list(teams)
        (rng or random).shuffle(shuffled)
        for i, team in enumerate(shuffled):
            buckets[i % group_count].append(team)

    return [
        Group(id=f"{id_prefix}{letter}", name=f"Group {letter}", teams=tuple(bucket))
        for letter, bucket in zip(generate_group_names(group_count), buckets)
    ]
