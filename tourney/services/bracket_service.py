import logging
import random
from dataclasses import dataclass
from typing import Optional

from tourney.errors import EngineValidationError
from tourney.models.match import Match, MatchStatus, Pending
from tourney.models.phase import PlayoffSettings, SeedingMethod
from tourney.models.placeholder import (
    GroupPositionSource,
    MatchLoserSource,
    MatchWinnerSource,
    Placeholder,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AdvancementTarget:
    winner_target: Optional[str] = None
    loser_target: Optional[str] = None


@dataclass(frozen=True)
class KnockoutBracket:
    matches: tuple = ()
    total_rounds: int = 0
    byes: tuple = ()


# ── Advancement Map ──────────────────────────────────────────────────────────

def map_advancement(matches):
    """Work out where each match's winner and loser go next.

    A match in round R feeds the round R+1 match (the next round number
    present) whose home or away slot has a match-winner / match-loser source
    pointing at it. Slots that were already resolved keep their source, so
    the map is the same before and after resolution. Matches in the last
    round, and matches without a round, have no targets.

    Returns {match_id: AdvancementTarget}.
    """
    by_round = {}
    for m in matches:
        if m.round is not None:
            by_round.setdefault(m.round, []).append(m)

    rounds = sorted(by_round)
    next_round = dict(zip(rounds, rounds[1:]))

    # (round, source class, source match id) -> first feeding match id
    feeds = {}
    for round_number, round_matches in by_round.items():
        for m in round_matches:
            for slot in (m.home, m.away):
                source = slot.source if slot is not None else None
                if isinstance(source, (MatchWinnerSource, MatchLoserSource)):
                    feeds.setdefault((round_number, type(source), source.match_id), m.id)

    targets = {}
    for m in matches:
        following = next_round.get(m.round)
        if following is None:
            targets[m.id] = AdvancementTarget()
            continue
        targets[m.id] = AdvancementTarget(
            winner_target=feeds.get((following, MatchWinnerSource, m.id)),
            loser_target=feeds.get((following, MatchLoserSource, m.id)),
        )

    return targets


# ── Knockout Bracket ─────────────────────────────────────────────────────────

def _next_power_of_2(n):
    """Return the smallest power of 2 >= n."""
    return 1 << (n - 1).bit_length()


def _seed_order(bracket_size):
    """Seeds in bracket line order so that 1 meets N, 2 meets N-1, ...

    Size 8 gives [1, 8, 4, 5, 2, 7, 3, 6]: the top two seeds can only meet in
    the final.
    """
    order = [1]
    while len(order) < bracket_size:
        total = len(order) * 2 + 1
        order = [s for seed in order for s in (seed, total - seed)]
    return order


def _round_label(rounds_to_final):
    """0 → Final, 1 → Semi-finals, 2 → Quarter-finals, 3 → Round of 16, ..."""
    labels = {
        0: "Final",
        1: "Semi-finals",
        2: "Quarter-finals",
    }
    return labels.get(rounds_to_final, f"Round of {2 ** (rounds_to_final + 1)}")


def _slot_key(participant):
    if isinstance(participant, Pending):
        return participant.placeholder.id
    return participant.team_id


def _check_unique_entrants(entrants, bracket_id):
    keys = [_slot_key(e) for e in entrants]
    duplicated = sorted({k for k in keys if keys.count(k) > 1})
    if duplicated:
        raise EngineValidationError(
            f"Entrants appear more than once: {', '.join(duplicated)}",
            location=f"bracket:{bracket_id}",
        )


def _outcome_slot(match_id, match_number, source_cls):
    kind = "winner" if source_cls is MatchWinnerSource else "loser"
    return Pending(
        Placeholder(
            id=f"{match_id}-{kind}",
            name=f"{kind.capitalize()} of Match {match_number}",
            source=source_cls(match_id),
        )
    )


def generate_knockout_bracket(
    entrants,
    bracket_id,
    include_third_place=False,
    seeding_method=SeedingMethod.MANUAL,
    rng=None,
):
    """Build a single-elimination bracket from seed-ordered participants.

    The bracket is padded to the next power of two and seeded 1 v N,
    2 v N-1, ... so byes fall to the top seeds, who go straight into round 2.
    Every later slot is a Pending placeholder for the winner of the match
    feeding it. With ``include_third_place`` and two played semi-finals, a
    third-place match between the semi-final losers is added to the final
    round.

    Fewer than 2 entrants yields an empty bracket.
    """
    entrants = list(entrants)
    seeding_method = SeedingMethod(seeding_method)

    _check_unique_entrants(entrants, bracket_id)

    if seeding_method == SeedingMethod.RANDOM:
        (rng or random).shuffle(entrants)

    if len(entrants) < 2:
        return KnockoutBracket()

    bracket_size = _next_power_of_2(len(entrants))
    total_rounds = bracket_size.bit_length() - 1
    slots = [
        entrants[seed - 1] if seed <= len(entrants) else None
        for seed in _seed_order(bracket_size)
    ]

    matches = []
    byes = []
    semi_finals = []

    for round_number in range(1, total_rounds + 1):
        label = _round_label(total_rounds - round_number)
        next_slots = []

        for i in range(0, len(slots), 2):
            home, away = slots[i], slots[i + 1]
            if home is None or away is None:
                # Bye: the seeded entrant advances without playing
                advancing = home if away is None else away
                byes.append(advancing)
                next_slots.append(advancing)
                continue

            number = len(matches) + 1
            match_id = f"{bracket_id}-m{number}"
            match = Match(
                id=match_id,
                home=home,
                away=away,
                status=MatchStatus.SCHEDULED,
                group_id=bracket_id,
                round=round_number,
                round_label=label,
                match_label=f"Match {number}",
            )
            matches.append(match)
            next_slots.append(_outcome_slot(match_id, number, MatchWinnerSource))

            if round_number == total_rounds - 1:
                semi_finals.append((match_id, number))

        slots = next_slots

    if include_third_place and len(semi_finals) == 2:
        number = len(matches) + 1
        (home_sf_id, home_sf_number), (away_sf_id, away_sf_number) = semi_finals
        matches.insert(
            len(matches) - 1,
            Match(
                id=f"{bracket_id}-m{number}",
                home=_outcome_slot(home_sf_id, home_sf_number, MatchLoserSource),
                away=_outcome_slot(away_sf_id, away_sf_number, MatchLoserSource),
                status=MatchStatus.SCHEDULED,
                group_id=bracket_id,
                round=total_rounds,
                round_label="Third place",
                match_label=f"Match {number}",
            ),
        )

    logger.debug(
        "Generated knockout bracket %s: %d entrants, %d matches, %d byes",
        bracket_id,
        len(entrants),
        len(matches),
        len(byes),
    )

    return KnockoutBracket(matches=tuple(matches), total_rounds=total_rounds, byes=tuple(byes))


# ── Playoff Bracket ──────────────────────────────────────────────────────────

def generate_playoff_bracket(entrants, bracket_id, settings=None):
    """Build a fixed playoff from seed-ordered participants.

    Two entrants play a single final. Otherwise there must be exactly
    ``settings.bracket_size`` entrants:
      Round 1: semi-finals 1 v 4 and 2 v 3
               (bracket of 8 with fifth place: also 5 v 8 and 6 v 7)
      Round 2: fifth place (5 v 6, or the two lower semi-final winners),
               third place between the semi-final losers, then the final

    Fifth and third place are played only when the settings ask for them.
    Without a fifth-place match, seeds below four are placed by the stage
    that seeded them.
    """
    if settings is None:
        settings = PlayoffSettings()
    entrants = list(entrants)
    _check_unique_entrants(entrants, bracket_id)

    if len(entrants) < 2:
        return KnockoutBracket()

    matches = []

    def add(home, away, round_number, round_label):
        number = len(matches) + 1
        match = Match(
            id=f"{bracket_id}-m{number}",
            home=home,
            away=away,
            status=MatchStatus.SCHEDULED,
            group_id=bracket_id,
            round=round_number,
            round_label=round_label,
            match_label=f"Match {number}",
        )
        matches.append(match)
        return match.id, number

    def winner(ref):
        return _outcome_slot(ref[0], ref[1], MatchWinnerSource)

    def loser(ref):
        return _outcome_slot(ref[0], ref[1], MatchLoserSource)

    if len(entrants) == 2:
        add(entrants[0], entrants[1], 1, "Final")
        return KnockoutBracket(matches=tuple(matches), total_rounds=1)

    size = settings.bracket_size
    if len(entrants) != size:
        raise EngineValidationError(
            f"A playoff bracket of {size} needs {size} entrants, got {len(entrants)}",
            location=f"bracket:{bracket_id}",
        )
    if settings.include_fifth_place and size < 6:
        raise EngineValidationError(
            "A fifth-place match needs a playoff bracket of 6 or 8",
            location=f"bracket:{bracket_id}",
        )

    seeds = dict(enumerate(entrants, 1))
    semi_1 = add(seeds[1], seeds[4], 1, "Semi-finals")
    semi_2 = add(seeds[2], seeds[3], 1, "Semi-finals")

    if settings.include_fifth_place and size == 8:
        lower_1 = add(seeds[5], seeds[8], 1, "Fifth place semi-finals")
        lower_2 = add(seeds[6], seeds[7], 1, "Fifth place semi-finals")
        add(winner(lower_1), winner(lower_2), 2, "Fifth place")
    elif settings.include_fifth_place:
        add(seeds[5], seeds[6], 2, "Fifth place")

    if settings.include_third_place:
        add(loser(semi_1), loser(semi_2), 2, "Third place")

    add(winner(semi_1), winner(semi_2), 2, "Final")

    logger.debug(
        "Generated playoff bracket %s: %d entrants, %d matches",
        bracket_id,
        len(entrants),
        len(matches),
    )

    return KnockoutBracket(matches=tuple(matches), total_rounds=2)


# ── Group Positions ──────────────────────────────────────────────────────────

def _position_name(group, position):
    if position == 1:
        return f"Winner {group.name}"
    if position == 2:
        return f"Runner-up {group.name}"
    return f"{group.name} #{position}"


def group_position_slot(group, position):
    """Pending slot for the team finishing at ``position`` in ``group``."""
    return Pending(
        Placeholder(
            id=f"{group.id}-pos{position}",
            name=_position_name(group, position),
            source=GroupPositionSource(group.id, position),
        )
    )


def group_position_entrants(groups, teams_advance):
    """Placeholders for the teams advancing from each group, in seed order.

    All group winners come first (in group order), then all runners-up, and so
    on. Fed into ``generate_knockout_bracket`` this pairs A1 with the last
    group's runner-up, so teams from one group meet as late as possible.
    """
    if teams_advance < 0:
        raise EngineValidationError("teams_advance cannot be negative", location="teams_advance")

    return [
        group_position_slot(group, position)
        for position in range(1, teams_advance + 1)
        for group in groups
    ]
