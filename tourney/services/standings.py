import logging
from itertools import groupby

from tourney.errors import EngineValidationError
from tourney.models.match import MatchStatus
from tourney.models.standing import Standing

logger = logging.getLogger(__name__)

WIN_POINTS = 3
DRAW_POINTS = 1


def _ranking_key(stats):
    return (stats["points"], stats["goal_difference"], stats["goals_for"])


def counted_matches(matches, team_ids=None):
    """Return the matches that feed a standings table.

    Only FINISHED matches with both scores and two concrete teams count.
    When ``team_ids`` is given, matches involving any other team are dropped.
    """
    result = []
    for match in matches:
        if match.status != MatchStatus.FINISHED:
            continue
        if match.home_score is None or match.away_score is None:
            continue
        home_id, away_id = match.home_team_id, match.away_team_id
        if home_id is None or away_id is None:
            continue
        if team_ids is not None and (home_id not in team_ids or away_id not in team_ids):
            continue
        result.append(match)
    return result


def head_to_head(tied_team_ids, matches):
    """Order tied teams by a mini-table of the matches played between them.

    Order:
      1. Head-to-head points DESC
      2. Head-to-head goal difference DESC

    Teams still level keep the order they came in.
    """
    tied = set(tied_team_ids)
    h2h = {tid: {"pts": 0, "gd": 0} for tid in tied}

    for m in matches:
        if m.home_team_id in tied and m.away_team_id in tied:
            if m.home_score > m.away_score:
                h2h[m.home_team_id]["pts"] += WIN_POINTS
            elif m.home_score < m.away_score:
                h2h[m.away_team_id]["pts"] += WIN_POINTS
            else:
                h2h[m.home_team_id]["pts"] += DRAW_POINTS
                h2h[m.away_team_id]["pts"] += DRAW_POINTS
            h2h[m.home_team_id]["gd"] += m.home_score - m.away_score
            h2h[m.away_team_id]["gd"] += m.away_score - m.home_score

    return sorted(
        tied_team_ids,
        key=lambda tid: (h2h[tid]["pts"], h2h[tid]["gd"]),
        reverse=True,
    )


TIEBREAKERS = {
    "head-to-head": head_to_head,
}


def get_tiebreaker(name):
    """Look up a named tiebreaker. ``None`` means input order decides."""
    if name is None:
        return None
    try:
        return TIEBREAKERS[name]
    except KeyError:
        raise EngineValidationError(
            f"Unknown tiebreaker {name!r}", location="tiebreaker"
        ) from None


def tiebreaker_from_rules(rules):
    """Map a group phase's tiebreaker rule list to a tiebreaker callable."""
    if rules and "head-to-head" in rules:
        return head_to_head
    return None


def compute_standings(teams, matches, tiebreaker=None):
    """Build the standings table for ``teams`` from ``matches``.

    Win = 3 points, draw = 1, loss = 0. Only FINISHED matches between two of
    the given teams count. Teams are ordered by:
      1. Points DESC
      2. Goal difference DESC
      3. Goals for DESC
      4. ``tiebreaker(tied_team_ids, matches)`` if one is supplied
      5. The order of ``teams`` as passed in

    Ranks are 1-based and unique. Teams without a finished match still get a
    row of zeros.
    """
    teams = list(teams)
    stats = {}
    for team in teams:
        if team.id in stats:
            raise EngineValidationError(
                f"Team {team.id} appears more than once", location=f"team:{team.id}"
            )
        stats[team.id] = {
            "played": 0,
            "won": 0,
            "drawn": 0,
            "lost": 0,
            "goals_for": 0,
            "goals_against": 0,
        }

    finished = counted_matches(matches, team_ids=stats.keys())

    for match in finished:
        # Home team stats
        home = stats[match.home_team_id]
        home["played"] += 1
        home["goals_for"] += match.home_score
        home["goals_against"] += match.away_score

        # Away team stats
        away = stats[match.away_team_id]
        away["played"] += 1
        away["goals_for"] += match.away_score
        away["goals_against"] += match.home_score

        if match.home_score > match.away_score:
            home["won"] += 1
            away["lost"] += 1
        elif match.home_score < match.away_score:
            away["won"] += 1
            home["lost"] += 1
        else:
            home["drawn"] += 1
            away["drawn"] += 1

    for s in stats.values():
        s["goal_difference"] = s["goals_for"] - s["goals_against"]
        s["points"] = (s["won"] * WIN_POINTS) + (s["drawn"] * DRAW_POINTS)

    # sorted() is stable with reverse=True, so input order survives full ties
    by_key = sorted(teams, key=lambda t: _ranking_key(stats[t.id]), reverse=True)

    ordered = []
    for _key, group in groupby(by_key, key=lambda t: _ranking_key(stats[t.id])):
        tied = list(group)
        if len(tied) == 1 or tiebreaker is None:
            ordered.extend(tied)
            continue

        by_id = {t.id: t for t in tied}
        ranked_ids = list(tiebreaker([t.id for t in tied], finished))
        if len(ranked_ids) != len(by_id) or set(ranked_ids) != set(by_id):
            raise EngineValidationError(
                "Tiebreaker must return exactly the tied team ids",
                location="tiebreaker",
            )
        ordered.extend(by_id[tid] for tid in ranked_ids)

    logger.debug(
        "Computed standings for %d teams from %d finished matches",
        len(teams),
        len(finished),
    )

    return [
        Standing(team=team, rank=rank, **stats[team.id])
        for rank, team in enumerate(ordered, 1)
    ]


def group_matches(group, matches):
    return [m for m in matches if m.group_id == group.id]


def group_progress(group, matches):
    """Return completion status of a group's matches.

    Returns dict with:
        total:     non-cancelled matches in the group
        finished:  how many are finished with a full score
        remaining: how many are not finished yet
        complete:  True when the group's final table is settled

    A FINISHED match missing a score does not feed the table, so it counts as
    remaining.
    """
    relevant = [m for m in group_matches(group, matches) if m.status != MatchStatus.CANCELLED]
    finished = len(counted_matches(relevant))
    total = len(relevant)

    if total == 0:
        # No fixtures: only a single-team group has a settled table
        complete = len(group.teams) == 1
    else:
        complete = finished == total

    return {
        "group_id": group.id,
        "total": total,
        "finished": finished,
        "remaining": total - finished,
        "complete": complete,
    }


def compute_group_standings(group, matches, tiebreaker=None):
    """Standings of one group, using only matches tagged with its id."""
    return compute_standings(group.teams, group_matches(group, matches), tiebreaker=tiebreaker)
