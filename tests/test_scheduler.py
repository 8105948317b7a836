"""Tests for round-robin generation, bulk fixtures and the group draw."""
import random
from collections import Counter

import pytest

from tourney.errors import EngineValidationError
from tourney.models import Group, Match, MatchStatus, Resolved, Team
from tourney.services.scheduler_service import (
    AssignmentStrategy,
    FixtureStatus,
    assign_teams_to_groups,
    generate_group_fixtures,
    generate_group_names,
    generate_round_robin,
    round_robin_match_count,
    round_robin_round_count,
    suggest_group_count,
)


def _teams(count, prefix="T"):
    return [Team(id=f"{prefix}{i}", name=f"Team {i}") for i in range(1, count + 1)]


class TestRoundRobin:
    def test_four_teams_pairs_in_order(self, teams):
        matches = generate_round_robin(teams, "g1")
        pairs = [(m.home_team_id, m.away_team_id) for m in matches]
        assert pairs == [("A", "B"), ("A", "C"), ("A", "D"), ("B", "C"), ("B", "D"), ("C", "D")]

    def test_match_fields(self, teams):
        matches = generate_round_robin(teams, "g1")
        assert [m.id for m in matches] == [f"g1-m{k}" for k in range(1, 7)]
        for m in matches:
            assert m.group_id == "g1"
            assert m.status == MatchStatus.SCHEDULED
            assert m.start_time is None
            assert m.home_score is None and m.away_score is None

    @pytest.mark.parametrize("count", range(0, 11))
    def test_match_count(self, count):
        matches = generate_round_robin(_teams(count), "g")
        expected = count * (count - 1) // 2 if count >= 2 else 0
        assert len(matches) == expected == round_robin_match_count(count)

    @pytest.mark.parametrize("count", [2, 3, 4, 5, 6, 7, 8])
    def test_every_pair_once(self, count):
        matches = generate_round_robin(_teams(count), "g")
        pairs = Counter(frozenset((m.home_team_id, m.away_team_id)) for m in matches)
        assert all(n == 1 for n in pairs.values())
        assert len(pairs) == round_robin_match_count(count)

    @pytest.mark.parametrize("count", [2, 3, 4, 5, 6, 7, 8])
    def test_nobody_plays_twice_in_a_round(self, count):
        matches = generate_round_robin(_teams(count), "g")
        per_round = {}
        for m in matches:
            per_round.setdefault(m.round, []).extend([m.home_team_id, m.away_team_id])

        assert len(per_round) == round_robin_round_count(count)
        for team_ids in per_round.values():
            assert len(team_ids) == len(set(team_ids))

    def test_round_labels(self, teams):
        for m in generate_round_robin(teams, "g1"):
            assert m.round_label == f"Round {m.round}"

    def test_deterministic(self, teams):
        assert generate_round_robin(teams, "g1") == generate_round_robin(teams, "g1")

    def test_fewer_than_two_teams(self, teams):
        assert generate_round_robin([], "g1") == []
        assert generate_round_robin(teams[:1], "g1") == []

    def test_duplicate_team_rejected(self, teams):
        with pytest.raises(EngineValidationError) as exc:
            generate_round_robin([teams[0], teams[1], teams[0]], "g1")
        assert exc.value.location == "group:g1"

    def test_round_counts(self):
        assert round_robin_round_count(1) == 0
        assert round_robin_round_count(4) == 3
        assert round_robin_round_count(5) == 5


class TestGroupFixtures:
    def test_outcome_per_group(self, teams):
        groups = [
            Group("g1", "Group A", tuple(teams)),
            Group("g2", "Group B", tuple(teams[:1])),
            Group("g3", "Group C", tuple(teams[:2])),
            Group("g4", "Group D", (teams[0], teams[0])),
        ]
        existing = [Match(id="old", home=Resolved("A"), away=Resolved("B"), group_id="g3")]

        outcomes = generate_group_fixtures(groups, existing)

        assert [(o.group_id, o.status) for o in outcomes] == [
            ("g1", FixtureStatus.GENERATED),
            ("g2", FixtureStatus.SKIPPED_INSUFFICIENT_TEAMS),
            ("g3", FixtureStatus.SKIPPED_ALREADY_EXISTS),
            ("g4", FixtureStatus.FAILED),
        ]
        assert len(outcomes[0].matches) == 6
        assert outcomes[1].matches == ()
        assert "more than once" in outcomes[3].error

    def test_large_group_gets_warning(self, teams):
        outcomes = generate_group_fixtures([Group("g1", "Group A", tuple(teams))], max_teams=3)
        assert outcomes[0].status == FixtureStatus.GENERATED
        assert "Group A has 4 teams" in outcomes[0].warning

    def test_no_warning_within_limit(self, teams):
        outcomes = generate_group_fixtures([Group("g1", "Group A", tuple(teams))], max_teams=16)
        assert outcomes[0].warning is None


class TestGroupDraw:
    def test_group_names(self):
        assert generate_group_names(3) == ["A", "B", "C"]
        names = generate_group_names(28)
        assert names[25:] == ["Z", "AA", "AB"]

    def test_suggest_group_count(self):
        assert suggest_group_count(10, 4) == 3
        assert suggest_group_count(8, 4) == 2
        with pytest.raises(EngineValidationError):
            suggest_group_count(8, 0)

    def test_balanced(self):
        groups = assign_teams_to_groups(_teams(10), 3)
        assert [g.name for g in groups] == ["Group A", "Group B", "Group C"]
        assert [g.id for g in groups] == ["group-A", "group-B", "group-C"]
        assert [g.team_ids for g in groups] == [
            ["T1", "T2", "T3", "T4"],
            ["T5", "T6", "T7"],
            ["T8", "T9", "T10"],
        ]

    def test_seeded_snake(self):
        groups = assign_teams_to_groups(_teams(8), 4, strategy=AssignmentStrategy.SEEDED)
        assert [g.team_ids for g in groups] == [
            ["T1", "T8"],
            ["T2", "T7"],
            ["T3", "T6"],
            ["T4", "T5"],
        ]

    def test_random_uses_rng(self):
        first = assign_teams_to_groups(_teams(12), 3, strategy="random", rng=random.Random(7))
        second = assign_teams_to_groups(_teams(12), 3, strategy="random", rng=random.Random(7))
        assert first == second
        assigned = sorted(tid for g in first for tid in g.team_ids)
        assert assigned == sorted(t.id for t in _teams(12))
        assert [len(g.teams) for g in first] == [4, 4, 4]

    def test_capacity_checked(self):
        with pytest.raises(EngineValidationError):
            assign_teams_to_groups(_teams(9), 2, max_teams_per_group=4)

    def test_group_count_must_be_positive(self):
        with pytest.raises(EngineValidationError):
            assign_teams_to_groups(_teams(4), 0)
