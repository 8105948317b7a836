"""Tests for knockout and playoff bracket generation and the advancement map."""
import random
from dataclasses import replace

import pytest

from tourney.errors import EngineValidationError
from tourney.models import (
    Group,
    Match,
    MatchLoserSource,
    MatchWinnerSource,
    Pending,
    Placeholder,
    PlayoffSettings,
    Resolved,
)
from tourney.models.placeholder import GroupPositionSource
from tourney.services.bracket_service import (
    AdvancementTarget,
    generate_knockout_bracket,
    generate_playoff_bracket,
    group_position_entrants,
    map_advancement,
)


def _entrants(*team_ids):
    return [Resolved(tid) for tid in team_ids]


def _by_id(matches):
    return {m.id: m for m in matches}


def _winner_of(match_id):
    return Placeholder(f"{match_id}-winner", f"Winner of {match_id}", MatchWinnerSource(match_id))


class TestKnockoutBracket:
    def test_four_teams(self):
        bracket = generate_knockout_bracket(_entrants("A", "B", "C", "D"), "ko")
        matches = _by_id(bracket.matches)

        assert bracket.total_rounds == 2
        assert bracket.byes == ()
        assert [m.id for m in bracket.matches] == ["ko-m1", "ko-m2", "ko-m3"]

        assert (matches["ko-m1"].home_team_id, matches["ko-m1"].away_team_id) == ("A", "D")
        assert (matches["ko-m2"].home_team_id, matches["ko-m2"].away_team_id) == ("B", "C")
        assert matches["ko-m1"].round_label == "Semi-finals"

        final = matches["ko-m3"]
        assert final.round == 2
        assert final.round_label == "Final"
        assert final.home.placeholder.source == MatchWinnerSource("ko-m1")
        assert final.away.placeholder.source == MatchWinnerSource("ko-m2")
        assert final.home.placeholder.name == "Winner of Match 1"

    def test_eight_teams_seeding(self):
        bracket = generate_knockout_bracket(_entrants(*[f"T{i}" for i in range(1, 9)]), "ko")
        first_round = [m for m in bracket.matches if m.round == 1]

        assert len(bracket.matches) == 7
        assert [(m.home_team_id, m.away_team_id) for m in first_round] == [
            ("T1", "T8"),
            ("T4", "T5"),
            ("T2", "T7"),
            ("T3", "T6"),
        ]
        assert {m.round_label for m in first_round} == {"Quarter-finals"}

    def test_byes_go_to_top_seeds(self):
        bracket = generate_knockout_bracket(_entrants("T1", "T2", "T3", "T4", "T5"), "ko")

        assert bracket.byes == tuple(_entrants("T1", "T2", "T3"))
        assert len(bracket.matches) == 4

        first_round = [m for m in bracket.matches if m.round == 1]
        assert [(m.home_team_id, m.away_team_id) for m in first_round] == [("T4", "T5")]

        semis = [m for m in bracket.matches if m.round == 2]
        assert semis[0].home_team_id == "T1"
        assert semis[0].away.placeholder.source == MatchWinnerSource("ko-m1")
        assert (semis[1].home_team_id, semis[1].away_team_id) == ("T2", "T3")

    def test_third_place_match(self):
        bracket = generate_knockout_bracket(
            _entrants("A", "B", "C", "D"), "ko", include_third_place=True
        )
        assert [m.id for m in bracket.matches] == ["ko-m1", "ko-m2", "ko-m4", "ko-m3"]

        third = _by_id(bracket.matches)["ko-m4"]
        assert third.round == 2
        assert third.round_label == "Third place"
        assert third.home.placeholder.source == MatchLoserSource("ko-m1")
        assert third.away.placeholder.source == MatchLoserSource("ko-m2")
        assert third.home.placeholder.name == "Loser of Match 1"

    def test_no_third_place_without_two_semi_finals(self):
        bracket = generate_knockout_bracket(_entrants("A", "B", "C"), "ko", include_third_place=True)
        assert all(m.round_label != "Third place" for m in bracket.matches)

    def test_two_teams(self):
        bracket = generate_knockout_bracket(_entrants("A", "B"), "ko")
        assert bracket.total_rounds == 1
        assert len(bracket.matches) == 1
        assert bracket.matches[0].round_label == "Final"

    def test_too_few_entrants(self):
        assert generate_knockout_bracket(_entrants("A"), "ko").matches == ()
        assert generate_knockout_bracket([], "ko").total_rounds == 0

    def test_duplicate_entrants(self):
        with pytest.raises(EngineValidationError) as exc:
            generate_knockout_bracket(_entrants("A", "B", "A"), "ko")
        assert exc.value.location == "bracket:ko"

    def test_random_seeding_uses_rng(self):
        entrants = _entrants(*[f"T{i}" for i in range(1, 9)])
        first = generate_knockout_bracket(entrants, "ko", seeding_method="random", rng=random.Random(3))
        second = generate_knockout_bracket(entrants, "ko", seeding_method="random", rng=random.Random(3))
        assert first == second
        assert entrants == _entrants(*[f"T{i}" for i in range(1, 9)])


class TestPlayoffBracket:
    def test_four_teams_with_third_place(self):
        bracket = generate_playoff_bracket(_entrants("A", "B", "C", "D"), "po")
        matches = _by_id(bracket.matches)

        assert bracket.total_rounds == 2
        assert [m.id for m in bracket.matches] == ["po-m1", "po-m2", "po-m3", "po-m4"]
        assert (matches["po-m1"].home_team_id, matches["po-m1"].away_team_id) == ("A", "D")
        assert (matches["po-m2"].home_team_id, matches["po-m2"].away_team_id) == ("B", "C")

        third = matches["po-m3"]
        assert third.round_label == "Third place"
        assert third.home.placeholder.source == MatchLoserSource("po-m1")
        assert third.away.placeholder.source == MatchLoserSource("po-m2")

        final = matches["po-m4"]
        assert final.round == 2
        assert final.round_label == "Final"
        assert final.home.placeholder.source == MatchWinnerSource("po-m1")
        assert final.away.placeholder.name == "Winner of Match 2"

    def test_without_third_place(self):
        settings = PlayoffSettings(include_third_place=False)
        bracket = generate_playoff_bracket(_entrants("A", "B", "C", "D"), "po", settings)
        assert [m.round_label for m in bracket.matches] == ["Semi-finals", "Semi-finals", "Final"]

    def test_six_team_fifth_place(self):
        settings = PlayoffSettings(include_fifth_place=True, bracket_size=6)
        bracket = generate_playoff_bracket(_entrants(*"ABCDEF"), "po", settings)
        fifth = next(m for m in bracket.matches if m.round_label == "Fifth place")

        assert len(bracket.matches) == 5
        assert (fifth.home_team_id, fifth.away_team_id) == ("E", "F")
        assert fifth.round == 2

    def test_eight_team_fifth_place(self):
        settings = PlayoffSettings(include_fifth_place=True, bracket_size=8)
        bracket = generate_playoff_bracket(_entrants(*[f"T{i}" for i in range(1, 9)]), "po", settings)
        matches = _by_id(bracket.matches)

        assert len(bracket.matches) == 7
        assert (matches["po-m3"].home_team_id, matches["po-m3"].away_team_id) == ("T5", "T8")
        assert (matches["po-m4"].home_team_id, matches["po-m4"].away_team_id) == ("T6", "T7")
        assert matches["po-m5"].round_label == "Fifth place"
        assert matches["po-m5"].home.placeholder.source == MatchWinnerSource("po-m3")

        targets = map_advancement(bracket.matches)
        assert targets["po-m1"] == AdvancementTarget(winner_target="po-m7", loser_target="po-m6")
        assert targets["po-m3"] == AdvancementTarget(winner_target="po-m5")
        assert targets["po-m7"] == AdvancementTarget()

    def test_two_teams_play_a_final(self):
        bracket = generate_playoff_bracket(_entrants("A", "B"), "po")
        assert bracket.total_rounds == 1
        assert [m.round_label for m in bracket.matches] == ["Final"]

    def test_entrants_must_fill_the_bracket(self):
        with pytest.raises(EngineValidationError) as exc:
            generate_playoff_bracket(_entrants("A", "B", "C"), "po")
        assert exc.value.location == "bracket:po"

        with pytest.raises(EngineValidationError):
            generate_playoff_bracket(_entrants(*"ABCDEF"), "po", PlayoffSettings(bracket_size=8))

    def test_fifth_place_needs_a_larger_bracket(self):
        with pytest.raises(EngineValidationError):
            generate_playoff_bracket(
                _entrants("A", "B", "C", "D"), "po", PlayoffSettings(include_fifth_place=True)
            )

    def test_too_few_and_duplicate_entrants(self):
        assert generate_playoff_bracket(_entrants("A"), "po").matches == ()
        with pytest.raises(EngineValidationError):
            generate_playoff_bracket(_entrants("A", "B", "A", "C"), "po")


class TestGroupPositionEntrants:
    def test_cross_group_order(self, teams):
        groups = [
            Group("gA", "Group A", tuple(teams[:2])),
            Group("gB", "Group B", tuple(teams[2:])),
        ]
        entrants = group_position_entrants(groups, 2)

        assert [e.placeholder.id for e in entrants] == ["gA-pos1", "gB-pos1", "gA-pos2", "gB-pos2"]
        assert entrants[0].placeholder.name == "Winner Group A"
        assert entrants[3].placeholder.name == "Runner-up Group B"
        assert entrants[2].placeholder.source == GroupPositionSource("gA", 2)

    def test_same_group_teams_split(self, teams):
        groups = [
            Group("gA", "Group A", tuple(teams[:2])),
            Group("gB", "Group B", tuple(teams[2:])),
        ]
        bracket = generate_knockout_bracket(group_position_entrants(groups, 2), "ko")
        semis = [(m.home.placeholder.id, m.away.placeholder.id) for m in bracket.matches[:2]]
        assert semis == [("gA-pos1", "gB-pos2"), ("gB-pos1", "gA-pos2")]

    def test_negative_teams_advance(self):
        with pytest.raises(EngineValidationError):
            group_position_entrants([], -1)


class TestMapAdvancement:
    def test_winners_feed_next_round(self):
        bracket = generate_knockout_bracket(_entrants("A", "B", "C", "D"), "ko")
        targets = map_advancement(bracket.matches)

        assert targets["ko-m1"] == AdvancementTarget(winner_target="ko-m3")
        assert targets["ko-m2"] == AdvancementTarget(winner_target="ko-m3")

    def test_final_has_no_targets(self):
        bracket = generate_knockout_bracket(
            _entrants(*[f"T{i}" for i in range(1, 9)]), "ko", include_third_place=True
        )
        targets = map_advancement(bracket.matches)
        last_round = [m for m in bracket.matches if m.round == bracket.total_rounds]

        assert len(last_round) == 2
        for m in last_round:
            assert targets[m.id] == AdvancementTarget()

    def test_loser_targets(self):
        bracket = generate_knockout_bracket(
            _entrants("A", "B", "C", "D"), "ko", include_third_place=True
        )
        targets = map_advancement(bracket.matches)
        assert targets["ko-m1"] == AdvancementTarget(winner_target="ko-m3", loser_target="ko-m4")
        assert targets["ko-m2"] == AdvancementTarget(winner_target="ko-m3", loser_target="ko-m4")

    def test_unchanged_after_resolution(self):
        bracket = generate_knockout_bracket(_entrants("A", "B", "C", "D"), "ko")
        final = bracket.matches[2]
        resolved_final = replace(
            final,
            home=Resolved("A", source=final.home.source),
            away=Resolved("B", source=final.away.source),
        )
        matches = list(bracket.matches[:2]) + [resolved_final]

        assert map_advancement(matches) == map_advancement(bracket.matches)

    def test_next_present_round_is_used(self):
        matches = [
            Match(id="a", home=Resolved("A"), away=Resolved("B"), round=1),
            Match(
                id="b",
                home=Pending(_winner_of("a")),
                away=Resolved("C"),
                round=3,
            ),
        ]
        targets = map_advancement(matches)
        assert targets["a"].winner_target == "b"
        assert targets["b"] == AdvancementTarget()

    def test_matches_without_round(self):
        matches = [Match(id="x", home=Resolved("A"), away=Resolved("B"))]
        assert map_advancement(matches) == {"x": AdvancementTarget()}

    def test_empty(self):
        assert map_advancement([]) == {}
