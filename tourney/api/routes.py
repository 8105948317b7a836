import random

from flask import Blueprint, abort, current_app, jsonify, request

from tourney.extensions import limiter
from tourney.schemas import (
    AdvancementRequestSchema,
    AdvancementTargetSchema,
    AssignGroupsRequestSchema,
    EstimateRequestSchema,
    FormatConfigurationSchema,
    FormatTemplateSchema,
    FormatValidationSchema,
    GenerateFixturesRequestSchema,
    GroupFixtureOutcomeSchema,
    GroupSchema,
    KnockoutBracketSchema,
    KnockoutRequestSchema,
    MatchSchema,
    PlacementConfigurationSchema,
    PlacementRequestSchema,
    PlacementResultSchema,
    PlayoffRequestSchema,
    ResolutionResultSchema,
    ResolveRequestSchema,
    RoundRobinRequestSchema,
    StandingSchema,
    StandingsRequestSchema,
    TemplateQuerySchema,
)
from tourney.services.bracket_service import (
    generate_knockout_bracket,
    generate_playoff_bracket,
    group_position_entrants,
    map_advancement,
)
from tourney.services.format_service import (
    FORMAT_TEMPLATES,
    estimate_match_count,
    get_suitable_templates,
    validate_format,
)
from tourney.services.placeholder_service import resolve_placeholders
from tourney.services.placement_service import (
    generate_placement_matches,
    validate_placement_configuration,
)
from tourney.services.scheduler_service import (
    assign_teams_to_groups,
    generate_group_fixtures,
    generate_round_robin,
    round_robin_round_count,
    suggest_group_count,
)
from tourney.services.standings import compute_standings, get_tiebreaker

api_bp = Blueprint("api", __name__)

# ── Schema instances ─────────────────────────────────────────────────────────
standings_request_schema = StandingsRequestSchema()
standings_schema = StandingSchema(many=True)

round_robin_request_schema = RoundRobinRequestSchema()
generate_fixtures_request_schema = GenerateFixturesRequestSchema()
fixture_outcomes_schema = GroupFixtureOutcomeSchema(many=True)
matches_schema = MatchSchema(many=True)

assign_groups_request_schema = AssignGroupsRequestSchema()
groups_schema = GroupSchema(many=True)

template_query_schema = TemplateQuerySchema()
templates_schema = FormatTemplateSchema(many=True)
format_config_schema = FormatConfigurationSchema()
format_validation_schema = FormatValidationSchema()
estimate_request_schema = EstimateRequestSchema()

knockout_request_schema = KnockoutRequestSchema()
knockout_bracket_schema = KnockoutBracketSchema()
playoff_request_schema = PlayoffRequestSchema()
advancement_request_schema = AdvancementRequestSchema()
advancement_target_schema = AdvancementTargetSchema()

placement_request_schema = PlacementRequestSchema()
placement_config_schema = PlacementConfigurationSchema()
placement_results_schema = PlacementResultSchema(many=True)

resolve_request_schema = ResolveRequestSchema()
resolution_result_schema = ResolutionResultSchema()


def _tiebreaker(name):
    """Named tiebreaker, falling back to the configured default."""
    if name is None:
        name = current_app.config.get("DEFAULT_TIEBREAKER")
    return get_tiebreaker(name)


def _rng(seed):
    return random.Random(seed) if seed is not None else None


# ─── Standings ────────────────────────────────────────────────────────────────

@api_bp.route("/standings", methods=["POST"])
def standings_route():
    data = standings_request_schema.load(request.get_json())
    table = compute_standings(
        data["teams"], data["matches"], tiebreaker=_tiebreaker(data["tiebreaker"])
    )
    return jsonify({"standings": standings_schema.dump(table)}), 200


# ─── Fixtures ─────────────────────────────────────────────────────────────────

@api_bp.route("/groups/<group_id>/round-robin", methods=["POST"])
def round_robin_route(group_id):
    data = round_robin_request_schema.load(request.get_json())
    matches = generate_round_robin(data["teams"], group_id)
    return jsonify({
        "group_id": group_id,
        "match_count": len(matches),
        "round_count": round_robin_round_count(len(data["teams"])),
        "matches": matches_schema.dump(matches),
    }), 201


@api_bp.route("/fixtures/generate", methods=["POST"])
@limiter.limit("30 per minute")
def generate_fixtures_route():
    data = generate_fixtures_request_schema.load(request.get_json())
    max_teams = data["max_teams"]
    if max_teams is None:
        max_teams = current_app.config["ROUND_ROBIN_MAX_TEAMS"]

    outcomes = generate_group_fixtures(
        data["groups"], data["existing_matches"], max_teams=max_teams
    )
    return jsonify({
        "message": "Fixture generation finished",
        "match_count": sum(len(o.matches) for o in outcomes),
        "groups": fixture_outcomes_schema.dump(outcomes),
    }), 201


@api_bp.route("/groups/assign", methods=["POST"])
def assign_groups_route():
    data = assign_groups_request_schema.load(request.get_json())
    group_count = data["group_count"]
    if group_count is None:
        group_count = suggest_group_count(len(data["teams"]), data["max_teams_per_group"])
    if group_count < 1:
        abort(400, description="No teams to assign")

    groups = assign_teams_to_groups(
        data["teams"],
        group_count,
        strategy=data["strategy"],
        max_teams_per_group=data["max_teams_per_group"],
        rng=_rng(data["seed"]),
    )
    return jsonify({"groups": groups_schema.dump(groups)}), 200


# ─── Formats ──────────────────────────────────────────────────────────────────

@api_bp.route("/formats/templates", methods=["GET"])
def get_templates():
    args = template_query_schema.load(request.args)
    if args["team_count"] is None:
        templates = list(FORMAT_TEMPLATES)
    else:
        templates = get_suitable_templates(args["team_count"])
    return jsonify({"templates": templates_schema.dump(templates)}), 200


@api_bp.route("/formats/validate", methods=["POST"])
def validate_format_route():
    config = format_config_schema.load(request.get_json())
    result = validate_format(config)
    return jsonify(format_validation_schema.dump(result)), 200


@api_bp.route("/formats/estimate", methods=["POST"])
def estimate_route():
    data = estimate_request_schema.load(request.get_json())
    count = estimate_match_count(data["team_count"], data["config"])
    return jsonify({"team_count": data["team_count"], "match_count": count}), 200


# ─── Brackets ─────────────────────────────────────────────────────────────────

@api_bp.route("/brackets/knockout", methods=["POST"])
def knockout_route():
    data = knockout_request_schema.load(request.get_json())
    entrants = data["entrants"]
    if entrants is None:
        entrants = group_position_entrants(data["groups"], data["teams_advance"])

    bracket = generate_knockout_bracket(
        entrants,
        data["bracket_id"],
        include_third_place=data["include_third_place"],
        seeding_method=data["seeding_method"],
        rng=_rng(data["seed"]),
    )
    return jsonify(knockout_bracket_schema.dump(bracket)), 201


@api_bp.route("/brackets/playoff", methods=["POST"])
def playoff_route():
    data = playoff_request_schema.load(request.get_json())
    entrants = data["entrants"]
    if entrants is None:
        entrants = group_position_entrants(data["groups"], data["teams_advance"])

    bracket = generate_playoff_bracket(entrants, data["bracket_id"], data["settings"])
    return jsonify(knockout_bracket_schema.dump(bracket)), 201


@api_bp.route("/brackets/advancement", methods=["POST"])
def advancement_route():
    data = advancement_request_schema.load(request.get_json())
    targets = map_advancement(data["matches"])
    return jsonify({
        "advancement": {
            match_id: advancement_target_schema.dump(target)
            for match_id, target in targets.items()
        }
    }), 200


# ─── Placement ────────────────────────────────────────────────────────────────

@api_bp.route("/placements/validate", methods=["POST"])
def validate_placement_route():
    config = placement_config_schema.load(request.get_json())
    result = validate_placement_configuration(config)
    return jsonify(format_validation_schema.dump(result)), 200


@api_bp.route("/placements/generate", methods=["POST"])
def generate_placement_route():
    data = placement_request_schema.load(request.get_json())
    results = generate_placement_matches(data["groups"], data["configuration"])
    return jsonify({
        "match_count": sum(len(r.matches) for r in results),
        "brackets": placement_results_schema.dump(results),
    }), 201


# ─── Placeholders ─────────────────────────────────────────────────────────────

@api_bp.route("/divisions/<division_id>/resolve", methods=["POST"])
@limiter.limit("30 per minute")
def resolve_route(division_id):
    data = resolve_request_schema.load(request.get_json())
    division = data["division"]
    if division.id != division_id:
        abort(400, description="Division id in body does not match the URL")

    # Without a named or configured tiebreaker the division's group rules apply
    result = resolve_placeholders(
        division,
        data["placeholders"],
        data["matches"],
        tiebreaker=_tiebreaker(data["tiebreaker"]),
    )
    return jsonify(resolution_result_schema.dump(result)), 200
