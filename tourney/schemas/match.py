from marshmallow import (
    Schema,
    ValidationError,
    fields,
    post_load,
    pre_load,
    validate,
    validates_schema,
)

from tourney.extensions import ma
from tourney.models.match import Match, MatchStatus
from tourney.schemas.participant import participant_field
from tourney.schemas.team import TeamSchema
from tourney.services.scheduler_service import FixtureStatus


class MatchSchema(ma.Schema):
    id = fields.String(required=True)
    home = participant_field(load_default=None, allow_none=True)
    away = participant_field(load_default=None, allow_none=True)
    home_team_id = fields.String(dump_only=True)
    away_team_id = fields.String(dump_only=True)
    home_score = fields.Integer(load_default=None, allow_none=True, validate=validate.Range(min=0))
    away_score = fields.Integer(load_default=None, allow_none=True, validate=validate.Range(min=0))
    status = fields.Enum(MatchStatus, by_value=True, load_default=MatchStatus.SCHEDULED)
    group_id = fields.String(load_default=None, allow_none=True)
    round = fields.Integer(load_default=None, allow_none=True, validate=validate.Range(min=1))
    round_label = fields.String(load_default=None, allow_none=True)
    match_label = fields.String(load_default=None, allow_none=True)
    start_time = fields.DateTime(load_default=None, allow_none=True)
    penalty_winner_id = fields.String(load_default=None, allow_none=True)

    @pre_load
    def expand_team_ids(self, data, **kwargs):
        """Accept ``home_team_id`` / ``away_team_id`` as shorthand for team slots."""
        if not isinstance(data, dict):
            return data
        data = dict(data)
        for side in ("home", "away"):
            team_id = data.pop(f"{side}_team_id", None)
            if team_id is not None and data.get(side) is None:
                data[side] = {"type": "team", "team_id": team_id}
        return data

    @validates_schema
    def validate_finished_score(self, data, **kwargs):
        if data.get("status") != MatchStatus.FINISHED:
            return
        for side in ("home_score", "away_score"):
            if data.get(side) is None:
                raise ValidationError("A finished match needs both scores", side)

    @post_load
    def make_match(self, data, **kwargs):
        return Match(**data)


class RoundRobinRequestSchema(Schema):
    teams = fields.List(fields.Nested(TeamSchema), required=True)


class GenerateFixturesRequestSchema(Schema):
    groups = fields.List(fields.Nested("GroupSchema"), required=True)
    existing_matches = fields.List(fields.Nested(MatchSchema), load_default=list)
    max_teams = fields.Integer(load_default=None, allow_none=True, validate=validate.Range(min=2))


class GroupFixtureOutcomeSchema(ma.Schema):
    group_id = fields.String()
    status = fields.Enum(FixtureStatus, by_value=True)
    matches = fields.List(fields.Nested(MatchSchema))
    warning = fields.String(allow_none=True)
    error = fields.String(allow_none=True)


class AdvancementRequestSchema(Schema):
    matches = fields.List(fields.Nested(MatchSchema), required=True)


class AdvancementTargetSchema(ma.Schema):
    winner_target = fields.String(allow_none=True)
    loser_target = fields.String(allow_none=True)
