from marshmallow import Schema, fields, post_load, validate

from tourney.extensions import ma
from tourney.models.team import Team


class TeamSchema(ma.Schema):
    id = fields.String(required=True)
    name = fields.String(required=True, validate=validate.Length(min=1, max=200))
    short_name = fields.String(load_default=None, allow_none=True, validate=validate.Length(max=20))
    level = fields.String(load_default=None, allow_none=True)

    @post_load
    def make_team(self, data, **kwargs):
        return Team(**data)


class StandingsRequestSchema(Schema):
    teams = fields.List(fields.Nested(TeamSchema), required=True)
    matches = fields.List(fields.Nested("MatchSchema"), load_default=list)
    tiebreaker = fields.String(load_default=None, allow_none=True)
