from marshmallow import Schema, fields

from tourney.extensions import ma
from tourney.schemas.group import DivisionSchema
from tourney.schemas.match import MatchSchema
from tourney.schemas.participant import PlaceholderSchema


class ResolveRequestSchema(Schema):
    """``placeholders`` defaults to every placeholder found in ``matches``."""

    division = fields.Nested(DivisionSchema, required=True)
    placeholders = fields.List(fields.Nested(PlaceholderSchema), load_default=None)
    matches = fields.List(fields.Nested(MatchSchema), required=True)
    tiebreaker = fields.String(load_default=None, allow_none=True)


class ResolutionErrorSchema(ma.Schema):
    placeholder_id = fields.String()
    error = fields.String()


class ResolutionResultSchema(ma.Schema):
    resolved_count = fields.Integer()
    errors = fields.List(fields.Nested(ResolutionErrorSchema))
    substitutions = fields.Dict(keys=fields.String(), values=fields.String())
    placeholders = fields.List(fields.Nested(PlaceholderSchema))
    matches = fields.List(fields.Nested(MatchSchema))
