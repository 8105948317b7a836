from marshmallow import Schema, fields, post_load, validate

from tourney.extensions import ma
from tourney.models.placement import PlacementBracket, PlacementConfiguration, PlacementFormat
from tourney.schemas.group import GroupSchema
from tourney.schemas.match import MatchSchema


class PlacementBracketSchema(ma.Schema):
    id = fields.String(required=True)
    name = fields.String(required=True, validate=validate.Length(min=1, max=200))
    positions = fields.List(fields.Integer(validate=validate.Range(min=1)), required=True)
    match_format = fields.Enum(
        PlacementFormat, by_value=True, load_default=PlacementFormat.SINGLE_ELIMINATION
    )
    include_third_place = fields.Boolean(load_default=False)
    include_fifth_place = fields.Boolean(load_default=False)

    @post_load
    def make_bracket(self, data, **kwargs):
        data["positions"] = tuple(data["positions"])
        return PlacementBracket(**data)


class PlacementConfigurationSchema(ma.Schema):
    name = fields.String(required=True)
    brackets = fields.List(fields.Nested(PlacementBracketSchema), load_default=list)

    @post_load
    def make_config(self, data, **kwargs):
        data["brackets"] = tuple(data["brackets"])
        return PlacementConfiguration(**data)


class PlacementRequestSchema(Schema):
    groups = fields.List(fields.Nested(GroupSchema), required=True)
    configuration = fields.Nested(PlacementConfigurationSchema, required=True)


class PlacementResultSchema(ma.Schema):
    bracket_id = fields.String()
    bracket_name = fields.String()
    matches = fields.List(fields.Nested(MatchSchema))
