from marshmallow import Schema, ValidationError, fields, post_load, validate, validates_schema

from tourney.extensions import ma
from tourney.models.group import Division, Group
from tourney.models.phase import PlayoffSettings, SeedingMethod
from tourney.schemas.participant import participant_field
from tourney.schemas.phase import FormatConfigurationSchema, PlayoffSettingsSchema
from tourney.schemas.team import TeamSchema
from tourney.services.scheduler_service import AssignmentStrategy


class GroupSchema(ma.Schema):
    id = fields.String(required=True)
    name = fields.String(required=True, validate=validate.Length(min=1, max=100))
    teams = fields.List(fields.Nested(TeamSchema), load_default=list)

    @post_load
    def make_group(self, data, **kwargs):
        data["teams"] = tuple(data["teams"])
        return Group(**data)


class DivisionSchema(ma.Schema):
    id = fields.String(required=True)
    name = fields.String(required=True, validate=validate.Length(min=1, max=200))
    groups = fields.List(fields.Nested(GroupSchema), load_default=list)
    format = fields.Nested(FormatConfigurationSchema, load_default=None, allow_none=True)

    @post_load
    def make_division(self, data, **kwargs):
        data["groups"] = tuple(data["groups"])
        return Division(**data)


class AssignGroupsRequestSchema(Schema):
    teams = fields.List(fields.Nested(TeamSchema), required=True)
    group_count = fields.Integer(load_default=None, allow_none=True, validate=validate.Range(min=1))
    max_teams_per_group = fields.Integer(
        load_default=None, allow_none=True, validate=validate.Range(min=1)
    )
    strategy = fields.Enum(AssignmentStrategy, by_value=True, load_default=AssignmentStrategy.BALANCED)
    seed = fields.Integer(load_default=None, allow_none=True)

    @validates_schema
    def validate_group_count(self, data, **kwargs):
        if data.get("group_count") is None and data.get("max_teams_per_group") is None:
            raise ValidationError(
                "Either group_count or max_teams_per_group is required", "group_count"
            )


class BracketEntrantsSchema(Schema):
    """Entrants given explicitly, or from ``groups`` and ``teams_advance``."""

    bracket_id = fields.String(required=True)
    entrants = fields.List(participant_field(required=True), load_default=None)
    groups = fields.List(fields.Nested(GroupSchema), load_default=None)
    teams_advance = fields.Integer(load_default=2, validate=validate.Range(min=1))

    @validates_schema
    def validate_entrants(self, data, **kwargs):
        if (data.get("entrants") is None) == (data.get("groups") is None):
            raise ValidationError("Provide either entrants or groups", "entrants")


class KnockoutRequestSchema(BracketEntrantsSchema):
    include_third_place = fields.Boolean(load_default=False)
    seeding_method = fields.Enum(SeedingMethod, by_value=True, load_default=SeedingMethod.MANUAL)
    seed = fields.Integer(load_default=None, allow_none=True)


class PlayoffRequestSchema(BracketEntrantsSchema):
    settings = fields.Nested(PlayoffSettingsSchema, load_default=PlayoffSettings)


class KnockoutBracketSchema(ma.Schema):
    matches = fields.List(fields.Nested("MatchSchema"))
    total_rounds = fields.Integer()
    byes = fields.List(participant_field())
