from marshmallow import Schema, ValidationError, fields, post_load, validate

from tourney.extensions import ma
from tourney.models.phase import (
    DEFAULT_TIEBREAKER_RULES,
    PLAYOFF_BRACKET_SIZES,
    TIEBREAKER_RULES,
    BracketType,
    FormatConfiguration,
    GroupSettings,
    KnockoutSettings,
    Phase,
    PhaseType,
    PlayoffSettings,
    SeedingMethod,
    TournamentFormat,
)


class GroupSettingsSchema(Schema):
    min_teams_per_group = fields.Integer(required=True, validate=validate.Range(min=1))
    max_teams_per_group = fields.Integer(required=True, validate=validate.Range(min=1))
    teams_advance = fields.Integer(load_default=0, validate=validate.Range(min=0))
    tiebreaker_rules = fields.List(
        fields.String(validate=validate.OneOf(TIEBREAKER_RULES)),
        load_default=lambda: list(DEFAULT_TIEBREAKER_RULES),
    )

    @post_load
    def make_settings(self, data, **kwargs):
        data["tiebreaker_rules"] = tuple(data["tiebreaker_rules"])
        return GroupSettings(**data)


class KnockoutSettingsSchema(Schema):
    include_third_place = fields.Boolean(load_default=False)
    seeding_method = fields.Enum(
        SeedingMethod, by_value=True, load_default=SeedingMethod.GROUP_STANDINGS
    )
    bracket_type = fields.Enum(
        BracketType, by_value=True, load_default=BracketType.SINGLE_ELIMINATION
    )

    @post_load
    def make_settings(self, data, **kwargs):
        return KnockoutSettings(**data)


class PlayoffSettingsSchema(Schema):
    include_third_place = fields.Boolean(load_default=True)
    include_fifth_place = fields.Boolean(load_default=False)
    bracket_size = fields.Integer(load_default=4, validate=validate.OneOf(PLAYOFF_BRACKET_SIZES))

    @post_load
    def make_settings(self, data, **kwargs):
        return PlayoffSettings(**data)


SETTINGS_SCHEMAS = {
    PhaseType.GROUP: GroupSettingsSchema,
    PhaseType.KNOCKOUT: KnockoutSettingsSchema,
    PhaseType.PLAYOFF: PlayoffSettingsSchema,
}


class PhaseSchema(ma.Schema):
    id = fields.String(required=True)
    type = fields.Enum(PhaseType, by_value=True, required=True)
    name = fields.String(required=True, validate=validate.Length(min=1, max=200))
    description = fields.String(load_default=None, allow_none=True)
    order = fields.Integer(required=True)
    enabled = fields.Boolean(load_default=True)
    settings = fields.Method("dump_settings", deserialize="load_settings", load_default=dict)

    def dump_settings(self, obj):
        return SETTINGS_SCHEMAS[obj.type]().dump(obj.settings)

    def load_settings(self, value):
        if not isinstance(value, dict):
            raise ValidationError("Not a valid object.")
        return value

    @post_load
    def make_phase(self, data, **kwargs):
        # Settings are checked against the phase type once the type is known
        try:
            data["settings"] = SETTINGS_SCHEMAS[data["type"]]().load(data["settings"])
        except ValidationError as err:
            raise ValidationError(err.messages, "settings") from err
        return Phase(**data)


class FormatConfigurationSchema(ma.Schema):
    division_id = fields.String(load_default=None, allow_none=True)
    format = fields.Enum(TournamentFormat, by_value=True, load_default=TournamentFormat.CUSTOM)
    phases = fields.List(fields.Nested(PhaseSchema), load_default=list)

    @post_load
    def make_config(self, data, **kwargs):
        data["phases"] = tuple(data["phases"])
        return FormatConfiguration(**data)


class FormatValidationSchema(ma.Schema):
    is_valid = fields.Boolean()
    errors = fields.List(fields.String())
    warnings = fields.List(fields.String())


class FormatTemplateSchema(ma.Schema):
    id = fields.String()
    name = fields.String()
    description = fields.String()
    format = fields.Enum(TournamentFormat, by_value=True)
    phases = fields.List(fields.Nested(PhaseSchema))
    min_teams = fields.Integer()
    max_teams = fields.Integer()
    min_days = fields.Integer()
    max_days = fields.Integer()
    estimated_days = fields.Integer()
    suitable_for = fields.List(fields.String())


class EstimateRequestSchema(Schema):
    team_count = fields.Integer(required=True, validate=validate.Range(min=0))
    config = fields.Nested(FormatConfigurationSchema, required=True)


class TemplateQuerySchema(Schema):
    team_count = fields.Integer(load_default=None, validate=validate.Range(min=0))
