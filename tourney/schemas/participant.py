from marshmallow import Schema, fields, post_load, validate

from tourney.extensions import ma
from tourney.models.match import Pending, Resolved
from tourney.models.placeholder import (
    GroupPositionSource,
    MatchLoserSource,
    MatchWinnerSource,
    Placeholder,
)


class TaggedUnion(fields.Field):
    """A nested object whose schema is picked by its ``type`` tag.

    ``variants`` is a sequence of (tag, class, schema class). On dump the
    variant is found from the value's class and the tag is added to the
    output; on load the tag is checked and stripped before the variant's
    schema loads the rest.
    """

    default_error_messages = {
        "invalid": "Not a valid object.",
        "unknown_type": "Unknown type {tag!r}. Expected one of: {choices}.",
    }

    def __init__(self, variants, tag="type", **kwargs):
        super().__init__(**kwargs)
        self.variants = tuple(variants)
        self.tag = tag

    def _serialize(self, value, attr, obj, **kwargs):
        if value is None:
            return None
        for tag_value, cls, schema_cls in self.variants:
            if isinstance(value, cls):
                data = schema_cls().dump(value)
                return {self.tag: tag_value, **data}
        raise ValueError(f"No variant for {type(value).__name__}")

    def _deserialize(self, value, attr, data, **kwargs):
        if not isinstance(value, dict):
            raise self.make_error("invalid")

        payload = dict(value)
        tag_value = payload.pop(self.tag, None)
        for variant_tag, _cls, schema_cls in self.variants:
            if variant_tag == tag_value:
                return schema_cls().load(payload)

        raise self.make_error(
            "unknown_type",
            tag=tag_value,
            choices=", ".join(v[0] for v in self.variants),
        )


# ── Placeholder sources ──────────────────────────────────────────────────────

class GroupPositionSourceSchema(Schema):
    group_id = fields.String(required=True)
    position = fields.Integer(required=True, validate=validate.Range(min=1))

    @post_load
    def make_source(self, data, **kwargs):
        return GroupPositionSource(**data)


class MatchWinnerSourceSchema(Schema):
    match_id = fields.String(required=True)

    @post_load
    def make_source(self, data, **kwargs):
        return MatchWinnerSource(**data)


class MatchLoserSourceSchema(Schema):
    match_id = fields.String(required=True)

    @post_load
    def make_source(self, data, **kwargs):
        return MatchLoserSource(**data)


SOURCE_VARIANTS = (
    ("group-position", GroupPositionSource, GroupPositionSourceSchema),
    ("match-winner", MatchWinnerSource, MatchWinnerSourceSchema),
    ("match-loser", MatchLoserSource, MatchLoserSourceSchema),
)


class PlaceholderSchema(ma.Schema):
    id = fields.String(required=True)
    name = fields.String(required=True, validate=validate.Length(min=1, max=200))
    source = TaggedUnion(SOURCE_VARIANTS, required=True)

    @post_load
    def make_placeholder(self, data, **kwargs):
        return Placeholder(**data)


# ── Match slots ──────────────────────────────────────────────────────────────

class ResolvedSchema(Schema):
    team_id = fields.String(required=True)
    source = TaggedUnion(SOURCE_VARIANTS, allow_none=True, load_default=None)

    @post_load
    def make_slot(self, data, **kwargs):
        return Resolved(**data)


class PendingSchema(Schema):
    placeholder = fields.Nested(PlaceholderSchema, required=True)

    @post_load
    def make_slot(self, data, **kwargs):
        return Pending(**data)


PARTICIPANT_VARIANTS = (
    ("team", Resolved, ResolvedSchema),
    ("placeholder", Pending, PendingSchema),
)


def participant_field(**kwargs):
    """Field for a match slot: a concrete team or a pending placeholder."""
    return TaggedUnion(PARTICIPANT_VARIANTS, **kwargs)

