import json

import click
from flask import current_app
from flask.cli import AppGroup
from marshmallow import ValidationError

from tourney.errors import EngineValidationError
from tourney.schemas import (
    FormatConfigurationSchema,
    FormatValidationSchema,
    MatchSchema,
    ResolutionResultSchema,
    ResolveRequestSchema,
    RoundRobinRequestSchema,
    StandingSchema,
    StandingsRequestSchema,
)
from tourney.services.format_service import validate_format
from tourney.services.placeholder_service import resolve_placeholders
from tourney.services.scheduler_service import generate_round_robin
from tourney.services.standings import compute_standings, get_tiebreaker

engine_cli = AppGroup("engine", help="Run engine operations on JSON documents.")


def _load(schema, source):
    """Parse a JSON document and load it through ``schema``."""
    try:
        payload = json.load(source)
    except json.JSONDecodeError as err:
        raise click.ClickException(f"{source.name} is not valid JSON: {err}") from err

    try:
        return schema.load(payload)
    except ValidationError as err:
        raise click.ClickException(
            f"Validation failed: {json.dumps(err.messages, sort_keys=True)}"
        ) from err


def _echo(data):
    click.echo(json.dumps(data, indent=2))


def _tiebreaker(name):
    if name is None:
        name = current_app.config.get("DEFAULT_TIEBREAKER")
    try:
        return get_tiebreaker(name)
    except EngineValidationError as err:
        raise click.ClickException(err.message) from err


@engine_cli.command("standings")
@click.argument("source", type=click.File("r"))
def standings_command(source):
    """Compute a standings table from {"teams": [...], "matches": [...]}."""
    data = _load(StandingsRequestSchema(), source)
    try:
        table = compute_standings(
            data["teams"], data["matches"], tiebreaker=_tiebreaker(data["tiebreaker"])
        )
    except EngineValidationError as err:
        raise click.ClickException(err.message) from err
    _echo({"standings": StandingSchema(many=True).dump(table)})


@engine_cli.command("round-robin")
@click.argument("source", type=click.File("r"))
@click.option("--group-id", required=True, help="Group the fixtures belong to.")
def round_robin_command(source, group_id):
    """Generate a round-robin from {"teams": [...]}."""
    data = _load(RoundRobinRequestSchema(), source)
    try:
        matches = generate_round_robin(data["teams"], group_id)
    except EngineValidationError as err:
        raise click.ClickException(err.message) from err
    _echo({"matches": MatchSchema(many=True).dump(matches)})


@engine_cli.command("validate-format")
@click.argument("source", type=click.File("r"))
def validate_format_command(source):
    """Validate a format configuration {"phases": [...]}."""
    config = _load(FormatConfigurationSchema(), source)
    result = validate_format(config)
    _echo(FormatValidationSchema().dump(result))
    if not result.is_valid:
        click.get_current_context().exit(1)


@engine_cli.command("resolve")
@click.argument("source", type=click.File("r"))
def resolve_command(source):
    """Resolve placeholders from {"division": {...}, "matches": [...]}."""
    data = _load(ResolveRequestSchema(), source)
    result = resolve_placeholders(
        data["division"],
        data["placeholders"],
        data["matches"],
        tiebreaker=_tiebreaker(data["tiebreaker"]),
    )
    _echo(ResolutionResultSchema().dump(result))
