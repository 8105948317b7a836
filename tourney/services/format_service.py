"""Division format configuration: templates, validation and capacity estimates.

Handles:
- The built-in format templates and picking the ones that suit a team count
- Checking a division's phase sequence for errors and suspicious ordering
- Estimating how many matches a format will need
"""
import logging
import math
from dataclasses import dataclass, field, replace

from tourney.errors import EngineValidationError
from tourney.models.phase import (
    FormatConfiguration,
    GroupSettings,
    KnockoutSettings,
    Phase,
    PhaseType,
    PlayoffSettings,
    SeedingMethod,
    TournamentFormat,
)

logger = logging.getLogger(__name__)

_FULL_TIEBREAKERS = ("points", "goal-difference", "goals-scored", "head-to-head")


@dataclass(frozen=True)
class FormatValidation:
    errors: list = field(default_factory=list)
    warnings: list = field(default_factory=list)

    @property
    def is_valid(self):
        return not self.errors


@dataclass(frozen=True)
class FormatTemplate:
    id: str
    name: str
    description: str
    format: TournamentFormat
    phases: tuple
    min_teams: int
    max_teams: int
    min_days: int
    max_days: int
    estimated_days: int
    suitable_for: tuple = ()


# ── Templates ────────────────────────────────────────────────────────────────

FORMAT_TEMPLATES = (
    FormatTemplate(
        id="youth-league",
        name="Youth League",
        description="Round-robin only tournament for youth teams",
        format=TournamentFormat.ROUND_ROBIN_ONLY,
        phases=(
            Phase(
                id="groups",
                type=PhaseType.GROUP,
                name="Group Stage",
                description="Teams play each other once in groups",
                order=1,
                settings=GroupSettings(
                    min_teams_per_group=4,
                    max_teams_per_group=8,
                    teams_advance=0,
                    tiebreaker_rules=_FULL_TIEBREAKERS,
                ),
            ),
        ),
        min_teams=4,
        max_teams=32,
        min_days=1,
        max_days=3,
        estimated_days=2,
        suitable_for=("Youth tournaments", "Local leagues", "Friendly competitions"),
    ),
    FormatTemplate(
        id="cup-competition",
        name="Cup Competition",
        description="Single elimination knockout tournament",
        format=TournamentFormat.KNOCKOUT_ONLY,
        phases=(
            Phase(
                id="knockout",
                type=PhaseType.KNOCKOUT,
                name="Knockout Stage",
                description="Single elimination bracket",
                order=1,
                settings=KnockoutSettings(
                    include_third_place=True,
                    seeding_method=SeedingMethod.RANDOM,
                ),
            ),
        ),
        min_teams=4,
        max_teams=64,
        min_days=1,
        max_days=7,
        estimated_days=3,
        suitable_for=("Cup competitions", "Championships", "Playoffs"),
    ),
    FormatTemplate(
        id="championship",
        name="Championship",
        description="Groups followed by knockout stage",
        format=TournamentFormat.HYBRID_GROUPS_KNOCKOUT,
        phases=(
            Phase(
                id="groups",
                type=PhaseType.GROUP,
                name="Group Stage",
                description="Preliminary group stage",
                order=1,
                settings=GroupSettings(
                    min_teams_per_group=4,
                    max_teams_per_group=6,
                    teams_advance=2,
                    tiebreaker_rules=_FULL_TIEBREAKERS,
                ),
            ),
            Phase(
                id="knockout",
                type=PhaseType.KNOCKOUT,
                name="Knockout Stage",
                description="Elimination bracket for group winners",
                order=2,
                settings=KnockoutSettings(
                    include_third_place=True,
                    seeding_method=SeedingMethod.GROUP_STANDINGS,
                ),
            ),
        ),
        min_teams=8,
        max_teams=32,
        min_days=2,
        max_days=5,
        estimated_days=3,
        suitable_for=("Championships", "Major tournaments", "Multi-day events"),
    ),
    FormatTemplate(
        id="finnish-tournament",
        name="Finnish Tournament",
        description="Traditional Finnish tournament format with groups and playoffs",
        format=TournamentFormat.HYBRID_GROUPS_PLAYOFF,
        phases=(
            Phase(
                id="groups",
                type=PhaseType.GROUP,
                name="Alkulohko-ottelut",
                description="Preliminary group stage",
                order=1,
                settings=GroupSettings(
                    min_teams_per_group=4,
                    max_teams_per_group=6,
                    teams_advance=4,
                    tiebreaker_rules=_FULL_TIEBREAKERS,
                ),
            ),
            Phase(
                id="playoffs",
                type=PhaseType.PLAYOFF,
                name="Sijoituspelit",
                description="Playoff matches for final standings",
                order=2,
                settings=PlayoffSettings(
                    include_third_place=True,
                    include_fifth_place=True,
                    bracket_size=8,
                ),
            ),
        ),
        min_teams=8,
        max_teams=16,
        min_days=2,
        max_days=4,
        estimated_days=3,
        suitable_for=("Finnish tournaments", "Regional competitions", "Traditional format"),
    ),
)


def get_format_template(template_id):
    return next((t for t in FORMAT_TEMPLATES if t.id == template_id), None)


def get_suitable_templates(team_count):
    """Templates whose team range includes ``team_count``."""
    return [t for t in FORMAT_TEMPLATES if t.min_teams <= team_count <= t.max_teams]


def create_division_format_from_template(template_id, division_id):
    """Copy a template's phases into a division's format configuration.

    Phase ids are prefixed with the division id. Returns None for an unknown
    template.
    """
    template = get_format_template(template_id)
    if not template:
        return None

    return FormatConfiguration(
        division_id=division_id,
        format=template.format,
        phases=tuple(
            replace(phase, id=f"{division_id}-{phase.id}") for phase in template.phases
        ),
    )


# ── Validation ───────────────────────────────────────────────────────────────

def validate_format(config):
    """Check a division's phase sequence.

    Errors make the format unusable; warnings flag a sequence that looks wrong
    but may already be in use, so it is not rejected.
    """
    errors = []
    warnings = []

    enabled = config.enabled_phases
    if not enabled:
        errors.append("At least one phase must be enabled")

    orders = [p.order for p in enabled]
    duplicated = sorted({o for o in orders if orders.count(o) > 1})
    if duplicated:
        errors.append(
            "Phase orders must be unique (duplicated: "
            + ", ".join(str(o) for o in duplicated)
            + ")"
        )

    ordered = sorted(enabled, key=lambda p: p.order)
    group_phases = [p for p in ordered if p.type == PhaseType.GROUP]
    later_phases = [p for p in ordered if p.is_elimination]

    if group_phases and later_phases:
        max_group_order = max(p.order for p in group_phases)
        min_later_order = min(p.order for p in later_phases)
        if max_group_order >= min_later_order:
            warnings.append("Group phases should come before knockout/playoff phases")

    for phase in group_phases:
        s = phase.settings
        if s.min_teams_per_group > s.max_teams_per_group:
            errors.append(
                f'Phase "{phase.name}": min_teams_per_group ({s.min_teams_per_group}) '
                f"cannot be greater than max_teams_per_group ({s.max_teams_per_group})"
            )
        if s.teams_advance > s.max_teams_per_group:
            errors.append(
                f'Phase "{phase.name}": teams_advance ({s.teams_advance}) '
                f"cannot be greater than max_teams_per_group ({s.max_teams_per_group})"
            )

    if errors:
        logger.debug("Format for division %s is invalid: %s", config.division_id, errors)

    return FormatValidation(errors=errors, warnings=warnings)


# ── Estimates ────────────────────────────────────────────────────────────────

def _playoff_match_count(settings):
    # Semi-finals (2) + final + third place + optional fifth place
    return 2 + 1 + 1 + (1 if settings.include_fifth_place else 0)


def estimate_match_count(team_count, config):
    """Rough number of matches a format needs for ``team_count`` teams.

    Per enabled phase:
      group:    group_count × tpg(tpg-1)/2 with group_count = ceil(n / max)
                and tpg = ceil(n / group_count)
      knockout: n - 1, plus one for a third-place match
      playoff:  semi-finals + final + third place (+ fifth place)

    This is for capacity planning only.
    """
    if team_count < 0:
        raise EngineValidationError("team_count cannot be negative", location="team_count")

    total = 0
    for phase in config.enabled_phases:
        if phase.type == PhaseType.GROUP:
            max_per_group = phase.settings.max_teams_per_group
            if max_per_group < 1:
                raise EngineValidationError(
                    f'Phase "{phase.name}": max_teams_per_group must be at least 1',
                    location=f"phase:{phase.id}",
                )
            if team_count == 0:
                continue
            group_count = math.ceil(team_count / max_per_group)
            teams_per_group = math.ceil(team_count / group_count)
            total += group_count * (teams_per_group * (teams_per_group - 1) // 2)

        elif phase.type == PhaseType.KNOCKOUT:
            if team_count < 2:
                continue
            total += team_count - 1 + (1 if phase.settings.include_third_place else 0)

        elif phase.type == PhaseType.PLAYOFF:
            total += _playoff_match_count(phase.settings)

    return total
