from tourney.schemas.participant import (
    TaggedUnion,
    PlaceholderSchema,
    participant_field,
)
from tourney.schemas.team import TeamSchema, StandingsRequestSchema
from tourney.schemas.phase import (
    PhaseSchema,
    FormatConfigurationSchema,
    FormatValidationSchema,
    FormatTemplateSchema,
    EstimateRequestSchema,
    TemplateQuerySchema,
)
from tourney.schemas.match import (
    MatchSchema,
    RoundRobinRequestSchema,
    GenerateFixturesRequestSchema,
    GroupFixtureOutcomeSchema,
    AdvancementRequestSchema,
    AdvancementTargetSchema,
)
from tourney.schemas.group import (
    GroupSchema,
    DivisionSchema,
    AssignGroupsRequestSchema,
    KnockoutRequestSchema,
    PlayoffRequestSchema,
    KnockoutBracketSchema,
)
from tourney.schemas.placement import (
    PlacementBracketSchema,
    PlacementConfigurationSchema,
    PlacementRequestSchema,
    PlacementResultSchema,
)
from tourney.schemas.standing import StandingSchema
from tourney.schemas.resolution import (
    ResolveRequestSchema,
    ResolutionErrorSchema,
    ResolutionResultSchema,
)

__all__ = [
    "TaggedUnion",
    "PlaceholderSchema",
    "participant_field",
    "TeamSchema",
    "StandingsRequestSchema",
    "PhaseSchema",
    "FormatConfigurationSchema",
    "FormatValidationSchema",
    "FormatTemplateSchema",
    "EstimateRequestSchema",
    "TemplateQuerySchema",
    "MatchSchema",
    "RoundRobinRequestSchema",
    "GenerateFixturesRequestSchema",
    "GroupFixtureOutcomeSchema",
    "AdvancementRequestSchema",
    "AdvancementTargetSchema",
    "GroupSchema",
    "DivisionSchema",
    "AssignGroupsRequestSchema",
    "KnockoutRequestSchema",
    "PlayoffRequestSchema",
    "KnockoutBracketSchema",
    "PlacementBracketSchema",
    "PlacementConfigurationSchema",
    "PlacementRequestSchema",
    "PlacementResultSchema",
    "StandingSchema",
    "ResolveRequestSchema",
    "ResolutionErrorSchema",
    "ResolutionResultSchema",
]
