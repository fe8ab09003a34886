"""Magic Ideas -- local organization heuristics for a saved-idea library."""

__version__ = "0.1.0"

from magic_ideas.clustering import clusterize  # noqa: F401, E402
from magic_ideas.models import (  # noqa: F401, E402
    Cluster,
    DuplicatePair,
    Idea,
    IdeaType,
    OrganizationResult,
    PriorityBreakdown,
    TagSuggestion,
    UsageContext,
)
from magic_ideas.organizer import organize  # noqa: F401, E402
from magic_ideas.scoring import priority_score, score_breakdown  # noqa: F401, E402
from magic_ideas.similarity import find_duplicates, jaccard  # noqa: F401, E402
from magic_ideas.tagging import suggest_tags  # noqa: F401, E402
from magic_ideas.text import tokenize  # noqa: F401, E402
