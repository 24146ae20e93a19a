from .fuzzy import edit_similarity, normalize, token_overlap
from .knowledge import KNOWLEDGE_BASE, Intent, get_intents, load_intents
from .responder import (
    CONFIDENCE_THRESHOLD,
    EMPTY_MESSAGE_REPLY,
    FALLBACK_REPLY,
    MatchResult,
    Reply,
    best_match,
    respond,
)

__version__ = "0.1.0"
