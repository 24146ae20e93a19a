import random
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, Optional, Sequence, Tuple

from .fuzzy import edit_similarity, normalize, token_overlap
from .knowledge import KNOWLEDGE_BASE, Intent, find_intent

# =========================
# Tunables
# =========================
# Below this score the fallback reply is used instead of guessing.
CONFIDENCE_THRESHOLD = 0.42

# The two scorers are combined per pattern, not averaged.
SCORE_COMBINER = max

EMPTY_MESSAGE_REPLY = (
    "नमस्कार! तुमचा मेसेज रिकामा आला. कृपया प्रश्न लिहा — उदा. 'प्राईस काय?'"
)

FALLBACK_REPLY = (
    "समजलं. कृपया थोडं स्पष्ट लिहाल का? (उदा. 'किंमत', 'कसे करायचे', 'सपोर्ट')."
)


@dataclass(frozen=True)
class MatchResult:
    tag: Optional[str]
    score: float


@dataclass(frozen=True)
class Reply:
    reply: str
    tag: Optional[str] = None
    intent_score: Optional[float] = None
    ok: bool = True

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"ok": self.ok, "reply": self.reply}
        if self.tag is not None:
            data["tag"] = self.tag
        if self.intent_score is not None:
            data["intentScore"] = self.intent_score
        return data


# =========================
# Matcher
# =========================
def pattern_score(text: str, pattern: str) -> float:
    return SCORE_COMBINER(token_overlap(text, pattern), edit_similarity(text, pattern))


def best_match(text: Optional[str], intents: Tuple[Intent, ...] = KNOWLEDGE_BASE) -> MatchResult:
    """
    Scores the text against every pattern of every intent and keeps the
    single best (tag, score). Ties keep the first pair in declaration order.
    """
    if not normalize(text):
        return MatchResult(None, 0.0)

    best = MatchResult(None, 0.0)
    for intent in intents:
        for pat in intent.patterns:
            s = pattern_score(text, pat)
            if s > best.score:
                best = MatchResult(intent.tag, s)
    return best


# =========================
# Reply selection
# =========================
def pick(options: Sequence[str], rng=None) -> str:
    # rng: anything with .choice(), e.g. random.Random(seed)
    return (rng or random).choice(list(options))


def round_score(score: float) -> float:
    # two decimals, halves away from zero (0.625 -> 0.63)
    return float(Decimal(repr(score)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def respond(
    raw_text: Optional[str],
    intents: Tuple[Intent, ...] = KNOWLEDGE_BASE,
    rng=None,
    threshold: float = CONFIDENCE_THRESHOLD,
) -> Reply:
    q = raw_text.strip() if isinstance(raw_text, str) else normalize(raw_text)
    if not q:
        return Reply(EMPTY_MESSAGE_REPLY)

    match = best_match(q, intents)
    score = round_score(match.score)

    # low score -> generic fallback
    if match.tag is None or match.score < threshold:
        return Reply(FALLBACK_REPLY, intent_score=score)

    intent = find_intent(match.tag, intents)
    return Reply(pick(intent.replies, rng), tag=match.tag, intent_score=score)
