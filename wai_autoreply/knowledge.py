import logging
import os
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

import pandas as pd

logger = logging.getLogger(__name__)


# =========================
# Intent record
# =========================
@dataclass(frozen=True)
class Intent:
    tag: str
    patterns: Tuple[str, ...]
    replies: Tuple[str, ...]

    def __post_init__(self):
        # tuples keep the record hashable and read-only
        object.__setattr__(self, "patterns", tuple(self.patterns))
        object.__setattr__(self, "replies", tuple(self.replies))
        if not self.tag:
            raise ValueError("intent tag must not be empty")
        if not self.patterns:
            raise ValueError(f"intent {self.tag!r} has no patterns")
        if not self.replies:
            raise ValueError(f"intent {self.tag!r} has no replies")


# =========================
# Domain knowledge (Marathi + English mix)
# =========================
KNOWLEDGE_BASE: Tuple[Intent, ...] = (
    Intent(
        tag="pricing",
        patterns=("किंमत", "किमती", "प्राईस", "price", "charges", "किती पैसे", "rate"),
        replies=(
            "लिस्टिंग फी फक्त ₹99 — फोटो, लोकेशन, वेळा, कॉल/व्हॉट्सअप बटण सगळं!",
            "₹99 बेसिक लिस्टिंग. अपग्रेड्स हवे असतील तर नंतर add करू शकतो.",
        ),
    ),
    Intent(
        tag="howto",
        patterns=("कसे करायचे", "how to", "process", "steps", "join", "लिस्टिंग कसं", "register"),
        replies=(
            "Add Listing वर क्लिक करा → तपशील भरा → ₹99 पेमेंट → तुमची लिस्ट ऑटो-पब्लिश!",
            "प्रोसेस: नाव/पत्ता/फोटो → Razorpay ₹99 → लगेच लाईव्ह. मदत हवी तर 'help' टाईप करा.",
        ),
    ),
    Intent(
        tag="support",
        patterns=("help", "सपोर्ट", "संपर्क", "contact", "issue", "problem", "मदत"),
        replies=(
            "सपोर्ट: waibusinesspro360@gmail.com — 24x7 ईमेल. त्वरित मदतीसाठी 'HELP NOW' लिहा.",
            "तुमचा प्रश्न पाठवा, आम्ही लगेच उत्तर देऊ. 📩 waibusinesspro360@gmail.com",
        ),
    ),
    Intent(
        tag="hours",
        patterns=("वेळ", "timings", "hours", "open", "closing time", "कधी उघडते"),
        replies=(
            "डिरेक्टरी 24x7 ऑनलाइन आहे. व्यवसायांचे वेळा त्यांच्या पेजवर दिलेले असतात.",
        ),
    ),
    Intent(
        tag="greeting",
        patterns=("hi", "hello", "नमस्कार", "हॅलो", "hey", "काय रे"),
        replies=(
            "नमस्कार! 👋 Wai Business Pro मध्ये स्वागत आहे. काय मदत करू?",
            "Hello! How can I help you with your business listing today?",
        ),
    ),
)


def find_intent(tag: str, intents: Tuple[Intent, ...] = KNOWLEDGE_BASE) -> Optional[Intent]:
    for intent in intents:
        if intent.tag == tag:
            return intent
    return None


# =========================
# Load knowledge base from a table (Excel / CSV / JSON)
# =========================
KB_COLUMNS = ("tag", "pattern", "reply")


def _read_table(path: str) -> pd.DataFrame:
    ext = os.path.splitext(path)[1].lower()
    if ext in (".xlsx", ".xls"):
        return pd.read_excel(path, sheet_name=0, engine="openpyxl", keep_default_na=False)
    if ext == ".csv":
        return pd.read_csv(path, keep_default_na=False, dtype=str)
    if ext == ".json":
        return pd.read_json(path, orient="records", dtype=False)
    raise ValueError(f"unsupported knowledge base format: {ext or path}")


def load_intents(path: str) -> Optional[Tuple[Intent, ...]]:
    """
    Build intents from a long-form table with `tag`, `pattern` and `reply`
    columns. Each row adds an optional pattern and an optional reply to its
    tag; tags keep the order of their first row.

    Returns None when the file can't be used, so callers fall back to the
    built-in KNOWLEDGE_BASE.
    """
    try:
        logger.info("Loading knowledge base from: %s", path)
        df = _read_table(path)
    except Exception as e:
        logger.warning("Failed to load knowledge base %s: %s", path, e)
        return None

    df.columns = [str(c).strip().lower() for c in df.columns]
    missing = [c for c in KB_COLUMNS if c not in df.columns]
    if missing:
        logger.warning("Knowledge base %s is missing columns: %s", path, ", ".join(missing))
        return None

    df = df[list(KB_COLUMNS)].fillna("")
    for col in KB_COLUMNS:
        df[col] = df[col].astype(str).str.strip()
    df = df[df["tag"] != ""]

    patterns: Dict[str, List[str]] = {}
    replies: Dict[str, List[str]] = {}
    for row in df.to_dict("records"):
        tag = row["tag"]
        patterns.setdefault(tag, [])
        replies.setdefault(tag, [])
        if row["pattern"] and row["pattern"] not in patterns[tag]:
            patterns[tag].append(row["pattern"])
        if row["reply"] and row["reply"] not in replies[tag]:
            replies[tag].append(row["reply"])

    intents = []
    for tag in patterns:
        if not patterns[tag] or not replies[tag]:
            logger.warning("Skipping intent %r: needs at least one pattern and one reply", tag)
            continue
        intents.append(Intent(tag=tag, patterns=tuple(patterns[tag]), replies=tuple(replies[tag])))

    if not intents:
        logger.warning("Knowledge base %s has no usable intents", path)
        return None

    logger.info("Knowledge base loaded: %d intents", len(intents))
    return tuple(intents)


def get_intents(path: Optional[str] = None) -> Tuple[Intent, ...]:
    if path:
        loaded = load_intents(path)
        if loaded is not None:
            return loaded
        logger.warning("Using built-in knowledge base")
    return KNOWLEDGE_BASE
