import re
import unicodedata
from typing import Optional, Set

_WS_RE = re.compile(r"\s+")

# Only letters and numbers survive; combining marks (Devanagari vowel signs) become spaces.
_KEEP_CATEGORIES = ("L", "N")


# =========================
# Normalizer
# =========================
def normalize(text: Optional[str]) -> str:
    if text is None:
        return ""
    if not isinstance(text, str):
        text = str(text)
    text = text.lower()
    text = "".join(
        ch if unicodedata.category(ch)[0] in _KEEP_CATEGORIES else " "
        for ch in text
    )
    return _WS_RE.sub(" ", text).strip()


def tokens(text: Optional[str]) -> Set[str]:
    return set(normalize(text).split())


# =========================
# Scorers
# =========================
def token_overlap(a: Optional[str], b: Optional[str]) -> float:
    """
    Share of unique tokens the two texts have in common, divided by the
    size of the larger token set (not the union).
    """
    A = tokens(a)
    B = tokens(b)
    if not A or not B:
        return 0.0
    hit = len(A & B)
    return hit / max(len(A), len(B))


def levenshtein(a: str, b: str) -> int:
    # single rolling row over b
    n = len(b)
    row = list(range(n + 1))
    for i in range(1, len(a) + 1):
        prev = row[0]
        row[0] = i
        for j in range(1, n + 1):
            tmp = row[j]
            row[j] = min(
                row[j] + 1,
                row[j - 1] + 1,
                prev + (0 if a[i - 1] == b[j - 1] else 1),
            )
            prev = tmp
    return row[n]


def edit_similarity(a: Optional[str], b: Optional[str]) -> float:
    a = normalize(a)
    b = normalize(b)
    if not a and not b:
        return 1.0
    dist = levenshtein(a, b)
    return 1 - dist / (max(len(a), len(b)) or 1)
