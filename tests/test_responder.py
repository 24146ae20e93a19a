import random

import pytest

from wai_autoreply.knowledge import Intent, find_intent
from wai_autoreply.responder import (
    CONFIDENCE_THRESHOLD,
    EMPTY_MESSAGE_REPLY,
    FALLBACK_REPLY,
    MatchResult,
    Reply,
    best_match,
    pick,
    round_score,
    respond,
)


class FirstChoice:
    def choice(self, seq):
        return seq[0]


def test_threshold_constant():
    assert CONFIDENCE_THRESHOLD == 0.42


def test_best_match_empty_text():
    assert best_match("") == MatchResult(None, 0.0)
    assert best_match("  ?! ") == MatchResult(None, 0.0)
    assert best_match(None) == MatchResult(None, 0.0)


def test_best_match_empty_knowledge_base():
    assert best_match("price", intents=()) == MatchResult(None, 0.0)


def test_best_match_exact_token():
    assert best_match("price") == MatchResult("pricing", 1.0)


def test_best_match_typo_goes_through_edit_similarity():
    m = best_match("hii")
    assert m.tag == "greeting"
    assert m.score == pytest.approx(2 / 3)


def test_best_match_ties_keep_first_declared():
    intents = (
        Intent(tag="first", patterns=("foo",), replies=("1",)),
        Intent(tag="second", patterns=("foo",), replies=("2",)),
    )
    assert best_match("foo", intents).tag == "first"


def test_best_match_multiword_overlap():
    m = best_match("how to join?")
    assert m.tag == "howto"
    assert m.score == pytest.approx(2 / 3)


def test_respond_empty_message_skips_matcher(monkeypatch):
    def boom(*args, **kwargs):
        raise AssertionError("matcher should not run")

    monkeypatch.setattr("wai_autoreply.responder.best_match", boom)
    for text in ("", "   ", None):
        result = respond(text)
        assert result == Reply(EMPTY_MESSAGE_REPLY)
        assert result.to_dict() == {"ok": True, "reply": EMPTY_MESSAGE_REPLY}


def test_respond_exact_match_with_stub_rng():
    result = respond("price", rng=FirstChoice())
    assert result.tag == "pricing"
    assert result.intent_score == 1.0
    assert result.reply == find_intent("pricing").replies[0]
    assert result.to_dict() == {
        "ok": True,
        "reply": result.reply,
        "tag": "pricing",
        "intentScore": 1.0,
    }


def test_respond_low_confidence_fallback():
    result = respond("xyzxyz")
    assert result.reply == FALLBACK_REPLY
    assert result.tag is None
    assert result.intent_score < CONFIDENCE_THRESHOLD
    assert "tag" not in result.to_dict()
    assert "intentScore" in result.to_dict()


def test_respond_rounds_score():
    result = respond("hii", rng=FirstChoice())
    assert result.tag == "greeting"
    assert result.intent_score == 0.67


def test_respond_threshold_is_tunable():
    result = respond("hii", threshold=0.9)
    assert result.reply == FALLBACK_REPLY
    assert result.intent_score == 0.67


def test_respond_marathi_input():
    result = respond("किती पैसे?")
    assert result.tag == "pricing"
    assert result.intent_score == 1.0


def test_single_reply_intent_is_stable():
    assert respond("timings").reply == respond("timings").reply


def test_multi_reply_intent_stays_in_candidates():
    rng = random.Random(7)
    replies = find_intent("greeting").replies
    for _ in range(25):
        assert respond("hello", rng=rng).reply in replies


def test_pick_uses_given_rng():
    assert pick(("a", "b", "c"), FirstChoice()) == "a"
    assert pick(["only"]) == "only"


@pytest.mark.parametrize("score,expected", [
    (0.125, 0.13),
    (0.625, 0.63),
    (0.875, 0.88),
    (2 / 3, 0.67),
    (0.0, 0.0),
    (1.0, 1.0),
])
def test_round_score_rounds_halves_up(score, expected):
    assert round_score(score) == expected


def test_respond_reports_half_scores_rounded_up():
    # one substitution-heavy typo of an 8-letter pattern: 1 - 3/8
    result = respond("regxxxer", rng=FirstChoice())
    assert result.tag == "howto"
    assert result.intent_score == 0.63
