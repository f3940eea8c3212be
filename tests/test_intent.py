"""Tests for mode classification and constraint extraction."""

from __future__ import annotations

import pytest

from namer.intent import (
    UNCONSTRAINED,
    ConstraintKind,
    Mode,
    TldConstraint,
    classify,
    extract_explicit_tlds,
    extract_requested_count,
    interpret_turn,
    is_continuation_request,
    is_probably_french,
    resolve_tld_constraint,
    user_clears_tld_constraint,
    user_forces_specific_tld,
)

_AI_FORCED = TldConstraint(ConstraintKind.EXPLICIT, (".ai",))


class TestClassify:
    def test_full_domain_is_check(self):
        assert classify("check foo.io", Mode.BRAINSTORM) is Mode.CHECK

    def test_short_project_description_is_brainstorm(self):
        assert classify("I need a B2B SaaS name", Mode.CHECK) is Mode.BRAINSTORM

    def test_brainstorm_keywords(self):
        assert classify("suggest names for my coffee shop", Mode.CHECK) is Mode.BRAINSTORM

    def test_is_available_phrase_is_check(self):
        assert classify("is nova available", Mode.BRAINSTORM) is Mode.CHECK

    def test_bare_token_is_check(self):
        assert classify("domai", Mode.BRAINSTORM) is Mode.CHECK

    def test_long_description_is_brainstorm(self):
        text = "we are building a platform that helps small farmers sell produce directly to restaurants"
        assert classify(text, Mode.CHECK) is Mode.BRAINSTORM

    def test_explicit_check_wins_tie(self):
        assert classify("check foo.io and suggest names like it", Mode.BRAINSTORM) is Mode.CHECK

    @pytest.mark.parametrize("cue", ["again", "check again", "recheck", "retry", "more", "encore", "plus", "recommence"])
    def test_continuation_keeps_previous_mode(self, cue):
        assert classify(cue, Mode.CHECK) is Mode.CHECK
        assert classify(cue, Mode.BRAINSTORM) is Mode.BRAINSTORM

    def test_blank_keeps_previous_mode(self):
        assert classify("   ", Mode.CHECK) is Mode.CHECK


class TestExtractRequestedCount:
    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("give me only 5 names in .ai", 5),
            ("suggest 12 names", 12),
            ("I want 3 domains", 3),
            ("je veux 4 noms", 4),
            ("donne-moi 7", 7),
            ("il me faut 6 domaines", 6),
            ("give me 99 names", 50),
        ],
    )
    def test_parses_count(self, text, expected):
        assert extract_requested_count(text) == expected

    @pytest.mark.parametrize("text", ["I need a B2B SaaS name", "", "names please", "0 names"])
    def test_returns_none_without_count(self, text):
        assert extract_requested_count(text) is None

    def test_always_within_bounds(self):
        samples = [
            "give me 1 name",
            "give me 50 names",
            "give me 51 names",
            "find 100 domains",
            "need 00 options",
            "10 ideas and 20 suggestions",
            "propose-moi 88",
        ]
        for text in samples:
            value = extract_requested_count(text)
            assert value is None or 1 <= value <= 50


class TestExtractExplicitTlds:
    def test_collects_standalone_tlds_in_order(self):
        assert extract_explicit_tlds("only .ai and .io please") == [".ai", ".io"]

    def test_deduplicates(self):
        assert extract_explicit_tlds(".ai .AI .ai") == [".ai"]

    def test_ignores_tld_inside_full_domain(self):
        assert extract_explicit_tlds("check foo.io") is None

    def test_caps_at_eight(self):
        text = " ".join(f".t{c}{c}" for c in "abcdefghij")
        assert len(extract_explicit_tlds(text)) == 8

    def test_rejects_overlong_tokens(self):
        assert extract_explicit_tlds("try .abcdefghijklmnop") is None

    def test_empty_is_none(self):
        assert extract_explicit_tlds("") is None


class TestPredicates:
    @pytest.mark.parametrize("text", ["more", "again please", "give me more please", "encore", "5 de plus"])
    def test_continuation(self, text):
        assert is_continuation_request(text)

    def test_long_sentence_is_not_continuation(self):
        assert not is_continuation_request("Tell me more about the history of naming conventions in startups")

    @pytest.mark.parametrize(
        "text",
        ["any TLD is fine", "remove the .ai", "peu importe l'extension", "not only .ai", "drop the TLD constraint"],
    )
    def test_clears_constraint(self, text):
        assert user_clears_tld_constraint(text)

    def test_more_does_not_clear(self):
        assert not user_clears_tld_constraint("more")

    def test_forces_ai(self):
        assert user_forces_specific_tld("names en .ai")
        assert user_forces_specific_tld("with the extension .ai")

    def test_full_domain_does_not_force(self):
        assert not user_forces_specific_tld("check domai.ai")

    def test_french_detection(self):
        assert is_probably_french("je veux un nom pour mon projet")
        assert not is_probably_french("I need a B2B SaaS name")


class TestResolveTldConstraint:
    def test_explicit_tlds_win(self):
        constraint = resolve_tld_constraint("more but in .io", _AI_FORCED)
        assert constraint.kind is ConstraintKind.EXPLICIT
        assert constraint.forced_tlds == [".io"]

    def test_clear_beats_carry(self):
        constraint = resolve_tld_constraint("more, any tld", _AI_FORCED)
        assert constraint.kind is ConstraintKind.CLEARED
        assert constraint.forced_tlds is None

    def test_continuation_carries_previous(self):
        constraint = resolve_tld_constraint("more", _AI_FORCED)
        assert constraint.kind is ConstraintKind.CARRIED
        assert constraint.forced_tlds == [".ai"]

    def test_continuation_without_previous_is_unconstrained(self):
        assert resolve_tld_constraint("more", None) == UNCONSTRAINED

    def test_new_topic_drops_previous(self):
        assert resolve_tld_constraint("a name for a bakery in Lyon", _AI_FORCED) == UNCONSTRAINED


class TestInterpretTurn:
    def test_hard_cap_and_forced_tld(self):
        intent = interpret_turn("give me only 5 names in .ai", Mode.BRAINSTORM)
        assert intent.mode is Mode.BRAINSTORM
        assert intent.requested_count == 5
        assert intent.constraint.forced_tlds == [".ai"]

    def test_default_brainstorm_has_no_count(self):
        intent = interpret_turn("I need a B2B SaaS name", Mode.BRAINSTORM)
        assert intent.requested_count is None
        assert intent.constraint == UNCONSTRAINED

    def test_check_turn_is_unconstrained(self):
        intent = interpret_turn("check foo.io", Mode.BRAINSTORM, _AI_FORCED)
        assert intent.mode is Mode.CHECK
        assert intent.constraint == UNCONSTRAINED

    def test_constraint_does_not_survive_check_turn(self):
        intent = interpret_turn("suggest more names", Mode.CHECK, _AI_FORCED)
        assert intent.mode is Mode.BRAINSTORM
        assert intent.constraint == UNCONSTRAINED

    def test_constraint_survives_consecutive_brainstorm_turns(self):
        intent = interpret_turn("more", Mode.BRAINSTORM, _AI_FORCED)
        assert intent.constraint.kind is ConstraintKind.CARRIED
