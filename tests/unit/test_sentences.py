from __future__ import annotations

from coach_voice.pipeline.sentences import SentenceBuffer
from coach_voice.pipeline.commands import is_deactivation_command


def test_sentences_are_released_at_punctuation_followed_by_space() -> None:
    buf = SentenceBuffer()
    assert buf.feed("Hello there") == []
    assert buf.feed(". How are") == ["Hello there."]
    assert buf.feed(" you? I am") == ["How are you?"]
    assert buf.pending == "I am"
    assert buf.flush() == "I am"
    assert buf.flush() is None


def test_blank_line_is_a_boundary() -> None:
    buf = SentenceBuffer()
    assert buf.feed("First idea\n\nSecond idea") == ["First idea"]
    assert buf.flush() == "Second idea"


def test_trailing_punctuation_waits_for_whitespace() -> None:
    buf = SentenceBuffer()
    assert buf.feed("Done.") == []
    assert buf.feed(" Next!!  ") == ["Done.", "Next!!"]
    assert buf.flush() is None


def test_closing_quote_stays_with_sentence() -> None:
    buf = SentenceBuffer()
    assert buf.feed('He said "ship it." Then') == ['He said "ship it."']


def test_deactivation_phrases_match_case_insensitive_substrings() -> None:
    assert is_deactivation_command("Please STOP LISTENING.")
    assert is_deactivation_command("could you turn off now")
    assert is_deactivation_command("deactivate")
    assert not is_deactivation_command("what should I do today?")
    assert not is_deactivation_command("")
