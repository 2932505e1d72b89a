"""Incremental sentence segmentation of a streamed reply."""

from __future__ import annotations

from coach_voice.config.pipeline import SENTENCE_BOUNDARY_RE


class SentenceBuffer:
    """Accumulates text deltas and releases complete sentences.

    A sentence is complete once its terminal punctuation is followed by
    whitespace, or at a blank line. Whatever remains at the end of the stream
    comes out of `flush()`.
    """

    def __init__(self) -> None:
        self._buffer = ""

    @property
    def pending(self) -> str:
        return self._buffer

    def feed(self, text: str) -> list[str]:
        self._buffer += text
        sentences: list[str] = []
        while True:
            match = SENTENCE_BOUNDARY_RE.search(self._buffer)
            if match is None:
                break
            sentence = self._buffer[: match.end()].strip()
            self._buffer = self._buffer[match.end() :]
            if sentence:
                sentences.append(sentence)
        return sentences

    def flush(self) -> str | None:
        rest = self._buffer.strip()
        self._buffer = ""
        return rest or None


__all__ = ["SentenceBuffer"]
