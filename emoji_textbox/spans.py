"""
Text spans: uniformly styled slices of the rich text buffer, or single emoji.
"""

from dataclasses import dataclass, field, replace

from .boundaries import EOF_BOUNDARY, Boundary, classify, is_hard_break
from .config import EMOJI_ADVANCE


@dataclass
class TextSpan:
    """
    A run of text in one font face, or a single emoji.

    :param face: FontFace used to measure and draw the span
    :param text: Span text (emptied for emoji spans after placement extraction)
    :param start: Offset of the span in the rich text buffer
    :param width: Advance width in points
    :param boundaries: Break points within text, ending with an EOF boundary
    :param is_emoji: True for emoji spans
    :param dx: Horizontal offset within its line, set by layout
    """

    face: object
    text: str
    start: int
    width: float
    boundaries: list = field(default_factory=list)
    is_emoji: bool = False
    word_spacing: float = 0.0
    sentence_spacing: float = 0.0
    glyph_spacing: float = 0.0
    dx: float = 0.0

    @property
    def end(self):
        return self.start + len(self.text)

    def copy(self, **changes):
        return replace(self, **changes)

    def is_continuable(self):
        """
        Whether text appended after this span, in the same face, may extend it.

        True when the boundary before EOF is a soft (word) break, or when the span
        is plain text without any internal break.
        """
        if 1 < len(self.boundaries):
            return not is_hard_break(self.boundaries[-2].kind)
        return not self.is_emoji


def new_text_span(face, text, start, classifier=classify):
    """
    Create a span for text[start:].

    :param face: FontFace of the span
    :param text: Buffer contents up to the end of the span
    :param start: Start offset of the span in text
    :param classifier: Boundary classifier
    :return: TextSpan
    """
    s = text[start:]
    return TextSpan(
        face=face,
        text=s,
        start=start,
        width=face.text_width(s),
        boundaries=classifier(s, 0, len(s)),
    )


def new_emoji_span(face, emj, start=0):
    """
    Create a span holding a single emoji.

    The width is a fixed fraction of the font size, independent of the font's glyphs.

    :param face: FontFace of the span
    :param emj: Emoji text
    :param start: Offset of the emoji in the rich text buffer
    :return: TextSpan with is_emoji set
    """
    return TextSpan(
        face=face,
        text=emj,
        start=start,
        width=face.size * face.scale * EMOJI_ADVANCE,
        boundaries=[Boundary(EOF_BOUNDARY, len(emj), 0)],
        is_emoji=True,
    )
