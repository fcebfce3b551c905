"""
Rich text with embedded emoji.

RichText accumulates chunks of text in different font faces, splits out emoji,
and fits the result into a box. Emoji spans are returned separately as Emoji
placements after layout so they can be drawn as images, and their text is
blanked so the text renderer skips them.
"""

import logging
from dataclasses import dataclass

from reportlab.lib.enums import TA_LEFT

from .boundaries import EOF_BOUNDARY, classify, is_hard_break, is_whitespace
from .config import EMOJI_INSET
from .emoji_lexer import EMOJI_SEGMENT, TEXT_SEGMENT, lex_emoji
from .layout import VA_TOP, layout_spans
from .spans import new_emoji_span, new_text_span

_LOGGER = logging.getLogger(__name__)


@dataclass
class Emoji:
    """Placement of an emoji glyph: baseline position and size in points."""

    text: str
    x: float
    y: float
    scale: float


class RichText:
    """
    Builds up spans of text in different font faces for layout.

    :param lexer: Callable returning LexSegments for a chunk (default: lex_emoji)
    :param classifier: Boundary classifier (default: boundaries.classify)
    """

    def __init__(self, lexer=lex_emoji, classifier=classify):
        self.lexer = lexer
        self.classifier = classifier
        self.text = ""
        self.spans = []
        self.fonts = set()

        # face of the last span and whether same-face text may extend it
        self._last_face = None
        self._last_continuable = False

    def _push(self, span):
        self.spans.append(span)
        self._track(span)

    def _replace_last(self, span):
        self.spans[-1] = span
        self._track(span)

    def _track(self, span):
        self._last_face = span.face
        self._last_continuable = span.is_continuable()

    def _can_extend(self, face):
        return bool(self.spans) and self._last_face == face and self._last_continuable

    def add(self, face, s):
        """
        Append a chunk of text in the given font face.

        If the buffer ends in whitespace and the chunk starts with whitespace, the
        chunk's first character is dropped. Text that continues a sentence across
        chunks in the same face extends the previous span instead of starting a
        new one.

        :param face: FontFace for the chunk
        :param s: Text to append
        :return: self
        """
        if s and self.text and is_whitespace(self.text[-1]) and is_whitespace(s[0]):
            s = s[1:]

        start = len(self.text)
        self.text += s

        for segment in self.lexer(s):
            if segment.kind == TEXT_SEGMENT:
                self._add_text_run(face, segment.text, start)
            elif segment.kind == EMOJI_SEGMENT:
                self._push(new_emoji_span(face, segment.text, start))
            start += len(segment.text)

        self.fonts.add(face)
        _LOGGER.debug(f"Added {len(s)} chars in {face!r}: {len(self.spans)} spans")
        return self

    def _add_text_run(self, face, txt, start):
        i = 0
        for boundary in self.classifier(txt, 0, len(txt)):
            if not (is_hard_break(boundary.kind) or boundary.kind == EOF_BOUNDARY):
                continue

            j = boundary.pos + boundary.size
            if i < j:
                if i == 0 and not is_hard_break(boundary.kind) and self._can_extend(face):
                    prev = self.spans[-1]
                    self._replace_last(new_text_span(face, self.text[: start + j], prev.start, self.classifier))
                else:
                    self._push(new_text_span(face, self.text[: start + j], start + i, self.classifier))
            i = j

    def to_text(self, width=0.0, height=0.0, halign=TA_LEFT, valign=VA_TOP, indent=0.0, line_stretch=0.0):
        """
        Fit the added spans into a box and extract the emoji placements.

        :param width: Box width, 0 for no limit
        :param height: Box height, 0 for no limit
        :param halign: TA_LEFT, TA_CENTER, TA_RIGHT or TA_JUSTIFY
        :param valign: VA_TOP, VA_MIDDLE, VA_BOTTOM or VA_JUSTIFY
        :param indent: Indentation of the first line
        :param line_stretch: Extra line distance as a fraction of the line height
        :return: (Text or None, list of Emoji)
        """
        text = layout_spans(
            self.spans, width, height, halign, valign, indent, line_stretch, fonts=self.fonts, classifier=self.classifier
        )
        return extract_emojis(text)


def extract_emojis(text):
    """
    Collect the emoji placements of a laid-out text and blank the emoji spans.

    Placements are returned in line order, then span order within each line.

    :param text: Text from layout_spans, or None
    :return: (text, list of Emoji)
    """
    if text is None or len(text.lines) == 0:
        return text, []

    emojis = []
    for line in text.lines:
        for j, span in enumerate(line.spans):
            if not span.is_emoji:
                continue
            em = span.face.size * span.face.scale
            emojis.append(Emoji(text=span.text, x=span.dx + em * EMOJI_INSET, y=line.y, scale=em))
            line.spans[j] = span.copy(text="")

    _LOGGER.debug(f"Extracted {len(emojis)} emoji placements from {len(text.lines)} lines")
    return text, emojis


def new_emoji_text_box(face, s, width=0.0, height=0.0, halign=TA_LEFT, valign=VA_TOP, indent=0.0, line_stretch=0.0, lexer=lex_emoji):
    """
    Lay out a single string in one font face.

    :return: (Text or None, list of Emoji)
    """
    return RichText(lexer).add(face, s).to_text(width, height, halign, valign, indent, line_stretch)
