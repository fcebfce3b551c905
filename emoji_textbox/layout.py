"""
Box-fitting layout for rich text spans.

Spans are broken at their word, sentence and line boundaries and filled greedily
into lines of the requested width. Line positions are measured from the top-left
corner of the box with y growing downwards; Line.y is the baseline of the line.
"""

import logging
from collections import namedtuple
from dataclasses import dataclass, field

from reportlab.lib.enums import TA_CENTER, TA_JUSTIFY, TA_LEFT, TA_RIGHT

from .boundaries import EOF_BOUNDARY, LINE_BOUNDARY, SENTENCE_BOUNDARY, WORD_BOUNDARY, classify

_LOGGER = logging.getLogger(__name__)

# Vertical alignment, named after ReportLab's table VALIGN values
VA_TOP = "TOP"
VA_MIDDLE = "MIDDLE"
VA_BOTTOM = "BOTTOM"
VA_JUSTIFY = "JUSTIFY"

_EPSILON = 1e-9


@dataclass
class Line:
    y: float
    spans: list = field(default_factory=list)
    width: float = 0.0
    ascent: float = 0.0
    descent: float = 0.0

    @property
    def text(self):
        return "".join(span.text for span in self.spans)


@dataclass
class Text:
    """
    Result of fitting spans into a box.

    :param lines: Lines from top to bottom
    :param width: Box width, or the widest line when the width was unconstrained
    :param height: Box height, or the height of all lines when unconstrained
    :param fonts: Font faces referenced by the laid-out text
    """

    lines: list
    width: float
    height: float
    fonts: set = field(default_factory=set)

    def __len__(self):
        return len(self.lines)

    def plain_text(self):
        return "".join(line.text for line in self.lines)

    def content_height(self):
        if not self.lines:
            return 0.0
        last = self.lines[-1]
        return last.y + last.descent


# A slice of one span, ending at one of the span's boundaries.
# trail is the length of the whitespace/newline marker at the end of text.
_Piece = namedtuple("_Piece", ["span", "offset", "text", "kind", "trail"])


def _split_span(span):
    if span.is_emoji:
        yield _Piece(span, 0, span.text, EOF_BOUNDARY, 0)
        return

    i = 0
    for boundary in span.boundaries:
        j = boundary.pos + boundary.size
        if i < j:
            yield _Piece(span, i, span.text[i:j], boundary.kind, boundary.size)
        i = j


def _piece_width(piece):
    if piece.span.is_emoji:
        return piece.span.width
    return piece.span.face.text_width(piece.text)


def _trail_width(piece):
    if not piece.trail:
        return 0.0
    return piece.span.face.text_width(piece.text[-piece.trail :])


def _is_break(piece):
    return piece.span.is_emoji or piece.kind in (WORD_BOUNDARY, SENTENCE_BOUNDARY, LINE_BOUNDARY)


def _split_words(spans):
    """Group the pieces of all spans into unbreakable words."""
    words = []
    word = []
    for span in spans:
        for piece in _split_span(span):
            word.append(piece)
            if _is_break(piece):
                words.append(word)
                word = []
    if word:
        words.append(word)
    return words


def _fill_lines(words, width, indent):
    """
    Greedily fill words into lines.

    :return: List of (pieces, ends_paragraph)
    """
    lines = []
    current = []
    current_width = 0.0
    available = width - indent

    for word in words:
        widths = [_piece_width(p) for p in word]
        word_width = sum(widths)
        content_width = word_width - _trail_width(word[-1])

        if current and 0 < width and available + _EPSILON < current_width + content_width:
            lines.append((current, False))
            current = []
            current_width = 0.0
            available = width

        current.extend(word)
        current_width += word_width

        if word[-1].kind == LINE_BOUNDARY:
            lines.append((current, True))
            current = []
            current_width = 0.0
            available = width

    if current:
        lines.append((current, True))
    return lines


def _merge_pieces(pieces, classifier):
    """Merge consecutive pieces of the same source span into positioned span copies."""
    groups = []
    for piece in pieces:
        if groups and groups[-1][0].span is piece.span:
            groups[-1].append(piece)
        else:
            groups.append([piece])

    spans = []
    for group in groups:
        src = group[0].span
        if src.is_emoji:
            spans.append(src.copy())
            continue
        text = "".join(p.text for p in group)
        spans.append(
            src.copy(
                text=text,
                start=src.start + group[0].offset,
                width=src.face.text_width(text),
                boundaries=classifier(text, 0, len(text)),
            )
        )
    return spans


def _build_line(pieces, ends_paragraph, x0, available, halign, classifier):
    spans = _merge_pieces(pieces, classifier)

    content_width = sum(span.width for span in spans) - _trail_width(pieces[-1])
    slack = max(available - content_width, 0.0) if 0 < available else 0.0

    # word spacing is applied by the PDF viewer to every U+0020 of a span;
    # the trailing whitespace of the line does not count
    gaps = [span.text.count(" ") for span in spans]
    if pieces[-1].trail:
        gaps[-1] -= pieces[-1].text[-pieces[-1].trail :].count(" ")

    extra = 0.0
    if halign == TA_CENTER:
        x0 += slack / 2
    elif halign == TA_RIGHT:
        x0 += slack
    elif halign == TA_JUSTIFY and not ends_paragraph and 0 < sum(gaps):
        extra = slack / sum(gaps)

    x = x0
    for span, n in zip(spans, gaps):
        span.dx = x
        if extra and n:
            span.word_spacing = extra
        x += span.width + n * extra

    ascent = 0.0
    descent = 0.0
    for span in spans:
        a, d = span.face.metrics()
        ascent = max(ascent, a)
        descent = max(descent, d)

    return Line(y=0.0, spans=spans, width=x - x0 - _trail_width(pieces[-1]), ascent=ascent, descent=descent)


def layout_spans(
    spans,
    width=0.0,
    height=0.0,
    halign=TA_LEFT,
    valign=VA_TOP,
    indent=0.0,
    line_stretch=0.0,
    fonts=None,
    classifier=classify,
):
    """
    Fit spans into a box.

    :param spans: Ordered TextSpans; they are not modified
    :param width: Box width, 0 for no limit
    :param height: Box height, 0 for no limit; lines that do not fit are dropped
    :param halign: TA_LEFT, TA_CENTER, TA_RIGHT or TA_JUSTIFY
    :param valign: VA_TOP, VA_MIDDLE, VA_BOTTOM or VA_JUSTIFY
    :param indent: Indentation of the first line
    :param line_stretch: Extra line distance as a fraction of the line height
    :param fonts: Font faces to record on the result
    :param classifier: Boundary classifier the spans were built with
    :return: Text, or None if there are no spans
    """
    if not spans:
        return None

    filled = _fill_lines(_split_words(spans), width, indent)

    lines = []
    y = 0.0
    prev = None
    for n, (pieces, ends_paragraph) in enumerate(filled):
        x0 = indent if n == 0 else 0.0
        available = width - x0 if 0 < width else 0.0
        line = _build_line(pieces, ends_paragraph, x0, available, halign, classifier)

        if prev is None:
            y = line.ascent
        else:
            y += (prev.descent + line.ascent) * (1.0 + line_stretch)
        line.y = y

        if 0 < height and height + _EPSILON < y + line.descent:
            _LOGGER.debug(f"Box height {height:.1f} reached, dropping {len(filled) - n} of {len(filled)} lines")
            break
        lines.append(line)
        prev = line

    content_height = lines[-1].y + lines[-1].descent if lines else 0.0
    if 0 < height and lines:
        slack = height - content_height
        if valign == VA_MIDDLE:
            _shift_lines(lines, slack / 2)
        elif valign == VA_BOTTOM:
            _shift_lines(lines, slack)
        elif valign == VA_JUSTIFY and 1 < len(lines):
            step = slack / (len(lines) - 1)
            for i, line in enumerate(lines):
                line.y += i * step

    box_width = width if 0 < width else max((line.width + line.spans[0].dx for line in lines), default=0.0)
    box_height = height if 0 < height else content_height
    _LOGGER.debug(f"Laid out {len(spans)} spans into {len(lines)} lines ({box_width:.1f}x{box_height:.1f})")
    return Text(lines=lines, width=box_width, height=box_height, fonts=set(fonts or ()))


def _shift_lines(lines, dy):
    for line in lines:
        line.y += dy
