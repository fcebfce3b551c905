"""
Drawing laid-out rich text on a ReportLab canvas.

Text spans are drawn with the canvas' text objects; emoji placements are drawn
as Twemoji images, falling back to the plain character when no image is available.
"""

import logging
import re

from reportlab.lib.enums import TA_LEFT

from .boundaries import NEWLINES
from .config import EMOJI_ADVANCE, EMOJI_IMAGE_DESCENT
from .emoji_images import precache_emojis
from .layout import VA_TOP

_LOGGER = logging.getLogger(__name__)

# Color mapping from color names to RGB tuples
COLOR_MAP = {
    "black": (0, 0, 0),
    "white": (1, 1, 1),
    "gray": (0.5, 0.5, 0.5),
    "red": (1, 0, 0),
    "blue": (0, 0, 1),
    "green": (0, 0.5, 0),
    "navy": (0, 0, 0.5),
    "darkred": (0.5, 0, 0),
    "purple": (0.5, 0, 0.5),
    "brown": (0.6, 0.4, 0.2),
    "orange": (1, 0.65, 0),
}

_RGB_RE = re.compile(r"rgb\s*\(\s*(\d+)\s*,\s*(\d+)\s*,\s*(\d+)\s*\)")


def get_color_rgb(color_input):
    """
    Convert color input to RGB tuple.
    Supports:
    - Color names: 'black', 'red', 'blue', etc.
    - Hex codes: '#FF0000', 'FF0000'
    - RGB values: '255,0,0', 'rgb(255,0,0)'

    :param color_input: Color string in various formats
    :return: RGB tuple (r, g, b) where each value is between 0 and 1
    """
    if not color_input or not isinstance(color_input, str):
        return (0, 0, 0)

    color_input = color_input.strip().lower()
    if color_input in COLOR_MAP:
        return COLOR_MAP[color_input]

    hex_color = color_input.lstrip("#")
    if len(hex_color) == 6 and all(c in "0123456789abcdef" for c in hex_color):
        return tuple(int(hex_color[i : i + 2], 16) / 255.0 for i in (0, 2, 4))

    match = _RGB_RE.match(color_input)
    parts = match.groups() if match else color_input.split(",")
    if len(parts) == 3:
        try:
            return tuple(max(0, min(1, int(p.strip()) / 255.0)) for p in parts)
        except ValueError:
            pass

    _LOGGER.debug(f"Unknown color {color_input!r}, using black")
    return (0, 0, 0)


def draw_text(canvas_obj, text, x, y):
    """
    Draw the text spans of a laid-out Text.

    Emoji spans blanked by extract_emojis() are skipped.

    :param canvas_obj: ReportLab canvas
    :param text: Text from RichText.to_text()
    :param x: Left edge of the box
    :param y: Top edge of the box (PDF coordinates, y up)
    """
    if text is None:
        return

    for line in text.lines:
        baseline = y - line.y
        for span in line.spans:
            s = span.text.rstrip(NEWLINES)
            if not s:
                continue
            face = span.face
            t = canvas_obj.beginText(x + span.dx, baseline)
            t.setFont(face.font_name, face.size * face.scale)
            t.setFillColorRGB(*get_color_rgb(face.color))
            if span.word_spacing:
                t.setWordSpace(span.word_spacing)
            if span.glyph_spacing:
                t.setCharSpace(span.glyph_spacing)
            t.textOut(s)
            canvas_obj.drawText(t)


def draw_emojis(canvas_obj, emojis, x, y):
    """
    Draw emoji placements as images.

    :param canvas_obj: ReportLab canvas
    :param emojis: Emoji placements from RichText.to_text()
    :param x: Left edge of the box
    :param y: Top edge of the box (PDF coordinates, y up)
    """
    images = precache_emojis(emojis)
    for e in emojis:
        size = e.scale * EMOJI_ADVANCE
        left = x + e.x
        baseline = y - e.y
        img_path = images[e.text]
        if img_path:
            canvas_obj.drawImage(
                img_path,
                left,
                baseline - e.scale * EMOJI_IMAGE_DESCENT,
                width=size,
                height=size,
                mask="auto",
            )
        else:
            # monochrome fallback
            canvas_obj.drawString(left, baseline, e.text)


def render_text_box(
    canvas_obj,
    rich_text,
    x,
    y,
    width=0.0,
    height=0.0,
    halign=TA_LEFT,
    valign=VA_TOP,
    indent=0.0,
    line_stretch=0.0,
):
    """
    Lay out rich text into a box and draw it.

    :param canvas_obj: ReportLab canvas
    :param rich_text: RichText to lay out
    :param x: Left edge of the box
    :param y: Top edge of the box (PDF coordinates, y up)
    :return: (Text or None, list of Emoji)
    """
    text, emojis = rich_text.to_text(width, height, halign, valign, indent, line_stretch)
    if text is None:
        _LOGGER.info("Nothing to draw")
        return text, emojis

    draw_text(canvas_obj, text, x, y)
    draw_emojis(canvas_obj, emojis, x, y)
    _LOGGER.info(f"Drew {len(text.lines)} lines and {len(emojis)} emoji")
    return text, emojis
