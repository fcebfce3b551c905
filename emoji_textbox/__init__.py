"""
Rich text layout with emoji.
Builds font-styled text spans, fits them into a box and extracts emoji placements
for separate rendering.
"""

from .boundaries import EOF_BOUNDARY, LINE_BOUNDARY, SENTENCE_BOUNDARY, WORD_BOUNDARY, Boundary, classify
from .emoji_images import get_emoji_image_path, precache_emojis, set_emoji_cache_dir
from .emoji_lexer import EMOJI_SEGMENT, TEXT_SEGMENT, LexSegment, lex_emoji
from .font_face import FontFace, register_font, resolve_font_name
from .layout import VA_BOTTOM, VA_JUSTIFY, VA_MIDDLE, VA_TOP, Line, Text, layout_spans
from .render import draw_emojis, draw_text, get_color_rgb, render_text_box
from .rich_text import Emoji, RichText, extract_emojis, new_emoji_text_box
from .spans import TextSpan, new_emoji_span, new_text_span
from .woff2 import FontContainerError, parse_woff2

__all__ = [
    # Span building
    'RichText',
    'Emoji',
    'extract_emojis',
    'new_emoji_text_box',
    'TextSpan',
    'new_text_span',
    'new_emoji_span',
    # Boundaries and lexing
    'Boundary',
    'classify',
    'WORD_BOUNDARY',
    'SENTENCE_BOUNDARY',
    'LINE_BOUNDARY',
    'EOF_BOUNDARY',
    'LexSegment',
    'lex_emoji',
    'TEXT_SEGMENT',
    'EMOJI_SEGMENT',
    # Fonts
    'FontFace',
    'register_font',
    'resolve_font_name',
    'FontContainerError',
    'parse_woff2',
    # Layout
    'Text',
    'Line',
    'layout_spans',
    'VA_TOP',
    'VA_MIDDLE',
    'VA_BOTTOM',
    'VA_JUSTIFY',
    # Rendering
    'get_color_rgb',
    'draw_text',
    'draw_emojis',
    'render_text_box',
    'set_emoji_cache_dir',
    'get_emoji_image_path',
    'precache_emojis',
]
