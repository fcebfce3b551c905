"""
Font faces for rich text layout.

A FontFace pairs a ReportLab font name with a size, a scale factor and a color.
Widths and vertical metrics come from ReportLab's pdfmetrics, so any standard
PDF font (Helvetica, Times-Roman, ...) or a TrueType font registered with
register_font() can be used. Faces naming a font that ReportLab does not know
are measured and drawn with DEFAULT_FONT_NAME instead.
"""

import logging
import os

from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFont

from .config import DEFAULT_FONT_NAME, DEFAULT_FONT_SIZE
from .woff2 import FontContainerError, is_woff2, parse_woff2

_LOGGER = logging.getLogger(__name__)

# Unknown font name -> font used in its place
_SUBSTITUTED_FONTS = {}


class FontFace:
    """
    Styling reference attached to every span.

    :param name: Registered ReportLab font name
    :param size: Font size in points
    :param scale: Extra scale factor applied to size when measuring and drawing
    :param color: Color name, hex code or rgb() string (see render.get_color_rgb)
    """

    def __init__(self, name=DEFAULT_FONT_NAME, size=DEFAULT_FONT_SIZE, scale=1.0, color="black"):
        self.name = name
        self.size = size
        self.scale = scale
        self.color = color

    def _key(self):
        return (self.name, self.size, self.scale, self.color)

    def __eq__(self, other):
        if not isinstance(other, FontFace):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self):
        return hash(self._key())

    def __repr__(self):
        return f"FontFace({self.name!r}, size={self.size}, scale={self.scale}, color={self.color!r})"

    def equals(self, other):
        return self == other

    @property
    def em(self):
        """Effective size in points (size * scale)."""
        return self.size * self.scale

    @property
    def font_name(self):
        """Name of the ReportLab font used to measure and draw this face."""
        return resolve_font_name(self.name)

    def text_width(self, text):
        """
        Measure the advance width of text in this face.

        :param text: Text to measure
        :return: Width in points
        """
        if not text:
            return 0.0
        return pdfmetrics.stringWidth(text, self.font_name, self.size) * self.scale

    def metrics(self):
        """
        Get the ascent and descent of this face.

        :return: (ascent, descent) in points, both positive
        """
        face = pdfmetrics.getFont(self.font_name).face
        ascent = face.ascent * self.em / 1000
        descent = -face.descent * self.em / 1000
        return ascent, descent

    @property
    def ascent(self):
        return self.metrics()[0]

    @property
    def descent(self):
        return self.metrics()[1]

    def line_height(self):
        """Height of a line set in this face, without extra leading."""
        ascent, descent = self.metrics()
        return ascent + descent


def is_font_registered(font_name):
    """
    Check if a font name is known to ReportLab.

    :param font_name: Font name
    :return: True if pdfmetrics can resolve the name
    """
    try:
        pdfmetrics.getFont(font_name)
        return True
    except Exception:
        return False


def resolve_font_name(font_name):
    """
    Get a font name ReportLab can measure and draw with.

    Names that are not registered are replaced by DEFAULT_FONT_NAME; the warning
    is logged once per name.

    :param font_name: Requested font name
    :return: font_name, or DEFAULT_FONT_NAME if font_name is unknown
    """
    if font_name in _SUBSTITUTED_FONTS:
        return _SUBSTITUTED_FONTS[font_name]
    if is_font_registered(font_name):
        return font_name

    _LOGGER.warning(f"Font '{font_name}' is not registered, using '{DEFAULT_FONT_NAME}' instead")
    _SUBSTITUTED_FONTS[font_name] = DEFAULT_FONT_NAME
    return DEFAULT_FONT_NAME


def register_font(font_name, font_path):
    """
    Register a TrueType font file with ReportLab.

    WOFF2 files are validated and then rejected, since ReportLab can only embed
    uncompressed TrueType fonts.

    :param font_name: Name to register the font as
    :param font_path: Path to the font file
    :return: Registered font name
    :raises FontContainerError: If the file is a WOFF2 container
    """
    if is_font_registered(font_name):
        _LOGGER.info(f"Font '{font_name}' is already registered")
        return font_name

    with open(font_path, "rb") as f:
        data = f.read()

    if is_woff2(data):
        parse_woff2(data)
        raise FontContainerError(
            f"{os.path.basename(font_path)}: WOFF2 fonts must be decompressed to TrueType before registration"
        )

    pdfmetrics.registerFont(TTFont(font_name, font_path))
    _SUBSTITUTED_FONTS.pop(font_name, None)
    _LOGGER.info(f"Registered font '{font_name}' from: {font_path}")
    return font_name
