"""
Command line entry point: render text with emoji into a box on a PDF page.
"""

import argparse
import logging

from reportlab.lib.enums import TA_CENTER, TA_JUSTIFY, TA_LEFT, TA_RIGHT
from reportlab.lib.pagesizes import A6
from reportlab.lib.units import mm
from reportlab.pdfgen import canvas

from .config import DEFAULT_FONT_NAME, DEFAULT_FONT_SIZE
from .emoji_images import set_emoji_cache_dir
from .font_face import FontFace, is_font_registered, register_font
from .layout import VA_BOTTOM, VA_JUSTIFY, VA_MIDDLE, VA_TOP
from .rich_text import RichText
from .render import render_text_box
from .woff2 import FontContainerError

HALIGN = {"left": TA_LEFT, "center": TA_CENTER, "right": TA_RIGHT, "justify": TA_JUSTIFY}
VALIGN = {"top": VA_TOP, "middle": VA_MIDDLE, "bottom": VA_BOTTOM, "justify": VA_JUSTIFY}

MARGIN = 10 * mm


def build_parser():
    parser = argparse.ArgumentParser(description="Lay out text with emoji into a box and render it to PDF")
    parser.add_argument("text", help="Text to render")
    parser.add_argument("-o", "--output", default="textbox.pdf", help="Output PDF (default: textbox.pdf)")
    parser.add_argument("--font", default=DEFAULT_FONT_NAME, help="ReportLab font name or path to a .ttf file")
    parser.add_argument("--size", type=float, default=DEFAULT_FONT_SIZE, help="Font size in points")
    parser.add_argument("--color", default="black", help="Text color (name, hex or r,g,b)")
    parser.add_argument("--width", type=float, default=0.0, help="Box width in mm (0: page width minus margins)")
    parser.add_argument("--height", type=float, default=0.0, help="Box height in mm (0: no limit)")
    parser.add_argument("--halign", choices=sorted(HALIGN), default="left")
    parser.add_argument("--valign", choices=sorted(VALIGN), default="top")
    parser.add_argument("--indent", type=float, default=0.0, help="First line indent in mm")
    parser.add_argument("--line-stretch", type=float, default=0.0, help="Extra line distance (fraction of line height)")
    parser.add_argument("--cache-dir", help="Directory for downloaded emoji images")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.cache_dir:
        set_emoji_cache_dir(args.cache_dir)

    font_name = args.font
    if font_name.lower().endswith((".ttf", ".woff2")):
        try:
            font_name = register_font("CustomFont", font_name)
        except (FontContainerError, OSError) as e:
            parser.error(f"cannot load font {args.font}: {e}")
    elif not is_font_registered(font_name):
        parser.error(f"unknown font {font_name}: pass a .ttf file or a standard PDF font name")

    page_width, page_height = A6
    width = args.width * mm if args.width else page_width - 2 * MARGIN
    height = args.height * mm

    face = FontFace(font_name, args.size, color=args.color)
    rich_text = RichText().add(face, args.text.replace("\\n", "\n"))

    c = canvas.Canvas(args.output, pagesize=A6)
    text, emojis = render_text_box(
        c,
        rich_text,
        MARGIN,
        page_height - MARGIN,
        width,
        height,
        HALIGN[args.halign],
        VALIGN[args.valign],
        args.indent * mm,
        args.line_stretch,
    )
    c.save()

    for e in emojis:
        print(f"{e.text}\tx={e.x:.2f}\ty={e.y:.2f}\tscale={e.scale:.2f}")
    print(f"Saved {args.output} ({len(text.lines) if text else 0} lines, {len(emojis)} emoji)")
    return 0
