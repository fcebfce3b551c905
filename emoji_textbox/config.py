"""
Configuration constants for emoji text layout and rendering.
"""

# Default font face, also used in place of fonts that are not registered
DEFAULT_FONT_NAME = "Helvetica"
DEFAULT_FONT_SIZE = 12

# Horizontal advance of an emoji, as a fraction of font size * scale
EMOJI_ADVANCE = 0.9

# Inset applied to emoji placements so the glyph sits centered in its advance
EMOJI_INSET = 0.05

# Portion of the emoji image drawn below the baseline
EMOJI_IMAGE_DESCENT = 0.15

# Twemoji PNG images, keyed by dash-separated hex codepoints
TWEMOJI_URL = "https://cdn.jsdelivr.net/gh/twitter/twemoji@14.0.2/assets/72x72/{codepoint}.png"
