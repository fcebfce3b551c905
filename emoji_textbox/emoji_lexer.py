"""
Emoji lexer.
Splits text into alternating plain-text runs and emoji runs.
"""

from collections import namedtuple

import emoji

TEXT_SEGMENT = "text"
EMOJI_SEGMENT = "emoji"

LexSegment = namedtuple("LexSegment", ["kind", "text"])

VARIATION_SELECTOR_16 = "\ufe0f"


def lex_emoji(text):
    """
    Split text into text and emoji segments.

    Segments are yielded left to right and together cover the whole text. Each
    emoji (including ZWJ sequences, skin tones and flags) is its own segment; a
    trailing U+FE0F variation selector is kept with the emoji it modifies.

    :param text: Text to split
    :return: Generator of LexSegment
    """
    pos = 0
    for item in emoji.emoji_list(text):
        start = item["match_start"]
        end = item["match_end"]
        if start < pos:
            # overlaps a variation selector already folded into the previous emoji
            continue

        if end < len(text) and text[end] == VARIATION_SELECTOR_16:
            end += 1

        if pos < start:
            yield LexSegment(TEXT_SEGMENT, text[pos:start])
        yield LexSegment(EMOJI_SEGMENT, text[start:end])
        pos = end

    if pos < len(text):
        yield LexSegment(TEXT_SEGMENT, text[pos:])


def contains_emoji(text):
    """
    Check if text contains at least one emoji.

    :param text: Text to check
    :return: True if an emoji was found
    """
    return bool(emoji.emoji_list(text))
