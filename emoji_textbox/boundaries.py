"""
Text boundary classification.
Finds word, sentence and line breaks in a run of text.
"""

from collections import namedtuple

WORD_BOUNDARY = "word"
SENTENCE_BOUNDARY = "sentence"
LINE_BOUNDARY = "line"
EOF_BOUNDARY = "eof"

# kind: one of the *_BOUNDARY constants
# pos: offset of the break marker, relative to the start of the classified range
# size: length of the break marker (0 for EOF)
Boundary = namedtuple("Boundary", ["kind", "pos", "size"])

NEWLINES = "\n\r\v\f\x85\u2028\u2029"
SENTENCE_END = ".!?…"
# Closing quotes and brackets that may follow sentence-ending punctuation
CLOSERS = "\"')]}’”»"


def is_whitespace(ch):
    """
    Check if a character is whitespace (including newlines).

    :param ch: Single character
    :return: True if ch is whitespace
    """
    return ch.isspace()


def is_newline(ch):
    return ch in NEWLINES


def _ends_sentence(text, pos, start):
    i = pos - 1
    while start <= i and text[i] in CLOSERS:
        i -= 1
    return start <= i and text[i] in SENTENCE_END


def classify(text, start=0, end=None):
    """
    Classify the break points in text[start:end].

    Every newline is a line boundary of its own ("\\r\\n" counts as one of size 2).
    A run of other whitespace is a sentence boundary when it follows sentence-ending
    punctuation and a word boundary otherwise. The list always ends with an EOF
    boundary of size 0 at end - start.

    :param text: Text to classify
    :param start: Start of the range to classify
    :param end: End of the range to classify (default: len(text))
    :return: List of Boundary, ordered by position
    """
    if end is None:
        end = len(text)

    boundaries = []
    i = start
    while i < end:
        ch = text[i]
        if is_newline(ch):
            size = 2 if ch == "\r" and i + 1 < end and text[i + 1] == "\n" else 1
            boundaries.append(Boundary(LINE_BOUNDARY, i - start, size))
            i += size
        elif is_whitespace(ch):
            j = i + 1
            while j < end and is_whitespace(text[j]) and not is_newline(text[j]):
                j += 1
            kind = SENTENCE_BOUNDARY if _ends_sentence(text, i, start) else WORD_BOUNDARY
            boundaries.append(Boundary(kind, i - start, j - i))
            i = j
        else:
            i += 1

    boundaries.append(Boundary(EOF_BOUNDARY, end - start, 0))
    return boundaries


def is_hard_break(kind):
    """True for boundaries that end a sentence or a line."""
    return kind == LINE_BOUNDARY or kind == SENTENCE_BOUNDARY
