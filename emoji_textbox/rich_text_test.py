import pytest

from emoji_textbox.boundaries import EOF_BOUNDARY, WORD_BOUNDARY, Boundary, classify
from emoji_textbox.emoji_lexer import EMOJI_SEGMENT, TEXT_SEGMENT, LexSegment
from emoji_textbox.font_face import FontFace
from emoji_textbox.layout import Line, Text
from emoji_textbox.rich_text import RichText, extract_emojis, new_emoji_text_box
from emoji_textbox.spans import new_emoji_span, new_text_span

FACE = FontFace("Helvetica", 10)
BOLD = FontFace("Helvetica-Bold", 10)
GRIN = "\U0001F600"
PARTY = "\U0001F389"


def span_texts(rt):
    return [s.text for s in rt.spans]


def test_add_is_chainable():
    rt = RichText()
    assert rt.add(FACE, "a") is rt


def test_whitespace_collapsed_between_chunks():
    rt = RichText().add(FACE, "Hello ").add(FACE, " world")
    assert rt.text == "Hello world"
    assert span_texts(rt) == ["Hello world"]


def test_only_one_whitespace_character_dropped():
    rt = RichText().add(FACE, "a ").add(FACE, "  b")
    assert rt.text == "a  b"


def test_leading_whitespace_of_first_chunk_kept():
    rt = RichText().add(FACE, " x")
    assert rt.text == " x"


def test_buffer_length_is_sum_of_chunks_minus_collapsed():
    chunks = ["Hello ", " world", "  again", "\n", " next", GRIN, " end."]
    rt = RichText()
    for chunk in chunks:
        rt.add(FACE, chunk)
    # " world" and " next" lose their leading space
    assert len(rt.text) == sum(len(c) for c in chunks) - 2


def test_mid_sentence_chunks_merge_into_one_span():
    rt = RichText().add(FACE, "The quick bro").add(FACE, "wn fox")
    assert span_texts(rt) == ["The quick brown fox"]
    assert rt.spans[0].start == 0


def test_merge_into_single_word_span():
    rt = RichText().add(FACE, "Hel").add(FACE, "lo")
    assert span_texts(rt) == ["Hello"]


def test_no_merge_after_line_break():
    rt = RichText().add(FACE, "line one\n").add(FACE, "line two")
    assert span_texts(rt) == ["line one\n", "line two"]


def test_no_merge_after_sentence_end():
    rt = RichText().add(FACE, "Done. ").add(FACE, "Next")
    assert span_texts(rt) == ["Done. ", "Next"]


def test_no_merge_across_faces():
    rt = RichText().add(FACE, "plain ").add(BOLD, "bold")
    assert span_texts(rt) == ["plain ", "bold"]
    assert rt.spans[1].face == BOLD


def test_chunk_split_at_sentences_and_lines():
    rt = RichText().add(FACE, "One. Two\nThree")
    assert span_texts(rt) == ["One. ", "Two\n", "Three"]


def test_continuation_extends_last_segment_only():
    rt = RichText().add(FACE, "One. Two").add(FACE, " three")
    assert span_texts(rt) == ["One. ", "Two three"]
    assert rt.spans[1].start == 5


def test_chunk_starting_with_sentence_end_does_not_merge():
    # the first segment of the chunk closes at a sentence boundary
    rt = RichText().add(FACE, "Hello wor").add(FACE, "ld. Next")
    assert span_texts(rt) == ["Hello wor", "ld. ", "Next"]


def test_emoji_spans():
    rt = RichText().add(FACE, f"a{GRIN}b")
    assert span_texts(rt) == ["a", GRIN, "b"]
    assert [s.is_emoji for s in rt.spans] == [False, True, False]


def test_text_after_emoji_does_not_merge_into_it():
    rt = RichText().add(FACE, f"a{GRIN}").add(FACE, "b")
    assert span_texts(rt) == ["a", GRIN, "b"]


def test_spans_cover_buffer_without_overlap():
    rt = RichText()
    for face, chunk in [
        (FACE, "The quick "),
        (FACE, " brown fox. "),
        (BOLD, f"Jumps{GRIN} over\n"),
        (FACE, "the lazy"),
        (FACE, f" dog {PARTY}{PARTY}"),
        (FACE, ""),
        (BOLD, "!"),
    ]:
        rt.add(face, chunk)

    assert all(s.text for s in rt.spans)
    assert "".join(s.text for s in rt.spans) == rt.text
    pos = 0
    for span in rt.spans:
        assert span.start == pos
        if not span.is_emoji:
            assert rt.text[span.start : span.end] == span.text
        pos = span.end
    assert pos == len(rt.text)


def test_fonts_are_owned_per_instance():
    a = RichText().add(FACE, "x").add(BOLD, "y").add(FACE, "")
    b = RichText().add(FACE, "z")
    assert a.fonts == {FACE, BOLD}
    assert b.fonts == {FACE}


def test_injected_lexer():
    def lexer(s):
        yield LexSegment(TEXT_SEGMENT, s[:-1])
        yield LexSegment(EMOJI_SEGMENT, s[-1])

    rt = RichText(lexer=lexer).add(FACE, "ab*")
    assert span_texts(rt) == ["ab", "*"]
    assert rt.spans[1].is_emoji


def test_to_text_without_input():
    assert RichText().to_text() == (None, [])
    assert RichText().add(FACE, "").add(FACE, "").to_text(100, 100) == (None, [])


def test_to_text_extracts_and_blanks_emoji():
    text, emojis = RichText().add(FACE, f"Hi {GRIN} there {PARTY}").to_text()
    assert [e.text for e in emojis] == [GRIN, PARTY]
    emoji_spans = [s for line in text.lines for s in line.spans if s.is_emoji]
    assert len(emoji_spans) == len(emojis)
    assert all(s.text == "" for s in emoji_spans)


def test_to_text_leaves_builder_spans_intact():
    rt = RichText().add(FACE, f"Hi {GRIN}")
    rt.to_text()
    assert span_texts(rt) == ["Hi ", GRIN]


def test_emoji_placement():
    face = FontFace("Helvetica", 10, scale=2.0)
    text, emojis = RichText().add(face, f"ab {GRIN}").to_text()
    (e,) = emojis
    span = text.lines[0].spans[-1]
    assert e.x == pytest.approx(span.dx + 20 * 0.05)
    assert e.y == pytest.approx(text.lines[0].y)
    assert e.scale == pytest.approx(20.0)
    assert span.dx == pytest.approx(face.text_width("ab "))


def test_emoji_on_separate_lines():
    text, emojis = RichText().add(FACE, f"{GRIN}\n{PARTY}").to_text()
    assert len(text.lines) == 2
    assert [e.text for e in emojis] == [GRIN, PARTY]
    assert emojis[0].y < emojis[1].y


def test_extract_emojis_keeps_traversal_order():
    first = new_emoji_span(FACE, GRIN)
    first.dx = 50.0
    second = new_emoji_span(FACE, PARTY)
    second.dx = 10.0
    third = new_emoji_span(FACE, GRIN)
    third.dx = 0.0
    word = new_text_span(FACE, "word", 0)
    text = Text(
        lines=[Line(y=10.0, spans=[word, first, second]), Line(y=5.0, spans=[third])],
        width=100.0,
        height=20.0,
    )

    same, emojis = extract_emojis(text)
    assert same is text
    assert [(e.text, e.y) for e in emojis] == [(GRIN, 10.0), (PARTY, 10.0), (GRIN, 5.0)]
    assert [e.x for e in emojis] == pytest.approx([50.5, 10.5, 0.5])
    assert text.lines[0].spans[0].text == "word"
    assert [s.text for s in text.lines[0].spans[1:]] == ["", ""]


def test_extract_emojis_without_lines():
    assert extract_emojis(None) == (None, [])
    empty = Text(lines=[], width=0.0, height=0.0)
    assert extract_emojis(empty) == (empty, [])


def test_truncated_emoji_are_not_returned():
    line_height = FACE.line_height()
    text, emojis = RichText().add(FACE, f"{GRIN}\n{PARTY}").to_text(height=line_height * 1.5)
    assert len(text.lines) == 1
    assert [e.text for e in emojis] == [GRIN]


def test_new_emoji_text_box():
    text, emojis = new_emoji_text_box(FACE, f"Hello {GRIN}", width=200)
    assert text.lines[0].text == "Hello "
    assert len(emojis) == 1


def test_unregistered_face_uses_default_font():
    face = FontFace("NoSuchFont-Italic", 10)
    text, emojis = RichText().add(face, f"abc {GRIN}").to_text(width=200)
    assert text.lines[0].spans[0].width == pytest.approx(FACE.text_width("abc "))
    assert text.lines[0].ascent == pytest.approx(FACE.ascent)
    assert [e.text for e in emojis] == [GRIN]


def test_laid_out_spans_keep_builder_classifier():
    def no_word_breaks(text, start=0, end=None):
        return [b for b in classify(text, start, end) if b.kind != WORD_BOUNDARY]

    text, _ = RichText(classifier=no_word_breaks).add(FACE, "a b c").to_text()
    assert text.lines[0].spans[0].boundaries == [Boundary(EOF_BOUNDARY, 5, 0)]
