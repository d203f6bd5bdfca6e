import pytest

from core.quote_table.decoders import Decoder, DecoderConfig, HeaderDecoder, get_decoder
from core.quote_table.errors import DecodeError


def test_header_decoder_reads_english_header(csv_a):
    rows = get_decoder("header").decode(csv_a)

    assert [r.quote for r in rows] == ["Good morning!", "Well, well."]
    assert rows[0].tag_slots()[:3] == ("greeting", "morning", "")


def test_header_decoder_reads_japanese_header(csv_b):
    rows = get_decoder("header").decode(csv_b)

    assert [r.quote for r in rows] == ["おはよう", "こんばんは", ""]
    assert rows[1].tag2 == "night"


def test_header_decoder_strips_bom_and_ignores_unknown_columns():
    text = "\ufeffid,Quote,Tag2,note\n1,hi,second,ignored\n"

    rows = get_decoder("header").decode(text)

    assert len(rows) == 1
    assert rows[0].quote == "hi"
    assert rows[0].tag1 is None
    assert rows[0].tag2 == "second"


def test_header_decoder_short_rows_leave_slots_absent():
    rows = get_decoder("header").decode("quote,tag1,tag2\nhello\n")
    assert rows[0].quote == "hello"
    assert rows[0].tag1 is None


def test_header_decoder_skips_blank_lines():
    rows = get_decoder("header").decode("\nquote,tag1\n\na,b\n\nc,d\n")
    assert [r.quote for r in rows] == ["a", "c"]


def test_header_decoder_keeps_quoted_newlines():
    rows = get_decoder("header").decode('quote,tag1\n"line1\nline2",t\n')
    assert rows[0].quote == "line1\nline2"


def test_header_decoder_custom_delimiter():
    rows = get_decoder("header", delimiter=";").decode("quote;tag1\na,b;c\n")
    assert rows[0].quote == "a,b"
    assert rows[0].tag1 == "c"


@pytest.mark.parametrize(
    "text, message",
    [
        ("", "missing header"),
        ("\n\n", "missing header"),
        ("tag1,tag2\nx,y\n", "missing quote column"),
        ("quote,セリフ\na,b\n", "duplicate column"),
    ],
)
def test_header_decoder_rejects_bad_headers(text, message):
    with pytest.raises(DecodeError) as excinfo:
        get_decoder("header").decode(text)
    assert message in str(excinfo.value)


def test_header_decoder_rejects_row_longer_than_header():
    with pytest.raises(DecodeError) as excinfo:
        get_decoder("header").decode("quote,tag1\na,b\nc,d,e\n")
    assert excinfo.value.line == 3


def test_header_decoder_rejects_unterminated_quote():
    with pytest.raises(DecodeError) as excinfo:
        get_decoder("header").decode('quote,tag1\n"never closed,t\n')
    assert "malformed CSV" in excinfo.value.message


def test_positional_decoder_skips_header_row():
    rows = get_decoder("positional").decode("whatever,names\nq1,a,b\nq2\n")

    assert [r.quote for r in rows] == ["q1", "q2"]
    assert rows[0].tag_slots()[:2] == ("a", "b")
    assert rows[1].tag_slots() == (None,) * 8


def test_positional_decoder_without_header():
    rows = get_decoder("positional", has_header=False).decode("q1,a\n")
    assert rows[0].quote == "q1"
    assert rows[0].tag1 == "a"


def test_positional_decoder_rejects_too_many_columns():
    with pytest.raises(DecodeError) as excinfo:
        get_decoder("positional", has_header=False).decode("q," + ",".join("t" * 9) + "\n")
    assert excinfo.value.line == 1


def test_unknown_decoder_name():
    with pytest.raises(ValueError):
        get_decoder("xml")


def test_custom_quote_char_keeps_delimiter_inside_quotes():
    rows = get_decoder("header", quote_char="'").decode("quote,tag1\n'a, b',\"t\"\n")
    assert rows[0].quote == "a, b"
    assert rows[0].tag1 == '"t"'


@pytest.mark.parametrize(
    "delimiter, quote_char",
    [('"', '"'), ("\n", '"'), ("\r", '"'), (",", "\n"), (";;", '"'), (",", "")],
)
def test_get_decoder_rejects_unusable_dialect(delimiter, quote_char):
    with pytest.raises(ValueError):
        get_decoder("header", delimiter=delimiter, quote_char=quote_char)


def test_decoder_base_class_is_abstract():
    with pytest.raises(TypeError):
        Decoder(DecoderConfig())
    assert isinstance(get_decoder("header"), HeaderDecoder)
