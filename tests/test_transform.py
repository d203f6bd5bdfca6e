from core.quote_table.models import RawRow
from core.quote_table.transform import transform


def _row(quote, *tags):
    return RawRow.from_values(quote, list(tags))


def test_every_row_becomes_one_record_in_order():
    rows = [_row("a"), _row(""), _row("a", "x"), _row(None)]

    result = transform(rows)

    assert len(result.records) == len(rows)
    assert [r.quote for r in result.records] == ["a", "", "a", ""]


def test_quote_is_kept_verbatim():
    result = transform([_row("  padded quote \t")])
    assert result.records[0].quote == "  padded quote \t"


def test_blank_tag_slots_are_dropped_and_order_kept():
    row = _row("q", "a", "", "  ", "b", None, "c", "", "d")

    result = transform([row])

    assert result.records[0].tags == ["a", "b", "c", "d"]


def test_tags_are_not_trimmed_or_deduplicated_within_a_row():
    result = transform([_row("q", " a", "a", " a")])
    assert result.records[0].tags == [" a", "a", " a"]
    assert result.tag_index == [" a", "a"]


def test_tag_index_is_first_seen_and_unique():
    rows = [_row("1", "x", "y"), _row("2", "y", "z"), _row("3", "x")]

    result = transform(rows)

    assert result.tag_index == ["x", "y", "z"]


def test_tag_index_is_case_sensitive():
    result = transform([_row("1", "Tag"), _row("2", "tag")])
    assert result.tag_index == ["Tag", "tag"]


def test_empty_input():
    result = transform([])
    assert result.records == []
    assert result.tag_index == []


def test_row_without_tags_contributes_nothing_to_index():
    rows = [_row("only quote", "", "", "", "", "", "", "", ""), _row("tagged", "t")]

    result = transform(rows)

    assert result.records[0].tags == []
    assert result.tag_index == ["t"]


def test_repeated_runs_give_identical_results():
    rows = [_row("1", "x", "y"), _row("2", "y", "z")]

    first = transform(rows)
    second = transform(rows)

    assert first == second
    assert first is not second


def test_accepts_generators():
    result = transform(_row(str(i), "even" if i % 2 == 0 else "odd") for i in range(4))
    assert len(result.records) == 4
    assert result.tag_index == ["even", "odd"]
