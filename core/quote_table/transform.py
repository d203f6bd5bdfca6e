from __future__ import annotations

from typing import Iterable, List, Optional, Sequence

from .models import ConversionResult, QuoteRecord, RawRow


def _is_blank(value: Optional[str]) -> bool:
    return value is None or value.strip() == ""


def _filter_tags(row: RawRow) -> List[str]:
    """tag1〜tag8 の順で、空・空白のみ・未指定のスロットを除いたタグ列

    行内での重複は取り除かない。
    """
    return [tag for tag in row.tag_slots() if not _is_blank(tag)]


def _build_tag_index(records: Sequence[QuoteRecord]) -> List[str]:
    """全レコードのタグを出現順に走査し、初出のものだけを残す"""
    seen = set()
    tag_index: List[str] = []
    for record in records:
        for tag in record.tags:
            if tag in seen:
                continue
            seen.add(tag)
            tag_index.append(tag)
    return tag_index


def transform(raw_rows: Iterable[RawRow]) -> ConversionResult:
    """RawRow 列を QuoteRecord 列とタグ一覧に変換する

    行は捨てない（タグ 0 件・空セリフでも 1 レコード出力する）。
    入力以外の状態を持たないので、同じ入力には常に同じ結果を返す。
    """
    records = [
        QuoteRecord(quote=row.quote if row.quote is not None else "", tags=_filter_tags(row))
        for row in raw_rows
    ]
    return ConversionResult(records=records, tag_index=_build_tag_index(records))
