from __future__ import annotations

import csv
import io
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional

from .errors import DecodeError
from .models import TAG_SLOT_COUNT, DecoderName, RawRow, check_dialect

BOM = "\ufeff"

# 列名 -> RawRow のフィールド名
# 元データ（日本語ヘッダ）と英語ヘッダのどちらでも読めるようにする
HEADER_ALIASES: Dict[str, str] = {"quote": "quote", "セリフ": "quote"}
for _i in range(1, TAG_SLOT_COUNT + 1):
    HEADER_ALIASES[f"tag{_i}"] = f"tag{_i}"
    HEADER_ALIASES[f"タグ{_i}"] = f"tag{_i}"


@dataclass(frozen=True)
class DecoderConfig:
    """実際にデコードに用いる設定"""

    decoder: str = "header"
    delimiter: str = ","
    quote_char: str = '"'
    has_header: bool = True


# ---------------------------------------------------------------------------
# 共通ユーティリティ
# ---------------------------------------------------------------------------


def _strip_bom(text: str) -> str:
    if text.startswith(BOM):
        return text[len(BOM) :]
    return text


def _reader(text: str, cfg: DecoderConfig) -> Iterator[List[str]]:
    """csv.reader を strict で作る（クォート崩れを csv.Error として検出するため）"""
    return csv.reader(
        io.StringIO(_strip_bom(text), newline=""),
        delimiter=cfg.delimiter,
        quotechar=cfg.quote_char,
        doublequote=True,
        skipinitialspace=False,
        strict=True,
    )


def _normalize_header(name: str) -> str:
    return name.strip().lower()


class Decoder(ABC):
    """CSV テキストを RawRow 列に変換する。失敗時は DecodeError。"""

    def __init__(self, config: DecoderConfig) -> None:
        self.config = config

    @abstractmethod
    def decode(self, text: str) -> List[RawRow]:
        ...


# ---------------------------------------------------------------------------
# header: 1 行目の列名で読む
# ---------------------------------------------------------------------------


class HeaderDecoder(Decoder):
    def _resolve_columns(self, header: List[str], line: int) -> Dict[int, str]:
        """ヘッダ行から「列位置 -> フィールド名」の対応を作る（未知の列は無視）"""
        columns: Dict[int, str] = {}
        for pos, name in enumerate(header):
            field = HEADER_ALIASES.get(_normalize_header(name))
            if field is None:
                continue
            if field in columns.values():
                raise DecodeError(f"duplicate column for '{field}': '{name}'", line=line)
            columns[pos] = field

        if "quote" not in columns.values():
            raise DecodeError("missing quote column in header", line=line)
        return columns

    def decode(self, text: str) -> List[RawRow]:
        reader = _reader(text, self.config)
        rows: List[RawRow] = []
        try:
            header = next(reader, None)
            while header == []:
                header = next(reader, None)
            if header is None:
                raise DecodeError("missing header")

            columns = self._resolve_columns(header, reader.line_num)

            for row in reader:
                if not row:
                    continue
                if len(row) > len(header):
                    raise DecodeError(
                        f"row has {len(row)} fields but header has {len(header)}",
                        line=reader.line_num,
                    )
                values = {field: row[pos] for pos, field in columns.items() if pos < len(row)}
                rows.append(RawRow(**values))
        except csv.Error as exc:
            raise DecodeError(f"malformed CSV: {exc}", line=reader.line_num) from exc

        return rows


# ---------------------------------------------------------------------------
# positional: 0 列目がセリフ、1〜8 列目がタグ
# ---------------------------------------------------------------------------


class PositionalDecoder(Decoder):
    def decode(self, text: str) -> List[RawRow]:
        reader = _reader(text, self.config)
        rows: List[RawRow] = []
        skip_header = self.config.has_header
        max_fields = 1 + TAG_SLOT_COUNT
        try:
            for row in reader:
                if not row:
                    continue
                if skip_header:
                    skip_header = False
                    continue
                if len(row) > max_fields:
                    raise DecodeError(
                        f"row has {len(row)} fields (max {max_fields})",
                        line=reader.line_num,
                    )
                tags: List[Optional[str]] = list(row[1:])
                rows.append(RawRow.from_values(row[0], tags))
        except csv.Error as exc:
            raise DecodeError(f"malformed CSV: {exc}", line=reader.line_num) from exc

        return rows


_DECODERS = {
    "header": HeaderDecoder,
    "positional": PositionalDecoder,
}


def get_decoder(
    name: DecoderName = "header",
    *,
    delimiter: str = ",",
    quote_char: str = '"',
    has_header: bool = True,
) -> Decoder:
    try:
        decoder_cls = _DECODERS[name]
    except KeyError:
        raise ValueError(f"unknown decoder: {name!r}") from None

    check_dialect(delimiter, quote_char)

    cfg = DecoderConfig(
        decoder=name,
        delimiter=delimiter,
        quote_char=quote_char,
        has_header=has_header,
    )
    return decoder_cls(cfg)
