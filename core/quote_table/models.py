from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Literal, Optional, Tuple

from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic.config import ConfigDict


DecoderName = Literal["header", "positional"]

TAG_SLOT_COUNT = 8


def check_dialect(delimiter: str, quote_char: str) -> None:
    """csv モジュールが扱える区切り文字・クォート文字の組み合わせか検証する"""
    for label, value in (("delimiter", delimiter), ("quote_char", quote_char)):
        if len(value) != 1:
            raise ValueError(f"{label} must be a single character")
        if value in ("\r", "\n"):
            raise ValueError(f"{label} must not be a line break")
    if delimiter == quote_char:
        raise ValueError("delimiter and quote_char must differ")


class ResponseLevel(str, Enum):
    """
    Response verbosity level.
    - simple   : records + tag_index only
    - standard : also includes stats
    - debug    : also includes the effective decoder config and per-source row counts
    """

    simple = "simple"
    standard = "standard"
    debug = "debug"


# ---------------------------------------------------------------------------
# 変換のコアデータ
# ---------------------------------------------------------------------------


class RawRow(BaseModel):
    """CSV 1 行分。デコード後は変更しない。"""

    model_config = ConfigDict(frozen=True)

    quote: Optional[str] = None
    tag1: Optional[str] = None
    tag2: Optional[str] = None
    tag3: Optional[str] = None
    tag4: Optional[str] = None
    tag5: Optional[str] = None
    tag6: Optional[str] = None
    tag7: Optional[str] = None
    tag8: Optional[str] = None

    @classmethod
    def from_values(cls, quote: Optional[str], tags: List[Optional[str]]) -> "RawRow":
        """quote とタグ列（先頭から tag1, tag2, ... に対応）から組み立てる"""
        if len(tags) > TAG_SLOT_COUNT:
            raise ValueError(f"at most {TAG_SLOT_COUNT} tag slots, got {len(tags)}")
        slots = {f"tag{i}": value for i, value in enumerate(tags, start=1)}
        return cls(quote=quote, **slots)

    def tag_slots(self) -> Tuple[Optional[str], ...]:
        return (
            self.tag1,
            self.tag2,
            self.tag3,
            self.tag4,
            self.tag5,
            self.tag6,
            self.tag7,
            self.tag8,
        )


class QuoteRecord(BaseModel):
    quote: str
    tags: List[str] = Field(default_factory=list)


class ConversionResult(BaseModel):
    records: List[QuoteRecord] = Field(default_factory=list)
    tag_index: List[str] = Field(default_factory=list)


class ConversionStats(BaseModel):
    sources: int = 0
    sources_skipped: int = 0
    rows: int = 0
    rows_without_tags: int = 0
    empty_quotes: int = 0
    distinct_tags: int = 0


# ---------------------------------------------------------------------------
# 保存先（ゲーム側アセットと同じ 2 配列構成）
# ---------------------------------------------------------------------------


class QuoteTableData(BaseModel):
    quote_infos: List[QuoteRecord] = Field(default_factory=list)
    total_tags: List[str] = Field(default_factory=list)

    @classmethod
    def from_result(cls, result: ConversionResult) -> "QuoteTableData":
        return cls(
            quote_infos=[QuoteRecord(quote=r.quote, tags=list(r.tags)) for r in result.records],
            total_tags=list(result.tag_index),
        )


# ---------------------------------------------------------------------------
# API / CLI の入出力
# ---------------------------------------------------------------------------


class CsvSource(BaseModel):
    """
    読み込み元 CSV 1 件分。

    text と csv_b64 のどちらかを指定する。両方とも空なら「未指定」として
    スキップされる（エラーにはしない）。
    """

    name: Optional[str] = None
    text: Optional[str] = None
    csv_b64: Optional[str] = None

    @property
    def is_missing(self) -> bool:
        return self.text is None and self.csv_b64 is None


class ConvertRequest(BaseModel):
    """
    Quote table conversion request.

    基本利用者は sources だけ指定すればよい想定。
    decoder="positional" のときは列名ではなく列位置（0 列目がセリフ、
    1〜8 列目がタグ）で読む。
    """

    sources: List[Optional[CsvSource]] = Field(default_factory=list)

    decoder: DecoderName = "header"
    delimiter: str = ","
    quote_char: str = '"'
    has_header: bool = True  # positional のみ参照

    response_level: ResponseLevel = Field(
        default=ResponseLevel.simple,
        description="Response verbosity: simple | standard | debug",
    )

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "sources": [
                    {"name": "quotes.csv", "text": "quote,tag1,tag2\nHello,greeting,\n"}
                ],
                "decoder": "header",
                "response_level": "simple",
            }
        }
    )

    @field_validator("delimiter", "quote_char")
    @classmethod
    def _single_char(cls, value: str) -> str:
        if len(value) != 1:
            raise ValueError("must be a single character")
        return value

    @model_validator(mode="after")
    def _valid_dialect(self) -> "ConvertRequest":
        check_dialect(self.delimiter, self.quote_char)
        return self


class ConvertResponse(BaseModel):
    result: ConversionResult
    stats: Optional[ConversionStats] = None
    meta: Dict[str, Any] = Field(default_factory=dict)
