from __future__ import annotations

import base64
import binascii
from dataclasses import asdict
from typing import Any, Dict, List, Optional, Sequence, Tuple

from loguru import logger

from .decoders import Decoder, get_decoder
from .errors import DecodeError
from .models import (
    ConversionResult,
    ConversionStats,
    ConvertRequest,
    ConvertResponse,
    CsvSource,
    RawRow,
    ResponseLevel,
)
from .transform import transform

VERSION = "0.1.0"


# ---------------------------------------------------------------------------
# Base64 / テキストユーティリティ
# ---------------------------------------------------------------------------


def _decode_base64_to_text(csv_b64: str) -> str:
    """Base64 -> UTF-8 テキストに変換

    - 先に空白類（スペース・改行・タブなど）をすべて削除
    - そのうえで validate=True で厳密に Base64 を検証
    - 先頭の BOM は utf-8-sig で落とす
    """
    try:
        compact = "".join(csv_b64.split())
        raw = base64.b64decode(compact, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise DecodeError("csv_b64 is not valid Base64") from exc

    try:
        return raw.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        raise DecodeError("csv_b64 is not UTF-8 text") from exc


def _source_label(source: CsvSource, position: int) -> str:
    return source.name or f"#{position}"


def _source_text(source: CsvSource) -> str:
    if source.text is not None:
        return source.text
    return _decode_base64_to_text(source.csv_b64 or "")


# ---------------------------------------------------------------------------
# ソースの列挙 + デコード
# ---------------------------------------------------------------------------


def decode_sources(
    sources: Sequence[Optional[CsvSource]],
    decoder: Decoder,
) -> Tuple[List[RawRow], List[Tuple[str, int]]]:
    """全ソースをリスト順にデコードして行を連結する

    None や中身のないソースは読み飛ばす。
    1 件でも DecodeError になったらその時点で中断する（部分結果は返さない）。

    Returns:
        rows: 連結済みの RawRow 列
        per_source: (ソース名, 行数) のリスト。スキップしたものは含まない
    """
    rows: List[RawRow] = []
    per_source: List[Tuple[str, int]] = []

    for position, source in enumerate(sources):
        if source is None or source.is_missing:
            logger.debug("skip missing source at position {}", position)
            continue

        label = _source_label(source, position)
        try:
            decoded = decoder.decode(_source_text(source))
        except DecodeError as exc:
            raise exc.with_source(label) from exc

        logger.debug("decoded {} rows from {}", len(decoded), label)
        rows.extend(decoded)
        per_source.append((label, len(decoded)))

    return rows, per_source


# ---------------------------------------------------------------------------
# Stats
# ---------------------------------------------------------------------------


def _compute_stats(
    result: ConversionResult,
    sources_total: int,
    sources_used: int,
) -> ConversionStats:
    return ConversionStats(
        sources=sources_used,
        sources_skipped=sources_total - sources_used,
        rows=len(result.records),
        rows_without_tags=sum(1 for r in result.records if not r.tags),
        empty_quotes=sum(1 for r in result.records if r.quote == ""),
        distinct_tags=len(result.tag_index),
    )


# ---------------------------------------------------------------------------
# response_level による間引き
# ---------------------------------------------------------------------------


def _minimize_response(
    level: ResponseLevel,
    result: ConversionResult,
    stats: ConversionStats,
    meta_full: Dict[str, Any],
) -> ConvertResponse:
    meta_simple: Dict[str, Any] = {
        "version": meta_full.get("version"),
        "decoder": meta_full.get("decoder"),
        "response_level_used": level.value,
    }

    if level == ResponseLevel.simple:
        return ConvertResponse(result=result, stats=None, meta=meta_simple)

    if level == ResponseLevel.standard:
        return ConvertResponse(result=result, stats=stats, meta=meta_simple)

    # debug: meta_full をそのまま返す
    meta_debug = dict(meta_full)
    meta_debug["response_level_used"] = level.value
    return ConvertResponse(result=result, stats=stats, meta=meta_debug)


# ---------------------------------------------------------------------------
# エントリーポイント
# ---------------------------------------------------------------------------


def convert(request: ConvertRequest) -> ConvertResponse:
    """Quote table 変換のメイン処理

    DecodeError は呼び出し側へそのまま伝播させる（結果は一切作らない）。
    "Convert Completed." は保存まで終えた呼び出し側で出す。
    """

    # 1) デコーダ決定
    decoder = get_decoder(
        request.decoder,
        delimiter=request.delimiter,
        quote_char=request.quote_char,
        has_header=request.has_header,
    )

    # 2) 全ソースをデコードして連結
    try:
        raw_rows, per_source = decode_sources(request.sources, decoder)
    except DecodeError as exc:
        logger.error("{}", exc)
        logger.error("Convert Failed.")
        raise

    # 3) 変換
    result = transform(raw_rows)
    stats = _compute_stats(result, len(request.sources), len(per_source))

    logger.debug(
        "converted {} records, {} tags from {} sources",
        stats.rows,
        stats.distinct_tags,
        stats.sources,
    )

    meta_full: Dict[str, Any] = {
        "version": VERSION,
        "decoder": decoder.config.decoder,
        "effective_config": asdict(decoder.config),
        "sources": [{"name": name, "rows": count} for name, count in per_source],
    }

    # 4) response_level に応じて最終レスポンスを生成
    return _minimize_response(
        level=request.response_level,
        result=result,
        stats=stats,
        meta_full=meta_full,
    )
