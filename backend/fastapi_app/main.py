from __future__ import annotations

import sys
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from loguru import logger

# ============================================================
# プロジェクトルートを sys.path に追加
# （Lambda / uvicorn どちらでも core パッケージを解決できるように）
# ============================================================
ROOT_DIR = Path(__file__).resolve().parents[2]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from core.quote_table.errors import DecodeError  # noqa: E402
from core.quote_table.models import ConvertRequest  # noqa: E402
from core.quote_table.service import VERSION, convert  # noqa: E402

# ============================================================
# API Gateway 側で /quote-table をプレフィックスとしてルーティングしているため、
# FastAPI には root_path="/quote-table" を指定し、ルート定義は /v0/... にする
# ============================================================
app = FastAPI(
    title="Quote Table Converter API",
    version=VERSION,
    description="Convert quote/tag CSV sources into a tagged quote table",
    root_path="/quote-table",
)


@app.exception_handler(DecodeError)
async def decode_error_handler(_: Request, exc: DecodeError) -> JSONResponse:
    # 変換は全件成功か全件失敗のどちらか。失敗時は結果を一切返さない
    return JSONResponse(
        status_code=400,
        content={
            "error": {
                "code": "DECODE_ERROR",
                "message": exc.message,
                "source": exc.source,
                "line": exc.line,
            },
            "meta": {
                "version": VERSION,
            },
        },
    )


@app.get("/health")
async def health():
    return {"ok": True}


@app.post("/v0/convert")
async def convert_endpoint(payload: ConvertRequest):
    response = convert(payload)
    # 保存は呼び出し側の責務なので、ここではレスポンスを返せた時点で完了とする
    logger.info(
        "Convert Completed. ({} records, {} tags)",
        len(response.result.records),
        len(response.result.tag_index),
    )
    return response.model_dump()
