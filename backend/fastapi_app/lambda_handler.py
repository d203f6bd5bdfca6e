from __future__ import annotations

import json
from typing import Any, Dict, Optional

from loguru import logger
from mangum import Mangum

from backend.fastapi_app.main import app


def _safe_get(d, *keys, default=None):
    cur = d
    for k in keys:
        if not isinstance(cur, dict) or k not in cur:
            return default
        cur = cur[k]
    return cur


def _stage_base_path(event: Dict[str, Any]) -> Optional[str]:
    """/dev や /prod の stage prefix を返す（$default stage なら None）"""
    stage = _safe_get(event, "requestContext", "stage", default=None)
    if not stage or stage == "$default":
        return None
    return f"/{stage}"


def handler(event, context):
    logger.info(
        json.dumps(
            {
                "diag": "incoming_request",
                "stage": _safe_get(event, "requestContext", "stage"),
                "method": _safe_get(event, "requestContext", "http", "method"),
                "rawPath": event.get("rawPath"),
            },
            ensure_ascii=False,
        )
    )

    # stage prefix は Mangum 側で剥がして FastAPI に渡す
    asgi = Mangum(app, api_gateway_base_path=_stage_base_path(event))
    return asgi(event, context)
