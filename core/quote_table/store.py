from __future__ import annotations

import os
import tempfile
from pathlib import Path
from typing import Union

from loguru import logger

from .models import ConversionResult, QuoteTableData


class QuoteTableStore:
    """変換結果（quote_infos / total_tags）を JSON ファイルとして保存する

    書き込みは同じディレクトリの一時ファイル経由で os.replace するので、
    既存ファイルは「丸ごと置き換わる」か「そのまま残る」かのどちらかになる。
    """

    def __init__(self, path: Union[str, Path]) -> None:
        self.path = Path(path)

    def write(self, result: ConversionResult) -> QuoteTableData:
        data = QuoteTableData.from_result(result)
        payload = data.model_dump_json(indent=2)

        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{self.path.name}.", suffix=".tmp", dir=self.path.parent
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(payload)
                f.write("\n")
            os.replace(tmp_name, self.path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

        logger.debug("wrote quote table to {}", self.path)
        return data

    def read(self) -> QuoteTableData:
        return QuoteTableData.model_validate_json(self.path.read_text(encoding="utf-8"))
