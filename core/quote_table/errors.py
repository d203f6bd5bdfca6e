from __future__ import annotations

from typing import Optional


class DecodeError(Exception):
    """CSV ソースの読み込みに失敗したときに投げる独自例外"""

    def __init__(
        self,
        message: str,
        *,
        source: Optional[str] = None,
        line: Optional[int] = None,
    ) -> None:
        self.message = message
        self.source = source
        self.line = line
        super().__init__(self._format())

    def _format(self) -> str:
        where = []
        if self.source is not None:
            where.append(f"source={self.source}")
        if self.line is not None:
            where.append(f"line={self.line}")
        if not where:
            return self.message
        return f"{self.message} ({', '.join(where)})"

    def with_source(self, source: Optional[str]) -> "DecodeError":
        """同じ内容でソース名だけ差し替えた例外を返す"""
        return DecodeError(self.message, source=source, line=self.line)
