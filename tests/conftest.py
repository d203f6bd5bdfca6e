import sys
from pathlib import Path

import pytest

# tests/ から見て 1 つ上 = プロジェクトルート
PROJECT_ROOT = Path(__file__).resolve().parents[1]

if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))


@pytest.fixture
def csv_a() -> str:
    """英語ヘッダ・2 行"""
    return (
        "quote,tag1,tag2,tag3,tag4,tag5,tag6,tag7,tag8\n"
        "Good morning!,greeting,morning,,,,,,\n"
        "\"Well, well.\",sarcasm,,,,,,,\n"
    )


@pytest.fixture
def csv_b() -> str:
    """元データと同じ日本語ヘッダ・3 行"""
    return (
        "セリフ,タグ1,タグ2,タグ3,タグ4,タグ5,タグ6,タグ7,タグ8\n"
        "おはよう,greeting,,,,,,,\n"
        "こんばんは,greeting,night,,,,,,\n"
        ",,,,,,,,\n"
    )
