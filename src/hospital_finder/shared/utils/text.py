"""テキスト処理ユーティリティ"""

import re
from typing import Any, Optional


def normalize_text(text: Any) -> Optional[str]:
    """
    テキストを正規化

    - 文字列以外（数値タグなど）は文字列化
    - 連続する空白を1つに
    - 前後の空白を除去
    """
    if text is None:
        return None

    text = re.sub(r"\s+", " ", str(text)).strip()

    return text if text else None


def first_present(*values: Any) -> Optional[str]:
    """
    正規化後に空でない最初の値を返す

    Args:
        *values: 優先順に並べた候補

    Returns:
        Optional[str]: 最初に見つかった値（全て空の場合はNone）
    """
    for value in values:
        text = normalize_text(value)
        if text:
            return text
    return None


def join_present(parts: list[Any], separator: str = ", ") -> Optional[str]:
    """
    空の要素を除外して連結

    Args:
        parts: 連結する要素
        separator: 区切り文字

    Returns:
        Optional[str]: 連結結果（全て空の場合はNone）
    """
    present = [text for text in (normalize_text(part) for part in parts) if text]
    return separator.join(present) if present else None
