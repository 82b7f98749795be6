"""日時関連ユーティリティ"""

from datetime import datetime, timezone
from typing import Optional


def now_utc() -> datetime:
    """現在のUTC時間を取得"""
    return datetime.now(timezone.utc)


def ensure_utc(dt: datetime) -> datetime:
    """
    datetimeをUTCのaware datetimeにそろえる

    Args:
        dt: 変換対象のdatetime（タイムゾーン情報がない場合はUTCとみなす）

    Returns:
        UTCのdatetime
    """
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def elapsed_seconds(start: datetime, end: Optional[datetime] = None) -> float:
    """開始時刻からの経過秒数"""
    return ((end or now_utc()) - start).total_seconds()


def format_duration(seconds: float) -> str:
    """
    秒数をログ用の短い形式に変換

    Args:
        seconds: 秒数

    Returns:
        "1h 23m 45s" のような文字列（1秒未満は "0s"）
    """
    total = max(int(seconds), 0)
    hours, remainder = divmod(total, 3600)
    minutes, secs = divmod(remainder, 60)

    parts = [f"{value}{unit}" for value, unit in ((hours, "h"), (minutes, "m")) if value]
    if secs or not parts:
        parts.append(f"{secs}s")

    return " ".join(parts)
