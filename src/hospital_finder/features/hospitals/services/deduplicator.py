"""座標キーによる病院の重複排除"""

from collections.abc import Iterable

from ....shared.logging.config import get_logger
from ..domain.models import PointOfInterest

logger = get_logger(__name__)


def deduplicate(hospitals: Iterable[PointOfInterest]) -> list[PointOfInterest]:
    """
    座標キーごとに1件へ集約（後勝ち）

    丸めた座標が一致する病院は同一の実体とみなし、入力順で最後のものを残す。
    丸め精度以下で隣接する別施設も統合されるが、これは許容している。

    Args:
        hospitals: 正規化済みの病院オブジェクト

    Returns:
        list[PointOfInterest]: 座標キーが一意な病院オブジェクトのリスト
    """
    unique: dict[str, PointOfInterest] = {}
    total = 0

    for hospital in hospitals:
        unique[hospital.key] = hospital
        total += 1

    if total != len(unique):
        logger.info(f"Deduplicated hospitals: {total} -> {len(unique)}")

    return list(unique.values())
