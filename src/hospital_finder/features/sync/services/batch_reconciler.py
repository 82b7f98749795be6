"""チャンク単位のアップサートによる病院データの照合"""

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Optional

from tqdm import tqdm

from ....shared.exceptions.errors import PartialReconcileFailure
from ....shared.logging.config import get_logger
from ...hospitals.domain.models import PointOfInterest
from ...storage.repositories.base import AbstractHospitalRepository

logger = get_logger(__name__)

DEFAULT_CHUNK_SIZE = 200


@dataclass
class ReconcileResult:
    """照合結果"""

    hospitals: list[PointOfInterest] = field(default_factory=list)
    total_chunks: int = 0
    returned_rows: int = 0
    failed_chunks: list[int] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)

    @property
    def has_failures(self) -> bool:
        return bool(self.failed_chunks)

    def to_error(self) -> Optional[PartialReconcileFailure]:
        """失敗したチャンクがあれば例外オブジェクトとして返す（送出はしない）"""
        if not self.failed_chunks:
            return None
        return PartialReconcileFailure(self.failed_chunks, self.errors)


def chunked(items: list[PointOfInterest], chunk_size: int) -> list[list[PointOfInterest]]:
    """
    固定サイズのチャンクに分割（順序を保持）

    Args:
        items: 分割するリスト
        chunk_size: チャンクサイズ

    Returns:
        list[list[PointOfInterest]]: チャンクのリスト
    """
    if chunk_size < 1:
        raise ValueError("Chunk size must be >= 1")
    return [items[i : i + chunk_size] for i in range(0, len(items), chunk_size)]


class BatchReconciler:
    """
    重複排除済みの病院をチャンクごとにアップサートし、
    ストアが返した行で結果を上書きする

    - チャンクの失敗は記録して次のチャンクへ進む（コミット済みのチャンクは戻さない）
    - ストアが返した行は座標キーで結果に上書きする（ストアのデータが優先）
    - 失敗したチャンクの病院は正規化済みのローカルデータのまま結果に残る
    """

    def __init__(
        self,
        hospital_repository: AbstractHospitalRepository,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        show_progress: bool = False,
    ) -> None:
        """
        Args:
            hospital_repository: 病院リポジトリ
            chunk_size: チャンクサイズ
            show_progress: プログレスバーを表示するか
        """
        if chunk_size < 1:
            raise ValueError("Chunk size must be >= 1")

        self.hospital_repository = hospital_repository
        self.chunk_size = chunk_size
        self.show_progress = show_progress

    def reconcile(self, hospitals: Iterable[PointOfInterest]) -> ReconcileResult:
        """
        病院をストアと照合

        Args:
            hospitals: 重複排除済みの病院オブジェクト

        Returns:
            ReconcileResult: 照合結果
        """
        pending = list(hospitals)
        chunks = chunked(pending, self.chunk_size)
        result = ReconcileResult(total_chunks=len(chunks))

        # ローカルの正規化データを初期値とし、ストアの返却行で上書きする
        merged: dict[str, PointOfInterest] = {hospital.key: hospital for hospital in pending}

        logger.info(
            f"Reconciling {len(pending)} hospitals in {len(chunks)} chunks "
            f"(chunk_size={self.chunk_size})"
        )

        iterator = tqdm(chunks, desc="Upserting hospitals") if self.show_progress else chunks

        for index, chunk in enumerate(iterator):
            try:
                rows = self.hospital_repository.upsert_batch(chunk)
            except Exception as e:
                logger.error(f"Upsert failed for chunk {index + 1}/{len(chunks)}: {e}")
                result.failed_chunks.append(index)
                result.errors.append(str(e))
                continue

            for row in rows:
                merged[row.key] = row
            result.returned_rows += len(rows)

            logger.debug(
                f"Chunk {index + 1}/{len(chunks)} upserted: {len(rows)} rows returned"
            )

        if pending and result.returned_rows == 0:
            logger.warning("Store returned no rows; using locally normalized hospitals")

        result.hospitals = list(merged.values())

        logger.info(
            f"Reconcile completed: {len(result.hospitals)} hospitals, "
            f"{result.returned_rows} rows returned, {len(result.failed_chunks)} chunks failed"
        )

        return result
