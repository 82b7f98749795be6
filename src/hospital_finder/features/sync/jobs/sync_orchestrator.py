"""病院同期のオーケストレーター"""

import threading
import uuid
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from typing import Callable, Optional

from ....shared.exceptions.errors import (
    HospitalFinderError,
    LocationUnavailable,
    ParsingError,
    ProviderUnreachable,
)
from ....shared.logging.config import get_logger
from ....shared.utils.datetime_utils import elapsed_seconds, format_duration, now_utc
from ...geolocation.domain.models import GeoLocation
from ...geolocation.providers.base import AbstractLocationProvider
from ...hospitals.parsers.overpass_parser import normalize_elements
from ...hospitals.providers.overpass_client import OverpassClient
from ...hospitals.services.deduplicator import deduplicate
from ..domain.enums import SyncStatus
from ..domain.models import SyncRunResult
from ..services.batch_reconciler import BatchReconciler

logger = get_logger(__name__)

DEFAULT_RADIUS_M = 50_000
DEFAULT_LOCATION_TIMEOUT = 20.0
DEFAULT_LOCATION_MAXIMUM_AGE = 300.0

LOCATION_DENIED_MESSAGE = "Unable to access location. Please allow location access."


class SyncOrchestrator:
    """
    病院同期のオーケストレーター

    処理フロー:
    idle -> locating -> fetching -> reconciling -> done
    locating / fetching の失敗は failed で終了する。
    reconciling のチャンク失敗はメッセージとして記録し、done まで進む。

    実行が重なった場合は、最後に完了した実行の結果が latest_result になる。
    """

    def __init__(
        self,
        location_provider: AbstractLocationProvider,
        overpass_client: OverpassClient,
        reconciler: BatchReconciler,
        radius_m: int = DEFAULT_RADIUS_M,
        location_timeout: float = DEFAULT_LOCATION_TIMEOUT,
        location_maximum_age: float = DEFAULT_LOCATION_MAXIMUM_AGE,
        on_status_change: Optional[Callable[[SyncRunResult], None]] = None,
    ) -> None:
        """
        Args:
            location_provider: 現在地プロバイダー
            overpass_client: Overpass APIクライアント
            reconciler: 照合サービス
            radius_m: 検索半径（メートル）
            location_timeout: 現在地取得のタイムアウト（秒）
            location_maximum_age: キャッシュ済み測位の許容経過時間（秒）
            on_status_change: ステータス遷移時のコールバック（UI通知用）
        """
        self.location_provider = location_provider
        self.overpass_client = overpass_client
        self.reconciler = reconciler
        self.radius_m = radius_m
        self.location_timeout = location_timeout
        self.location_maximum_age = location_maximum_age
        self.on_status_change = on_status_change

        self._lock = threading.Lock()
        self.latest_result: Optional[SyncRunResult] = None

        logger.info(f"SyncOrchestrator initialized (radius={radius_m} m)")

    @property
    def status(self) -> SyncStatus:
        """最後に完了した実行のステータス（未実行の場合はidle）"""
        with self._lock:
            return self.latest_result.status if self.latest_result else SyncStatus.IDLE

    def run(self, origin: Optional[GeoLocation] = None) -> SyncRunResult:
        """
        同期を1回実行

        Args:
            origin: 検索の中心（Noneの場合は現在地を取得）

        Returns:
            SyncRunResult: 同期実行結果（例外は送出しない）
        """
        result = SyncRunResult(run_id=uuid.uuid4().hex[:8], started_at=now_utc())
        result.transitions.append(SyncStatus.IDLE)

        logger.info(f"Starting hospital sync (run_id={result.run_id})")

        try:
            if origin is None:
                self._transition(result, SyncStatus.LOCATING)
                origin = self._acquire_location()
            result.origin = origin

            self._transition(result, SyncStatus.FETCHING)
            elements = self.overpass_client.fetch_hospitals(
                origin.latitude, origin.longitude, self.radius_m
            )
            result.fetched_elements = len(elements)

            if elements:
                self._transition(result, SyncStatus.RECONCILING)
                self._reconcile(result, elements)
            else:
                logger.warning("No hospitals found around the current location")

            self._transition(result, SyncStatus.DONE)

        except LocationUnavailable as e:
            logger.error(f"Location error: {e}")
            result.set_error(e)
            self._transition(result, SyncStatus.FAILED)

        except (ProviderUnreachable, ParsingError) as e:
            logger.error(f"Provider error: {e}")
            result.set_error(e, f"Failed to sync hospitals: {e}")
            self._transition(result, SyncStatus.FAILED)

        except HospitalFinderError as e:
            # 照合以外のストア・設定エラーなど
            logger.error(f"Sync error: {e}")
            result.set_error(e, f"Failed to sync hospitals: {e}")
            self._transition(result, SyncStatus.FAILED)

        except Exception as e:
            logger.error(f"Unexpected error: {e}", exc_info=True)
            result.set_error(e, f"Initialization failed: {e}")
            self._transition(result, SyncStatus.FAILED)

        return self._finish(result)

    def _acquire_location(self) -> GeoLocation:
        """
        タイムアウト付きで現在地を1回取得

        Raises:
            LocationUnavailable: 取得が拒否・失敗・タイムアウトした場合
        """
        executor = ThreadPoolExecutor(max_workers=1)
        future = executor.submit(
            self.location_provider.get_current_position,
            self.location_timeout,
            self.location_maximum_age,
        )

        try:
            return future.result(timeout=self.location_timeout)
        except FutureTimeoutError as e:
            raise LocationUnavailable(
                f"Timed out acquiring location after {self.location_timeout:g}s"
            ) from e
        except LocationUnavailable:
            raise
        except Exception as e:
            logger.warning(f"Location provider failed: {e}")
            raise LocationUnavailable(LOCATION_DENIED_MESSAGE) from e
        finally:
            # 測位スレッドの完了は待たない
            executor.shutdown(wait=False)

    def _reconcile(self, result: SyncRunResult, elements: list) -> None:
        """正規化 → 重複排除 → 照合"""
        hospitals = deduplicate(normalize_elements(elements))
        reconciled = self.reconciler.reconcile(hospitals)

        result.hospitals = reconciled.hospitals
        result.failed_chunks = reconciled.failed_chunks

        error = reconciled.to_error()
        if error is not None:
            logger.warning(
                f"Partial reconcile failure: {len(error.failed_chunks)}/"
                f"{reconciled.total_chunks} chunks failed"
            )
            result.set_error(error)

    def _transition(self, result: SyncRunResult, status: SyncStatus) -> None:
        result.status = status
        result.transitions.append(status)
        logger.debug(f"Sync {result.run_id}: {status.value}")

        if self.on_status_change:
            try:
                self.on_status_change(result)
            except Exception as e:
                logger.warning(f"Status callback failed: {e}")

    def _finish(self, result: SyncRunResult) -> SyncRunResult:
        result.completed_at = now_utc()
        result.duration_seconds = elapsed_seconds(result.started_at, result.completed_at)

        with self._lock:
            self.latest_result = result

        logger.info(
            f"Hospital sync {result.status.value} (run_id={result.run_id}): "
            f"{len(result.hospitals)} hospitals in {format_duration(result.duration_seconds)}"
        )
        return result
