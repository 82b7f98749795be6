"""HTTPサーバー（FastAPI）"""
from functools import lru_cache
from typing import Any, Optional

from fastapi import Depends, FastAPI, Header, HTTPException, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from .application import HospitalFinderApp
from .features.auth.providers.auth_context import StaticAuthContext
from .features.geolocation.domain.models import GeoLocation
from .features.hospitals.domain.models import UNNAMED_HOSPITAL, PointOfInterest
from .features.hospitals.services.ranking import rank_by_distance
from .infrastructure.config.settings import Settings
from .shared.exceptions.errors import AuthRequired, BookingError
from .shared.logging.config import get_logger, setup_logging

logger = get_logger(__name__)

app = FastAPI(
    title="Hospital Finder Sync",
    description="周辺の病院をOpenStreetMapから同期し、予約を作成するサービス",
    version="1.0.0",
)


@lru_cache
def get_app() -> HospitalFinderApp:
    """アプリケーションを作成（プロセス内で1回）"""
    settings = Settings()
    setup_logging(
        level=settings.log_level,
        enable_cloud_logging=settings.gcp_logging_enabled,
        project_id=settings.gcp_project_id,
    )
    logger.info(f"Environment: {settings.environment}")
    logger.info(f"Project: {settings.project_name}")
    return HospitalFinderApp(settings)


class SyncRequest(BaseModel):
    """同期リクエスト（座標を省略した場合は設定の現在地）"""

    latitude: Optional[float] = Field(default=None, ge=-90, le=90)
    longitude: Optional[float] = Field(default=None, ge=-180, le=180)


class BookingRequest(BaseModel):
    """予約リクエスト"""

    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)
    name: str = UNNAMED_HOSPITAL
    address: Optional[str] = None
    phone: Optional[str] = None
    specialities: Optional[str] = None
    emergency_available: bool = False
    note: Optional[str] = None

    def to_hospital(self) -> PointOfInterest:
        return PointOfInterest(
            latitude=self.latitude,
            longitude=self.longitude,
            name=self.name,
            address=self.address,
            phone=self.phone,
            specialities=self.specialities,
            emergency_available=self.emergency_available,
        )


@app.get("/")
def root() -> dict[str, Any]:
    """ルートエンドポイント"""
    return {
        "service": "hospital-finder-sync",
        "version": "1.0.0",
        "status": "running",
    }


@app.get("/health")
def health() -> dict[str, str]:
    """ヘルスチェックエンドポイント"""
    return {"status": "healthy"}


@app.post("/sync")
def sync_hospitals(
    request: Optional[SyncRequest] = None,
    finder: HospitalFinderApp = Depends(get_app),
) -> dict[str, Any]:
    """
    周辺の病院を同期

    同期の失敗はHTTPエラーではなく、レスポンスの status / error で返す
    """
    request = request or SyncRequest()
    if (request.latitude is None) != (request.longitude is None):
        raise HTTPException(
            status_code=422, detail="latitude and longitude must be given together"
        )

    origin = (
        GeoLocation(request.latitude, request.longitude)
        if request.latitude is not None
        else None
    )
    result = finder.sync_orchestrator.run(origin=origin)

    return {
        **result.to_dict(),
        "hospitals": [item.to_dict() for item in rank_by_distance(result.hospitals, result.origin)],
    }


@app.get("/hospitals/nearby")
def nearby_hospitals(
    latitude: Optional[float] = None,
    longitude: Optional[float] = None,
    limit: int = 50,
    finder: HospitalFinderApp = Depends(get_app),
) -> dict[str, Any]:
    """最後に完了した同期結果を距離順で返す"""
    result = finder.sync_orchestrator.latest_result
    if result is None:
        return {"status": "idle", "hospitals": []}

    origin = result.origin
    if latitude is not None and longitude is not None:
        origin = GeoLocation(latitude, longitude)

    ranked = rank_by_distance(result.hospitals, origin)
    return {
        "status": result.status.value,
        "error": result.error_message,
        "hospitals": [item.to_dict() for item in ranked[: max(limit, 0)]],
    }


@app.post("/bookings", status_code=201)
def create_booking(
    request: BookingRequest,
    x_user_id: Optional[str] = Header(default=None),
    finder: HospitalFinderApp = Depends(get_app),
) -> dict[str, Any]:
    """
    病院の予約を作成

    認証ユーザーは X-User-Id ヘッダーで受け取る
    """
    workflow = finder.create_booking_workflow(StaticAuthContext(x_user_id))

    try:
        booking = workflow.create_booking(request.to_hospital(), note=request.note)
    except AuthRequired as e:
        raise HTTPException(status_code=401, detail=str(e))
    except BookingError as e:
        raise HTTPException(status_code=502, detail=str(e))

    return {
        "message": f"Appointment created (status: {booking.status.value}).",
        "booking": booking.to_dict(),
    }


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """グローバル例外ハンドラー"""
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"message": "Internal server error", "detail": str(exc)},
    )


if __name__ == "__main__":
    import uvicorn

    settings = Settings()
    uvicorn.run(
        app,
        host="0.0.0.0",
        port=settings.port,
        log_level=settings.log_level.lower(),
    )
