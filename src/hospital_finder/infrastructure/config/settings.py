"""アプリケーション設定（Pydantic Settings）"""
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """アプリケーション設定"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Project
    project_name: str = Field(
        default="hospital-finder-sync",
        description="プロジェクト名",
    )
    environment: str = Field(
        default="development",
        description="環境 (development, staging, production)",
    )

    # GCP
    gcp_project_id: str = Field(
        ...,
        description="GCPプロジェクトID",
    )

    # Firestore
    firestore_database_id: str = Field(
        default="(default)",
        description="FirestoreデータベースID",
    )
    firestore_hospitals_collection: str = Field(
        default="hospitals",
        description="病院コレクション名",
    )
    firestore_profiles_collection: str = Field(
        default="user_profiles",
        description="ユーザープロフィールコレクション名",
    )
    firestore_assessments_collection: str = Field(
        default="health_assessments",
        description="健康診断（アセスメント）コレクション名",
    )
    firestore_bookings_collection: str = Field(
        default="appointments",
        description="予約コレクション名",
    )

    # Overpass API
    overpass_api_url: str = Field(
        default="https://overpass-api.de/api/interpreter",
        description="Overpass APIのエンドポイント",
    )
    overpass_query_timeout: int = Field(
        default=180,
        description="Overpassクエリのサーバー側タイムアウト（秒）",
    )
    http_timeout: float = Field(
        default=60.0,
        description="HTTPリクエストのタイムアウト（秒）",
    )
    http_user_agent: str = Field(
        default="HospitalFinderSync/1.0",
        description="HTTPリクエストのUser-Agent",
    )

    # Sync
    search_radius_m: int = Field(
        default=50_000,
        gt=0,
        description="病院検索半径（メートル）",
    )
    upsert_chunk_size: int = Field(
        default=200,
        ge=1,
        le=500,
        description="アップサートのチャンクサイズ（Firestoreのバッチ上限は500）",
    )

    # Location
    location_timeout: float = Field(
        default=20.0,
        gt=0,
        description="現在地取得のタイムアウト（秒）",
    )
    location_maximum_age: float = Field(
        default=300.0,
        ge=0,
        description="キャッシュされた現在地を許容する最大経過時間（秒）",
    )
    default_latitude: Optional[float] = Field(
        default=None,
        description="固定の現在地（緯度）",
    )
    default_longitude: Optional[float] = Field(
        default=None,
        description="固定の現在地（経度）",
    )

    # Auth
    current_user_id: Optional[str] = Field(
        default=None,
        description="CLI実行時の認証ユーザーID",
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="ログレベル (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )
    gcp_logging_enabled: bool = Field(
        default=False,
        description="Cloud Loggingを有効にするか",
    )

    # Cloud Run
    port: int = Field(
        default=8080,
        description="HTTPサーバーのポート番号",
    )

    @property
    def has_default_location(self) -> bool:
        """固定の現在地が設定されているか"""
        return self.default_latitude is not None and self.default_longitude is not None

