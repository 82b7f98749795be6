"""CLIエントリーポイント"""
import argparse
import sys

from .application import HospitalFinderApp
from .features.auth.providers.auth_context import StaticAuthContext
from .features.geolocation.domain.models import GeoLocation
from .features.hospitals.services.ranking import rank_by_distance
from .features.sync.domain.enums import SyncStatus
from .infrastructure.config.settings import Settings
from .shared.exceptions.errors import BookingError
from .shared.logging.config import get_logger, setup_logging

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """引数パーサーを作成"""
    parser = argparse.ArgumentParser(
        description="Sync hospitals around a location and optionally book one"
    )

    parser.add_argument("--lat", type=float, help="検索の中心の緯度（省略時は設定の固定座標）")
    parser.add_argument("--lon", type=float, help="検索の中心の経度（省略時は設定の固定座標）")
    parser.add_argument(
        "--radius",
        type=int,
        help="検索半径（メートル、省略時は設定値）",
    )
    parser.add_argument(
        "--limit",
        type=int,
        default=20,
        help="表示する病院の件数（デフォルト: 20）",
    )
    parser.add_argument(
        "--book",
        type=int,
        metavar="N",
        help="近い順でN番目（1始まり）の病院を予約",
    )
    parser.add_argument("--note", type=str, help="予約のメモ")
    parser.add_argument("--user", type=str, help="予約するユーザーID（省略時は設定値）")
    parser.add_argument(
        "--env-file",
        type=str,
        default=".env",
        help="環境変数ファイルのパス（デフォルト: .env）",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="ログレベル",
    )
    parser.add_argument(
        "--progress",
        action="store_true",
        help="アップサートの進捗を表示",
    )

    return parser


def run(args: argparse.Namespace, app: HospitalFinderApp) -> int:
    """
    同期（と任意で予約）を実行

    Args:
        args: コマンドライン引数
        app: アプリケーション

    Returns:
        int: 終了コード（0: 成功, 1: 失敗）
    """
    if (args.lat is None) != (args.lon is None):
        logger.error("--lat and --lon must be given together")
        return 1

    origin = GeoLocation(args.lat, args.lon) if args.lat is not None else None
    result = app.sync_orchestrator.run(origin=origin)

    if result.status == SyncStatus.FAILED:
        logger.error(result.error_message)
        return 1

    if result.error_message:
        logger.warning(result.error_message)

    ranked = rank_by_distance(result.hospitals, result.origin)

    if not ranked:
        print("No hospitals available.")
    for index, item in enumerate(ranked[: args.limit], start=1):
        hospital = item.hospital
        flags = " [emergency]" if hospital.emergency_available else ""
        print(f"{index:3d}. {hospital.name}{flags} - {item.distance_label or '-'}")
        if hospital.address:
            print(f"     {hospital.address}")
        if hospital.phone:
            print(f"     tel: {hospital.phone}")

    if args.book is None:
        return 0

    if not 1 <= args.book <= len(ranked):
        logger.error(f"--book must be between 1 and {len(ranked)}")
        return 1

    selected = ranked[args.book - 1].hospital
    auth_context = StaticAuthContext(args.user) if args.user else None
    workflow = app.create_booking_workflow(auth_context)

    try:
        booking = workflow.create_booking(selected, note=args.note)
    except BookingError as e:
        print(f"Error creating appointment: {e}")
        return 1

    print(f"Appointment created (status: {booking.status.value}) at {selected.name}")
    return 0


def main() -> int:
    """
    メインエントリーポイント

    Returns:
        int: 終了コード（0: 成功, 1: 失敗）
    """
    args = build_parser().parse_args()

    try:
        settings = Settings(_env_file=args.env_file)
        if args.radius:
            settings.search_radius_m = args.radius

        setup_logging(
            level=args.log_level or settings.log_level,
            enable_cloud_logging=settings.gcp_logging_enabled,
            project_id=settings.gcp_project_id,
        )
        logger.info(f"Starting hospital finder (environment={settings.environment})")

        app = HospitalFinderApp(settings, show_progress=args.progress)
        try:
            return run(args, app)
        finally:
            app.close()

    except KeyboardInterrupt:
        logger.warning("Interrupted by user")
        return 130  # SIGINT
    except Exception as e:
        logger.error(f"Application failed: {e}", exc_info=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
