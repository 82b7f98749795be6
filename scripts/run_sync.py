#!/usr/bin/env python3
"""ローカル開発用の病院同期実行スクリプト"""
import argparse
import os
import sys
from pathlib import Path

# srcをPythonパスに追加
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root / "src"))

from hospital_finder.application import HospitalFinderApp
from hospital_finder.features.geolocation.domain.models import GeoLocation
from hospital_finder.features.hospitals.services.ranking import rank_by_distance
from hospital_finder.infrastructure.config.settings import Settings
from hospital_finder.shared.logging.config import get_logger, setup_logging


def main():
    """メイン関数"""
    parser = argparse.ArgumentParser(
        description="病院同期ツール（ローカル開発用）"
    )
    parser.add_argument("--lat", type=float, required=True, help="検索の中心の緯度")
    parser.add_argument("--lon", type=float, required=True, help="検索の中心の経度")
    parser.add_argument(
        "--debug",
        "-d",
        action="store_true",
        help="デバッグモードで実行",
    )

    args = parser.parse_args()

    settings = Settings()

    log_level = "DEBUG" if args.debug else settings.log_level
    setup_logging(level=log_level)
    logger = get_logger(__name__)

    logger.info("=" * 80)
    logger.info("病院同期ツール（ローカル開発用）")
    logger.info("=" * 80)
    logger.info(f"Environment: {settings.environment}")
    logger.info(f"Origin: ({args.lat}, {args.lon}), radius={settings.search_radius_m} m")
    logger.info(
        f"Firestore Emulator: {os.environ.get('FIRESTORE_EMULATOR_HOST') or 'Not set (using production)'}"
    )
    logger.info("=" * 80)

    try:
        app = HospitalFinderApp(settings, show_progress=True)
        result = app.sync_orchestrator.run(origin=GeoLocation(args.lat, args.lon))

        logger.info(f"Status: {result.status.value}")
        if result.error_message:
            logger.warning(f"Message: {result.error_message}")

        for item in rank_by_distance(result.hospitals, result.origin)[:10]:
            logger.info(f"  {item.distance_label:>10}  {item.hospital.name} (id={item.hospital.id})")

        app.close()

    except KeyboardInterrupt:
        logger.warning("Sync interrupted by user")
        sys.exit(1)
    except Exception as e:
        logger.error(f"Sync failed: {e}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
