"""Entry point for the Reaction Lab application.

Analyzes a set of reactants with the offline reaction catalog and plays
the resulting reaction steps back with a synchronized energy diagram.
"""

import argparse
import logging
import sys

from PyQt6.QtWidgets import QApplication

from analysis_service import DEFAULT_CATALOG_DIR, CatalogAnalysisService
from app_window import AppWindow
from playback.controller import PlaybackController


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        description="Step through a chemical reaction with a live energy diagram.",
    )
    parser.add_argument(
        "--reactions-dir",
        type=str,
        default=str(DEFAULT_CATALOG_DIR),
        help="Directory of reaction JSON files (default: bundled reactions/)",
    )
    parser.add_argument(
        "--step-interval",
        type=int,
        default=PlaybackController.STEP_INTERVAL_MS,
        help="Milliseconds per step during playback (default: %(default)s)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity (default: INFO)",
    )
    args, _qt_args = parser.parse_known_args(argv)
    if args.step_interval <= 0:
        parser.error("--step-interval must be positive")
    return args


def main():
    args = parse_args()
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(name)s %(levelname)s: %(message)s",
    )

    app = QApplication(sys.argv)
    service = CatalogAnalysisService(args.reactions_dir)
    window = AppWindow(service, step_interval_ms=args.step_interval)
    window.show()

    sys.exit(app.exec())


if __name__ == "__main__":
    main()
