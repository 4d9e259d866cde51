"""
Capture Journal: entry point.
Run: python main.py [--config config.toml] [--device N] [--width W] [--height H]
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Sequence

from PySide6.QtWidgets import QApplication

from core.analyzer import FrameAnalyzer
from core.config import load_config, with_overrides
from core.log import configure_logging
from core.models import AddItem
from core.store import EntryStore
from ui.main_window import MainWindow

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Capture webcam frames with histograms and edge maps.")
    parser.add_argument("--config", help="Path to a config.toml (default: next to main.py)")
    parser.add_argument("--device", type=int, help="Camera index")
    parser.add_argument("--width", type=int, help="Requested frame width")
    parser.add_argument("--height", type=int, help="Requested frame height")
    parser.add_argument("--log-level", help="DEBUG, INFO, WARNING or ERROR")
    parser.add_argument("--no-seed", action="store_true", help="Start without the startup capture")
    return parser


def main(argv: Sequence[str] | None = None) -> None:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level or "INFO")
    try:
        config = with_overrides(
            load_config(args.config), device=args.device, width=args.width, height=args.height
        )
    except (OSError, ValueError) as e:
        logger.error("Invalid configuration: %s", e)
        sys.exit(2)
    if args.log_level is None:
        configure_logging(config.app.log_level)

    app = QApplication(sys.argv[:1])
    store = EntryStore(FrameAnalyzer(edges=config.edges))
    window = MainWindow(store, config.capture)
    window.show()
    window.start()
    if not args.no_seed:
        window.post(AddItem(label=config.app.seed_label, params=config.capture))
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
