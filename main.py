#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Increment Tracker - Command Line Entry Point

    python main.py serve [--host H] [--port P]
    python main.py status
    python main.py review [--weeks N]
    python main.py reset --yes

Version: 1.0.0
Date: 2026-10-19
"""

import argparse
import json
import logging
import sys
from typing import List, Optional

from config import AppConfig
from core.database import Database
from services.tracker_service import TrackerService
from utils.datetime_utils import today_provider
from utils.logger import setup_logger

logger = logging.getLogger(__name__)

def _print_json(obj) -> None:
    json.dump(obj, sys.stdout, ensure_ascii=False, indent=2)
    sys.stdout.write("\n")

def _tracker(app_config: AppConfig) -> TrackerService:
    database = Database.from_file(app_config.storage.path, app_config.storage.key)
    return TrackerService(database, today=today_provider(app_config.timezone),
                          review_weeks=app_config.review_weeks)

def cmd_serve(app_config: AppConfig, args: argparse.Namespace) -> int:
    import uvicorn
    from dashboard.app import create_app

    app = create_app(app_config=app_config)
    host = args.host or app_config.server.host
    port = args.port or app_config.server.port
    logger.info(f"🌐 Serving on http://{host}:{port}")
    uvicorn.run(app, host=host, port=port, log_config=None)
    return 0

def cmd_status(app_config: AppConfig, args: argparse.Namespace) -> int:
    _print_json(_tracker(app_config).today_summary())
    return 0

def cmd_review(app_config: AppConfig, args: argparse.Namespace) -> int:
    tracker = _tracker(app_config)
    weeks = tracker.weeks(args.weeks)
    summary = []
    for window in weeks:
        review = tracker.week_review(window)
        summary.append({
            **window.to_dict(),
            "load": review["load"],
            "increments": review["increment_count"],
            "notes": len(review["notes"]),
        })
    _print_json(summary)
    return 0

def cmd_reset(app_config: AppConfig, args: argparse.Namespace) -> int:
    if not args.yes:
        print("Refusing to wipe all data without --yes", file=sys.stderr)
        return 2
    database = Database.from_file(app_config.storage.path, app_config.storage.key)
    database.user.reset()
    _print_json({"ok": True})
    return 0

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='Increment habit and arc tracker')
    sub = parser.add_subparsers(dest='command', required=True)

    serve = sub.add_parser('serve', help='Run the JSON API')
    serve.add_argument('--host', default=None, help='Bind address (default from HOST)')
    serve.add_argument('--port', type=int, default=None, help='Port (default from PORT)')
    serve.set_defaults(func=cmd_serve)

    status = sub.add_parser('status', help="Print today's load, habits and streak")
    status.set_defaults(func=cmd_status)

    review = sub.add_parser('review', help='Print trailing weekly summaries')
    review.add_argument('--weeks', type=int, default=None, help='Number of weeks (default REVIEW_WEEKS)')
    review.set_defaults(func=cmd_review)

    reset = sub.add_parser('reset', help='Delete all data')
    reset.add_argument('--yes', action='store_true', help='Confirm the reset')
    reset.set_defaults(func=cmd_reset)

    return parser

def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        app_config = AppConfig()
    except ValueError as e:
        print(str(e), file=sys.stderr)
        return 2

    app_config.ensure_directories()
    setup_logger(app_config.get_logging_config())
    if app_config.is_development():
        logger.debug(f"Configuration: {app_config.to_dict()}")

    return args.func(app_config, args)

# ===== ENTRY POINT =====

if __name__ == "__main__":
    sys.exit(main())
