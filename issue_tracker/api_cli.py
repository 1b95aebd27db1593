"""
CLI entrypoint for the issues API server.

Usage:
  issue-tracker-api --host 0.0.0.0 --port 8000
"""

from __future__ import annotations

import argparse
import os


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Serve the Issue Tracker HTTP API")
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=8000)
    parser.add_argument("--reload", action="store_true", help="Restart on code changes (development only)")
    parser.add_argument("--log-level", default=None, help="Overrides LOG_LEVEL for this process")
    args = parser.parse_args(argv)

    if args.log_level:
        os.environ["LOG_LEVEL"] = args.log_level.upper()

    import uvicorn

    uvicorn.run(
        "issue_tracker.api:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level=(args.log_level or "info").lower(),
    )


if __name__ == "__main__":
    main()
