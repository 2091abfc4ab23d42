# Command-line entry point: opens the store and serves it over HTTP.
from __future__ import annotations

import argparse
import logging
import sys

from filedb.api import create_app
from filedb.core.config import FileDBConfig
from filedb.core.errors import FileDBError
from filedb.core.store import FileBackedStore

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="filedb-server", description="Serve a JSON file-backed record store over HTTP"
    )
    p.add_argument(
        "--filepath",
        type=str,
        default="./testdata/db.json",
        help="Path to the database file (default: ./testdata/db.json)",
    )
    p.add_argument("--host", type=str, default="127.0.0.1", help="Bind address")
    p.add_argument("--port", type=int, default=8080, help="Port number (default: 8080)")
    p.add_argument(
        "--flush-threshold",
        type=int,
        default=5,
        help="Mutations tolerated before an early flush (default: 5)",
    )
    p.add_argument(
        "--flush-interval",
        type=float,
        default=5.0,
        help="Seconds between periodic flushes (default: 5.0)",
    )
    p.add_argument(
        "--log-level",
        type=str,
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: INFO)",
    )
    return p


def setup_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level),
        format="%(asctime)s | %(levelname)s | %(message)s",
        handlers=[logging.StreamHandler(sys.stderr)],
    )


def main(argv: list[str] | None = None) -> int:
    argv = argv if argv is not None else sys.argv[1:]
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(args.log_level)

    try:
        config = FileDBConfig(
            path=args.filepath,
            flush_threshold=args.flush_threshold,
            flush_interval_seconds=args.flush_interval,
        )
        store = FileBackedStore(config)
    except (ValueError, FileDBError) as e:
        logger.error(f"Error opening database: {e}")
        return 2

    app = create_app(store)
    try:
        app.run(host=args.host, port=args.port)
    except KeyboardInterrupt:
        logger.info("Interrupted, shutting down")
    finally:
        store.close()

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
