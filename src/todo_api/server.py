"""
Process entry point: configure logging and serve the API with uvicorn.
"""
from __future__ import annotations

import argparse
import logging
from typing import List, Optional

import uvicorn

from .main import app
from .settings import get_settings

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    settings = get_settings()
    parser = argparse.ArgumentParser(description="Todo API with file-based storage")
    parser.add_argument("--host", default=settings.host, help="Host to bind (env HOST)")
    parser.add_argument("--port", type=int, default=settings.port, help="Port to listen on (env PORT)")
    return parser.parse_args(argv)


def configure_logging(level_name: str) -> None:
    level = logging.getLevelName(level_name.upper())
    if not isinstance(level, int):
        level = logging.INFO
    logging.basicConfig(level=level)


def main(argv: Optional[List[str]] = None) -> None:
    args = parse_args(argv)
    configure_logging(get_settings().log_level)
    logger.info(f"Starting server on {args.host}:{args.port}")
    # The app lifespan initializes storage before uvicorn accepts connections.
    uvicorn.run(app, host=args.host, port=args.port)


if __name__ == "__main__":
    main()
