"""
Entrypoint for the Text Statistics Engine.
This file wires the FastAPI application together by importing the core package,
which initializes shared state and registers all routes.
"""

from __future__ import annotations

import argparse
import os

import core  # noqa: F401  # Ensure route modules are imported for side effects
from core.app_state import app, logger  # noqa: F401
from config import config


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Text Statistics Engine")
    parser.add_argument(
        "--store",
        default=None,
        help="Path of the JSON session store (empty string keeps the session in memory)",
    )
    parser.add_argument(
        "--verbose-recompute",
        action="store_true",
        help="Log per-phase timings for every recompute pass",
    )
    parser.add_argument("--host", default=config.APP_HOST, help="Bind host")
    parser.add_argument("--port", type=int, default=config.APP_PORT, help="Bind port")
    args = parser.parse_args()

    if args.store is not None:
        os.environ["STORE_PATH"] = args.store
        config.STORE_PATH = args.store

    if args.verbose_recompute:
        os.environ["VERBOSE_RECOMPUTE"] = "true"
        config.VERBOSE_RECOMPUTE = True

    import uvicorn

    logger.info("Starting with uvicorn on %s:%d", args.host, args.port)
    uvicorn.run(
        "main:app",
        host=args.host,
        port=args.port,
        reload=config.APP_RELOAD,
    )
