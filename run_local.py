#!/usr/bin/env python3
"""
Run the channel delivery service locally.

Backend selection and provider URLs are read by the service itself from
the environment or a .env file (BACKEND_MODE, BASE_URL, SECRET_NAME, ...).

Usage:
    python run_local.py [--host 0.0.0.0] [--port 9000] [--reload]
"""

import argparse

import uvicorn

APP = "channel_delivery.main:app"


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="run_local", description=__doc__.splitlines()[1])
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=8080)
    parser.add_argument("--reload", action="store_true", help="restart on source changes under src/")
    return parser.parse_args(argv)


def main(argv=None) -> None:
    args = parse_args(argv)
    # Log level comes from LOG_LEVEL through the service's own structlog setup
    uvicorn.run(
        APP,
        host=args.host,
        port=args.port,
        reload=args.reload,
        reload_dirs=["src"] if args.reload else None,
    )


if __name__ == "__main__":
    main()
