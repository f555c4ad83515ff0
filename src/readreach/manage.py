"""ReadReach command line.

Usage:
    readreach serve [--port 3000]   # run the HTTP API
    readreach setup-db              # create tables for SQL providers
    readreach drop-db               # drop them
"""

import argparse

import uvicorn

from readreach.settings import Settings


def serve(port=None):
    from readreach.app import build

    settings = Settings.from_env()
    uvicorn.run(build(), host="0.0.0.0", port=port or settings.port)


def setup_database():
    from readreach.domain import readreach
    from readreach.utils.db import setup_db

    readreach.init()
    setup_db(readreach)
    print("readreach schema ready.")


def drop_database():
    from readreach.domain import readreach
    from readreach.utils.db import drop_db

    readreach.init()
    drop_db(readreach)
    print("readreach schema dropped.")


def main():
    parser = argparse.ArgumentParser(description="ReadReach server and database management")
    subparsers = parser.add_subparsers(dest="command", required=True)

    serve_parser = subparsers.add_parser("serve", help="Run the HTTP API")
    serve_parser.add_argument("--port", type=int, help="Port to listen on (default: $PORT or 3000)")
    subparsers.add_parser("setup-db", help="Create all database tables")
    subparsers.add_parser("drop-db", help="Drop all database tables")

    args = parser.parse_args()

    if args.command == "serve":
        serve(args.port)
    elif args.command == "setup-db":
        setup_database()
    elif args.command == "drop-db":
        drop_database()
