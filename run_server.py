#!/usr/bin/env python3
"""Serve the Lookout API (search + pipeline endpoints) with uvicorn."""

import argparse
import os

import uvicorn
from dotenv import load_dotenv

load_dotenv()


def main():
    parser = argparse.ArgumentParser(description="Lookout API server")
    parser.add_argument("--host", default=os.getenv("LOOKOUT_HOST", "127.0.0.1"), help="Host to bind to")
    parser.add_argument(
        "--port", type=int, default=int(os.getenv("LOOKOUT_PORT", "8000")), help="Port to bind to"
    )
    parser.add_argument("--reload", action="store_true", help="Enable auto-reload")
    parser.add_argument(
        "--log-level",
        default="info",
        choices=["critical", "error", "warning", "info", "debug"],
        help="uvicorn access/server log level",
    )
    args = parser.parse_args()

    uvicorn.run(
        "server.app:create_app",
        factory=True,
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level=args.log_level,
    )


if __name__ == "__main__":
    main()
