#!/usr/bin/env python3
"""
Run the memory API with uvicorn.
"""

import argparse
import sys
from pathlib import Path

import uvicorn

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from ragmemory.core.config import DEBUG


def main(argv=None):
    parser = argparse.ArgumentParser(description="Run the RAG memory API server")
    parser.add_argument("--host", default="127.0.0.1", help="Bind address")
    parser.add_argument("--port", type=int, default=8000, help="Port to listen on")
    args = parser.parse_args(argv)

    uvicorn.run(
        "ragmemory.api.main:create_app",
        factory=True,
        host=args.host,
        port=args.port,
        log_level="debug" if DEBUG else "info",
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
