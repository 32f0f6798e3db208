#!/usr/bin/env python3
"""
Start the Q&A check-in API with uvicorn.
Initializes the database first so a fresh install has its bucket ready.
"""

import argparse
import sys
from pathlib import Path

import uvicorn

# Add the parent directory to sys.path to import our modules
sys.path.insert(0, str(Path(__file__).parent.parent))

from qa_checkin.core.config import API_HOST, API_PORT, get_db_path, get_log_level, validate_config
from qa_checkin.core.db import Database


def main():
    parser = argparse.ArgumentParser(description='Serve the Q&A check-in API')
    parser.add_argument('--host', default=API_HOST, help=f'Bind address (default: {API_HOST})')
    parser.add_argument('--port', type=int, default=API_PORT, help=f'Port to listen on (default: {API_PORT})')
    parser.add_argument('--reload', action='store_true', help='Reload on code changes')
    args = parser.parse_args()

    issues = validate_config()
    if issues:
        for issue in issues:
            print(f"❌ {issue}")
        sys.exit(1)

    Database(get_db_path()).init_db()

    print(f"🚀 Serving Q&A check-in API on http://{args.host}:{args.port}")
    uvicorn.run(
        "qa_checkin.api.main:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level=get_log_level().lower(),
    )


if __name__ == '__main__':
    main()
