#!/usr/bin/env python3
"""
Run script for the foster assignment service
"""

import argparse
import os
import sys
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

from foster_app import create_app  # noqa: E402
from foster_app.build import build_database  # noqa: E402
from foster_app.utils.logger import get_logger  # noqa: E402

logger = get_logger("foster_app.run")


def parse_arguments():
    parser = argparse.ArgumentParser(description='Foster assignment service')
    parser.add_argument('--build-only', action='store_true',
                        help='Create database tables and exit without starting the server')
    parser.add_argument('--demo-data', action='store_true',
                        help='Insert a demo organization with profiles, animals and a group')
    return parser.parse_args()


if __name__ == '__main__':
    args = parse_arguments()
    app = create_app()

    build_database(seed_demo=args.demo_data, app=app)

    if args.build_only:
        logger.info("Build completed. Exiting without starting web server.")
        sys.exit(0)

    debug_mode = os.environ.get('FLASK_DEBUG', 'False').lower() in ('true', '1', 'yes', 'on')
    host = os.environ.get('FLASK_HOST', '127.0.0.1')
    port = int(os.environ.get('FLASK_PORT', '5000'))

    if debug_mode:
        logger.warning("DEBUG MODE ENABLED - Do not use in production!")

    logger.info(f"Starting server on {host}:{port} (debug={debug_mode})")
    app.run(debug=debug_mode, host=host, port=port)
