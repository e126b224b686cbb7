#!/usr/bin/env python3
"""
Run the automated weekly blog post once (for cron job)
Same as GET /api/cron/run-weekly-post, for hosts that prefer a crontab entry
over an HTTP call. Pass --scheduled to also publish due scheduled topics.
"""

import argparse
import os
import sys
from dotenv import load_dotenv

# Add backend directory to path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

# Load environment variables
load_dotenv()

from config import load_settings
from extensions import AppServices
import logging

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def main(argv=None, services=None) -> int:
    parser = argparse.ArgumentParser(description="Run the automated weekly blog post")
    parser.add_argument("--scheduled", action="store_true", help="also publish due scheduled topics")
    args = parser.parse_args(argv)

    services = services or AppServices(load_settings())
    services.database.init_db()

    logger.info("Running automated weekly post (cron job)")
    result = services.automation.run_automated_weekly_post()
    if result['success']:
        logger.info(f"Draft created: {result['post_title']} ({result['post_id']})")
    else:
        logger.error(result['message'])

    if args.scheduled:
        summary = services.automation.process_scheduled_posts()
        logger.info(f"Scheduled posts: {len(summary['published'])} published, {len(summary['failed'])} failed")
        if summary['failed']:
            return 1

    return 0 if result['success'] else 1


if __name__ == "__main__":
    sys.exit(main())
