#!/usr/bin/env python3
"""
Send today's birthday greetings once and exit (for cron instead of the
in-process scheduler).

Usage:
    python scripts/send_birthday_messages.py
"""

import sys

from dotenv import load_dotenv

# Load environment variables
load_dotenv()

from personnel_directory.core.log_config import configure_logging
from personnel_directory.core.scheduler import run_scheduled_birthday_job


def main():
    configure_logging()
    summary = run_scheduled_birthday_job()
    print(f"Birthday messages: {summary.sent} sent, {summary.failed} failed, {summary.skipped} skipped")
    if summary.failed:
        sys.exit(1)


if __name__ == "__main__":
    main()
