"""Main entry point for the gradeavg application.

Handles command-line argument parsing, reads missing credentials from the
terminal and runs the grade average computation. This is the only place
where errors are turned into an exit code.
"""

import argparse
from pathlib import Path
import sys

from loguru import logger

from hda.gradeavg.config import Config
from hda.gradeavg.credentials import read_credentials
from hda.gradeavg.error import GradeAvgError


def main(argv: list[str] | None = None) -> int:
    """Entry point.

    Parses arguments, initializes configuration and logging, and computes the
    grade average.

    Returns:
        int: The process exit code.
    """
    parser = argparse.ArgumentParser(description="OBS grade average calculator")
    parser.add_argument("--username", default="", help="Your OBS username")
    parser.add_argument("--password", default="", help="Your OBS password")
    parser.add_argument(
        "--layout",
        help="Overview page layout: 'grades', 'legacy', or a .yaml/.json layout file",
    )
    parser.add_argument("--base-url", help="OBS base URL")
    parser.add_argument("--verbose", action="store_true", help="Log debug output to stderr")
    args = parser.parse_args(argv)

    try:
        conf = Config()
        if args.layout:
            conf.layout = args.layout
        if args.base_url:
            conf.base_url = args.base_url.rstrip("/") + "/"

        logger.remove()
        logger.add(sys.stderr, level="DEBUG" if args.verbose else "WARNING")
        logger.add(Path(conf.log_dir) / "{time}.log", rotation="1 day", level="DEBUG")

        username, password = read_credentials(
            args.username or conf.username, args.password or conf.password
        )

        from hda.gradeavg.module.grade_average import GradeAverage

        GradeAverage(conf).start(username, password)
    except GradeAvgError as e:
        logger.error(e)
        print(f"Fatal error: {e}")
        return 1
    except KeyboardInterrupt:
        print()
        return 130

    return 0


if __name__ == "__main__":
    sys.exit(main())
