import argparse
import asyncio
from datetime import datetime

from .config import settings
from .logger import logger, setup_file_logging
from .restart import next_restart_after, parse_time_of_day


def print_next_restart() -> int:
    if not settings.restart.auto_restart_enabled:
        print("Automatic restart is disabled")
        return 0

    restart_time = parse_time_of_day(settings.restart.auto_restart_time)
    if restart_time is None:
        logger.error(
            f"Invalid auto_restart_time format: {settings.restart.auto_restart_time!r}"
        )
        return 1

    next_restart = next_restart_after(datetime.now(), restart_time)
    print(f"Next restart: {next_restart:%Y-%m-%d %H:%M:%S}")
    return 0


def main() -> int:
    parser = argparse.ArgumentParser(prog="autorestart")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("run", help="run the restart service")
    subparsers.add_parser("next", help="print the next automatic restart time")

    args = parser.parse_args()

    if args.command == "run":
        from .main import run

        setup_file_logging(settings.logs_dir)
        asyncio.run(run(settings))
        return 0

    return print_next_restart()


if __name__ == "__main__":
    raise SystemExit(main())
