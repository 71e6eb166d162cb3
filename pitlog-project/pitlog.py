import argparse
import logging
from commands import log, config
# The main entry point for pitlog, the paginated history viewer for Pit repositories
def main(argv=None):
    # The main parser
    parser = argparse.ArgumentParser(description="pitlog: browse the history of a Pit repository one page at a time.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log debugging information to stderr.")
    subparsers = parser.add_subparsers(dest="command", help="Available commands", required=True)

    # Command: log
    log_parser = subparsers.add_parser("log", help="Show one page of commit logs.")
    log_parser.add_argument("revision", nargs="?", default="HEAD", help="Revision to start from, or OLD..NEW for a range.")
    log_parser.add_argument("-p", "--path", help="Only show commits that modify this path (follows renames).")
    log_parser.add_argument("-s", "--start", action="append", help="Commit to start the page at (as found in a Next/Previous link).")
    log_parser.add_argument("-n", "--limit", type=int, help="Number of commits per page (default: log.limit or 100).")
    log_parser.set_defaults(func=log.run)

    # Command: config
    config_parser = subparsers.add_parser("config", help="Set a configuration value such as log.limit.")
    config_parser.add_argument("key", help="The configuration key (e.g., log.limit).")
    config_parser.add_argument("value", help="The configuration value.")
    config_parser.set_defaults(func=config.run)
    # Parse the arguments
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command == "log" and args.limit is not None and args.limit < 0:
        parser.error("--limit must not be negative")

    # If a command was specified, run its function
    if hasattr(args, 'func'):
        args.func(args)
    else:
        parser.print_help()

if __name__ == "__main__":
    main()
