from __future__ import annotations

import argparse
import logging
import sys
from typing import Callable, Dict, List, Optional

from rssit.handlers.articles_handler import articles_help_text, handle_articles
from rssit.handlers.config_handler import apply_overrides, config_help_text, handle_config
from rssit.handlers.rules_handler import handle_rules, rules_help_text
from rssit.utils.config_manager import config_manager
from rssit.utils.configure_logging import configure_logger

logger = logging.getLogger(__name__)

COMMANDS: Dict[str, Callable[[List[str]], int]] = {
    "rules": handle_rules,
    "articles": handle_articles,
    "config": handle_config,
}

HELP_TEXT = "\n\n".join([
    "Usage: rssit [--log-level LEVEL] [--set key.path=value]... <command> [args]",
    rules_help_text,
    articles_help_text,
    config_help_text,
])


def main(argv: Optional[List[str]] = None) -> int:
    """Entrypoint of the 'rssit' command line tool."""
    parser = argparse.ArgumentParser(prog="rssit", add_help=False, allow_abbrev=False)
    parser.add_argument("--log-level", default=None)
    parser.add_argument("--set", action="append", default=[], metavar="KEY=VALUE")
    parser.add_argument("-h", "--help", action="store_true")
    pargs, rest = parser.parse_known_args(sys.argv[1:] if argv is None else argv)

    configure_logger(pargs.log_level or config_manager.get_nested("debug.level", "WARNING"))

    if not apply_overrides(pargs.set):
        return 1

    if pargs.help or not rest:
        print(HELP_TEXT)
        return 0

    name, args = rest[0], rest[1:]
    handler = COMMANDS.get(name)
    if handler is None:
        print(f"Unknown command: {name}")
        print(HELP_TEXT)
        return 1

    logger.debug("Running command %r with args %r.", name, args)
    return handler(args)


if __name__ == "__main__":
    sys.exit(main())
