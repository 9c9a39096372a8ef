"""Entry point for the iox shell."""

from __future__ import annotations

import argparse
import logging
import sys

from iox import __version__
from iox.colors import NAMED_COLORS

logger = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="iox",
        description="Interactive Python shell with bracket-aware multi-line input",
    )
    parser.add_argument("--powerline", action="store_true", help="Use a powerline prompt (needs a patched font)")
    parser.add_argument("--no-hints", action="store_true", help="Disable inline completion hints")
    parser.add_argument("--prompt", default=None, help="Prompt text (default: λ)")
    parser.add_argument("--hint-color", default=None, choices=sorted(NAMED_COLORS), help="Color of completion hints")
    parser.add_argument("--log-level", default="warning", choices=["debug", "info", "warning", "error"])
    parser.add_argument("--log-file", default=None, help="Write log messages to this file")
    parser.add_argument("--version", action="version", version=f"iox {__version__}")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level.upper()),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        filename=args.log_file,
    )

    from iox.config import Config
    from iox.shell import Shell
    from iox.terminal import ProcessTerminal

    config = Config.from_args(args)
    if config.hints and not sys.stdin.isatty():
        # Hints need raw key reads
        logger.info("stdin is not a terminal, disabling hints")
        config.hints = False
    shell = Shell(ProcessTerminal(), config)
    shell.run()


if __name__ == "__main__":
    main()
