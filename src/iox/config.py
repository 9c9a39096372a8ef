"""Configuration for the interactive shell."""

from __future__ import annotations

import argparse
from dataclasses import dataclass

from iox.colors import DARK_GRAY, NAMED_COLORS, Color


@dataclass
class Config:
    """Shell configuration."""

    prompt: str = "λ"
    use_powerline: bool = False
    hints: bool = True
    hint_color: Color = DARK_GRAY
    source_name: str = "<stdin>"
    log_level: str = "warning"
    log_file: str | None = None

    @classmethod
    def from_args(cls, args: argparse.Namespace) -> Config:
        config = cls(
            use_powerline=args.powerline,
            hints=not args.no_hints,
            log_level=args.log_level,
            log_file=args.log_file,
        )
        if args.prompt is not None:
            config.prompt = args.prompt
        if args.hint_color is not None:
            config.hint_color = NAMED_COLORS[args.hint_color]
        return config
