"""iox: interactive shell with bracket-aware multi-line input and inline hints."""

__version__ = "0.1.0"

# ANSI rendering
from iox.ansi import contains_escapes, purify, sanitize, write, write_line

# Colors
from iox.colors import (
    BLACK,
    BLUE,
    CYAN,
    DARK_BLUE,
    DARK_CYAN,
    DARK_GRAY,
    DARK_GREEN,
    DARK_MAGENTA,
    DARK_RED,
    DARK_YELLOW,
    DEFAULT,
    GRAY,
    GREEN,
    MAGENTA,
    RED,
    WHITE,
    YELLOW,
    BaseColor,
    Color,
)

# Configuration
from iox.config import Config

# Multi-line editing
from iox.editor import EditorSession, MultilineEditor

# Errors
from iox.errors import (
    CompileError,
    ExecutionError,
    GroupingMismatchError,
    IoxError,
    SyntaxErrorDetail,
    TokenizeError,
)

# Inline hints
from iox.hinter import CompletionSource, HintEngine, HintState

# Keyboard input
from iox.keys import Key, KeyEvent, parse_key, split_keys

# Language interfaces
from iox.language import Evaluator, MemberSource, Token, TokenClass, Tokenizer

# Powerline prompts
from iox.powerline import PowerlineBuilder, powerline

# Pretty printing
from iox.pretty import format_value, write_value

# Prompts
from iox.prompt import PromptStack, PromptStackUnderflow

# Shell
from iox.shell import Shell

# Terminal
from iox.terminal import ProcessTerminal, Terminal

# Utilities
from iox.utils import visible_width

__all__ = [
    "__version__",
    # ANSI rendering
    "contains_escapes",
    "purify",
    "sanitize",
    "write",
    "write_line",
    # Colors
    "BLACK",
    "BLUE",
    "CYAN",
    "DARK_BLUE",
    "DARK_CYAN",
    "DARK_GRAY",
    "DARK_GREEN",
    "DARK_MAGENTA",
    "DARK_RED",
    "DARK_YELLOW",
    "DEFAULT",
    "GRAY",
    "GREEN",
    "MAGENTA",
    "RED",
    "WHITE",
    "YELLOW",
    "BaseColor",
    "Color",
    # Configuration
    "Config",
    # Multi-line editing
    "EditorSession",
    "MultilineEditor",
    # Errors
    "CompileError",
    "ExecutionError",
    "GroupingMismatchError",
    "IoxError",
    "SyntaxErrorDetail",
    "TokenizeError",
    # Inline hints
    "CompletionSource",
    "HintEngine",
    "HintState",
    # Keyboard input
    "Key",
    "KeyEvent",
    "parse_key",
    "split_keys",
    # Language interfaces
    "Evaluator",
    "MemberSource",
    "Token",
    "TokenClass",
    "Tokenizer",
    # Powerline prompts
    "PowerlineBuilder",
    "powerline",
    # Pretty printing
    "format_value",
    "write_value",
    # Prompts
    "PromptStack",
    "PromptStackUnderflow",
    # Shell
    "Shell",
    # Terminal
    "ProcessTerminal",
    "Terminal",
    # Utilities
    "visible_width",
]
