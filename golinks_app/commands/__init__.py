"""
Short-link commands: handlers, command table and dispatcher.
"""

from .replies import LinkEmbed, Reply, Suggestion, NO_LINKS_SUGGESTION
from .registry import (
    COMMANDS,
    CommandSpec,
    Invocation,
    OptionSpec,
    UnknownCommandError,
    complete,
    dispatch,
    get_command,
)

__all__ = [
    "LinkEmbed",
    "Reply",
    "Suggestion",
    "NO_LINKS_SUGGESTION",
    "COMMANDS",
    "CommandSpec",
    "Invocation",
    "OptionSpec",
    "UnknownCommandError",
    "complete",
    "dispatch",
    "get_command",
]
