"""
CLI commands for bootloader.
"""

from bootloader.cli.destroy import destroy_command
from bootloader.cli.state_query import QUERY_COMMANDS, StateQuery, state_query_command
from bootloader.cli.up import up_command

__all__ = [
    "QUERY_COMMANDS",
    "StateQuery",
    "destroy_command",
    "state_query_command",
    "up_command",
]
