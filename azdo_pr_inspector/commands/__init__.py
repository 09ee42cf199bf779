"""Command implementations invoked by the CLI."""

from .base_command import BaseCommand
from .cache_command import CacheCommand
from .list_command import ListCommand
from .show_command import ShowCommand
from .toggle_command import ToggleCommand
from .viewed_command import ViewedCommand

__all__ = [
    "BaseCommand",
    "CacheCommand",
    "ListCommand",
    "ShowCommand",
    "ToggleCommand",
    "ViewedCommand",
]
