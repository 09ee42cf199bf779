"""Azure DevOps PR Inspector - A command-line tool for listing recent Azure DevOps pull requests."""

__version__ = "0.1.0"
__author__ = "Azure DevOps PR Inspector Team"
__email__ = "support@example.com"

# Re-export the click group as package-level entry point
from .cli import cli

__all__ = ["cli", "__version__"]
