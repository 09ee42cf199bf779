#!/usr/bin/env python
import sys

from azdo_pr_inspector import cli

if __name__ == "__main__":
    # Simulate command line arguments for the list command
    # Example: list the last two weeks of pull requests, bypassing the cache
    sys.argv = ["azdo-pr-inspector", "list", "--days", "14", "--refresh"]
    cli()
