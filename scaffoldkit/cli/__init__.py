"""Command-line interface: argument parsing, prompts and terminal output."""

from scaffoldkit.cli.main import build_parser, main

__all__ = ["build_parser", "main"]
