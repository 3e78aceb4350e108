"""Composable command line argument parsers with generated help messages."""

__version__ = "0.1.0"

__all__ = ["args", "errors", "info", "meta", "params", "parser"]