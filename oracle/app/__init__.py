from oracle.app.cli import build_parser, main, setup_logging

__all__ = ["build_parser", "main", "setup_logging"]
