"""
Build Policy CLI entry point.

Usage:
    python -m build_policy [COMMAND] [OPTIONS]
"""

from .cli import main

if __name__ == "__main__":
    main()
