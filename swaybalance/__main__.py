"""
Main entry point for running sway-balance as a module.

Usage:
    python -m swaybalance [options]
"""

from .cli import main

if __name__ == "__main__":
    import sys

    sys.exit(main())
