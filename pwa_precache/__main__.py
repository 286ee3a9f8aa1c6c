"""
Main entry point for the pwa_precache package.

Allows running the builder as: python -m pwa_precache
"""

from pwa_precache.cli import main

if __name__ == "__main__":
    raise SystemExit(main())
