"""Top-level launcher for wallpaper-watcher.

Allows running the CLI with `python main.py ...` from the repo root.
"""
import sys

from wallpaper_watcher.cli import main

if __name__ == '__main__':
    sys.exit(main())
