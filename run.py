#!/usr/bin/env python3
"""Launch the Blender render monitor.

Usage:
    python run.py -i scene.blend -o frames/ -s 1 -e 250 [--config render-monitor.yaml] [--debug] [--trace] [--verbose]
"""
import asyncio
import sys

from render_monitor.main import main

if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
