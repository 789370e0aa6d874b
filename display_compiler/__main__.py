#!/usr/bin/env python3
"""
Pictocompile CLI - Entry point for the display grid compiler.

This module allows running the compiler as:
    python -m display_compiler image.png
    pictocompile image.png  (when installed via pip)
"""

from display_compiler.cli import main

if __name__ == "__main__":
    main()
