"""
KEFEX Legacy Command-Line Interface
===================================

- **kfxview**: import, inspect and checksum RAMView projects

The tool is a Click-based CLI application.
"""

__all__ = ["kfxview"]
