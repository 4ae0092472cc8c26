"""
tpar-lint core library.

This package contains the core functionality:
- parser: reading report files into fixed-width records
- rules: record layouts, field validators and the file scan
"""

__all__: list[str] = []
