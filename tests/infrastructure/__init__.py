"""
Unified test infrastructure for the template engine.

This package contains common utilities and helpers
used across all tests to avoid code duplication.

Modules:
- file_utils: Utilities for creating files and directories
- rendering_utils: Sample data, filters and a synchronous render helper
"""

from .file_utils import write
from .rendering_utils import render_template, scan_parse, SAMPLE_DATA, SAMPLE_FILTERS

__all__ = [
    # File utilities
    "write",

    # Rendering utilities
    "render_template", "scan_parse", "SAMPLE_DATA", "SAMPLE_FILTERS",
]
