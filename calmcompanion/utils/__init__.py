"""Utility Functions Package

This package contains the local storage layer and small helper functions
used throughout the application.
"""

from .helpers import (
    export_filename,
    format_ts,
    journal_entry,
)

from .file_manager import (
    get_app_data_dir,
    LocalStore,
    SLOTS,
)

__all__ = [
    # Helper Functions
    'export_filename',
    'format_ts',
    'journal_entry',

    # File Management
    'get_app_data_dir',
    'LocalStore',
    'SLOTS',
]
