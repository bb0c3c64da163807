"""Utility functions for SharePoint Uploader (spupload)."""

import os
from http import HTTPStatus


def status_line(response):
    """Return the HTTP status line of a response, e.g. ``404 Not Found``.

    Falls back to the standard reason phrase when the response carries none.
    """
    reason = response.reason
    if not reason:
        try:
            reason = HTTPStatus(response.status_code).phrase
        except ValueError:
            reason = ""
    return f"{response.status_code} {reason}".strip()


def format_size(size_bytes):
    """Format a byte count for display."""
    size = float(size_bytes)
    for unit in ["B", "KB", "MB", "GB"]:
        if size < 1024 or unit == "GB":
            break
        size /= 1024

    if unit == "B":
        return f"{int(size)} B"
    return f"{size:.1f} {unit}"


def validate_path_exists(path):
    """Check if a path exists and return its type."""
    if not os.path.exists(path):
        return None
    elif os.path.isfile(path):
        return "file"
    elif os.path.isdir(path):
        return "directory"
    else:
        return "other"
