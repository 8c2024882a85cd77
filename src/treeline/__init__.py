"""
Treeline package initialisation.

Exposes the public API for counting cells visible from outside a height map and
scoring each cell's view along the four cardinal directions.
"""

from importlib import metadata


def get_version() -> str:
    """Return the installed package version, falling back to source version during development."""
    try:
        return metadata.version("treeline")
    except metadata.PackageNotFoundError:  # pragma: no cover - only occurs during dev
        return "0.1.0"


__all__ = ["get_version"]
