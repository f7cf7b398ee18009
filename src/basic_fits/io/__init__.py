"""File acquisition: read whole files and hand them to the decoder."""

from __future__ import annotations

from .reader import read_fits_file, read_fits_header

__all__ = ["read_fits_file", "read_fits_header"]
