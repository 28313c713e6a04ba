# src/__init__.py — v1
"""ftpbatch — scheduled SFTP batch automation for PDF/TIF print files."""

from ftpbatch.version import __version__

__all__ = ["__version__"]
