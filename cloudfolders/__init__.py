"""cloudfolders - path-addressed folders, file records and share links."""

__version__ = "1.0.0"
