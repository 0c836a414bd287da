"""Photography portfolio backend: bucket listing, manifest generation and photo proxy."""

__version__ = "0.1.0"
