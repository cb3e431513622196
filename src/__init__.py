"""txflow — dependency-ordered enrichment pipeline for blockchain transactions."""

from txflow.version import __version__

__all__ = ["__version__"]
