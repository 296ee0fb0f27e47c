"""Vector workflow: provision, populate, index and search a vector collection."""

__version__ = "0.1.0"
