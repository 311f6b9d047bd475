"""Command-line chat client with similarity-guided context pruning."""

__version__ = "0.4.0"
