"""Clarity - browse and search arXiv papers."""

__version__ = "0.1.0"
