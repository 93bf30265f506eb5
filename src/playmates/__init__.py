"""Playmates - compare Steam libraries and achievements with your friends."""

__version__ = "0.1.0"
