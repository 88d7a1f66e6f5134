"""Walkthroughs showing ``twiglet`` in a small application."""

from .petshop import PORT, run_demo

__all__ = ["PORT", "run_demo"]
