"""site2desk -- package a website as a standalone desktop application."""

__version__ = "0.1.0"
