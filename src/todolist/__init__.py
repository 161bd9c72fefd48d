"""Local task store and first-launch import for the to-do list app."""

__version__ = "1.0.0"
