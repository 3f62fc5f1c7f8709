"""Finishing Session Tracker — shooting-practice log, summary and next-session advice."""

__version__ = "0.1.0"
