"""Tracker core — form validation, session summary, next-session advisor."""

from finishing.tracker.advisor import compute_advice, next_suggestion
from finishing.tracker.aggregator import conversion, summarize
from finishing.tracker.validator import build_record, validate

__all__ = ["build_record", "compute_advice", "conversion", "next_suggestion", "summarize", "validate"]
