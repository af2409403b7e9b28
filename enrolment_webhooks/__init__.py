"""Tally webhook relay for enrolment submissions and team updates."""

__version__ = "0.1.0"
