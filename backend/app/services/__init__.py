"""Submission handling."""
