"""Penalty form service."""
