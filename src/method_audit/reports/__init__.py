"""Presentation of analysis reports."""
