"""Presentation policy: bands and exit codes derived from raw analyzer output."""
