"""Helpers for the PyBucket test suites."""
