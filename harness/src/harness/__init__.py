"""Headless maze attempt harness."""
