"""Product domain module."""
