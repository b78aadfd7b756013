"""User domain module."""
