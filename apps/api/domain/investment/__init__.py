"""Investment domain module."""
