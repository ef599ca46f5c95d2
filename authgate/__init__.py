"""Request authorization through pluggable filter chains, run singly or on a worker pool."""

__version__ = "0.1.0"
__all__ = ["check", "service"]