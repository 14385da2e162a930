"""Platform versions, version ranges and availability tracking."""

__version__ = "0.1.0"
__all__ = ["versioning"]