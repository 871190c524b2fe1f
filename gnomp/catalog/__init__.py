"""Remote extension catalog."""

from .client import ExtensionCatalog

__all__ = ["ExtensionCatalog"]
