"""Link store layer."""

from .base import LinkStore, DuplicateCodeError
from .memory import InMemoryLinkStore
from .models import Link

__all__ = ["LinkStore", "DuplicateCodeError", "InMemoryLinkStore", "Link"]
