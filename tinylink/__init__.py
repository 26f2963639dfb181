"""Core business logic for tinylink."""

from .registry import LinkRegistry, LinkListing
from .database.models import Link
from .errors import (
    RegistryError,
    InvalidTargetError,
    InvalidCodeError,
    CodeAlreadyExistsError,
    NotFoundError,
    StoreUnavailableError,
)

__version__ = "0.1.0"

__all__ = [
    "LinkRegistry",
    "LinkListing",
    "Link",
    "RegistryError",
    "InvalidTargetError",
    "InvalidCodeError",
    "CodeAlreadyExistsError",
    "NotFoundError",
    "StoreUnavailableError",
]
