from .schema import SCHEMA_VERSION
from .store import CommandStore

__all__ = ["SCHEMA_VERSION", "CommandStore"]
