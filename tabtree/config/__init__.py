from .config import TabTreeConfig
from .file import TabTreeConfigFile, read_document

__all__ = ["TabTreeConfig", "TabTreeConfigFile", "read_document"]
