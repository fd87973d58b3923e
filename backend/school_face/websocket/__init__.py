
from .manager import ConnectionManager

__all__ = ["ConnectionManager"]
