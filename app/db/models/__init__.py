# Models package (re-export feature modules for stable imports)
from .kv.entry import KeyValueEntry

__all__ = [
    "KeyValueEntry",
]
