from . import gap, groups
from .groups import GapGroupEngine

__all__ = [
    "gap",
    "groups",
    "GapGroupEngine",
]
