"""
DynamicMap: a heterogeneous map with runtime-verified type tags.

Example:
    >>> from heteromap.core import Key
    >>> from heteromap.dynamic import make_dynamic_map
    >>> m = make_dynamic_map((Key("foo", int), 1), (Key("bar", float), 2.0))
    >>> m.at(Key("foo", int))
    1
    >>> m.find(Key("foo", str)) is None
    True
"""

from heteromap.dynamic._frozen import DynamicMapView
from heteromap.dynamic._handles import (
    DEEP,
    MISSING,
    SHALLOW,
    Entry,
    EntryHandle,
    InsertOutcome,
    StoragePolicy,
    Transfer,
)
from heteromap.dynamic._holder import ErasedHolder
from heteromap.dynamic._map import DynamicMap, make_dynamic_map
from heteromap.dynamic._store import TypeErasedStore

__all__ = [
    "DEEP",
    "MISSING",
    "SHALLOW",
    "DynamicMap",
    "DynamicMapView",
    "Entry",
    "EntryHandle",
    "ErasedHolder",
    "InsertOutcome",
    "StoragePolicy",
    "Transfer",
    "TypeErasedStore",
    "make_dynamic_map",
]
