"""
StaticMap: a heterogeneous map over a fixed, construction-time schema.

Keys and their value types are supplied all at once. The map sorts them,
rejects repeated names, builds a balanced tree and plans the descent for
every name up front.

Example:
    >>> from heteromap.static import ik, make_static_map, tk
    >>> m = make_static_map((tk("foo", int), 1), (tk("baz", str), "hello"))
    >>> m[tk("baz", str)]
    'hello'
    >>> m[ik("foo")]
    1
"""

from heteromap.static._frozen import StaticMapView
from heteromap.static._map import StaticMap, make_static_map
from heteromap.static._schema import Accessor, InferredKey, Schema, StaticKey, ik, tk

__all__ = [
    "Accessor",
    "InferredKey",
    "Schema",
    "StaticKey",
    "StaticMap",
    "StaticMapView",
    "ik",
    "make_static_map",
    "tk",
]
