"""
heteromap - heterogeneous, type-safe associative containers.

- StaticMap: a fixed schema resolved once, at construction
- DynamicMap: an open schema verified against type tags on every access
"""

import importlib.metadata as _metadata

# Version is defined in pyproject.toml - read it and parse into tuple (primary representation)
_raw_version = _metadata.version("heteromap")
__version_info__: tuple[int, int, int] = tuple(int(x) for x in _raw_version.split(".")[:3])  # type: ignore[assignment]
__version__: str = ".".join(str(x) for x in __version_info__)

from heteromap.bridge import static_key_to_dynamic_key  # noqa: E402
from heteromap.config import Settings  # noqa: E402
from heteromap.core import Key, KeyTag, dk  # noqa: E402
from heteromap.dynamic import DynamicMap, make_dynamic_map  # noqa: E402
from heteromap.static import StaticMap, ik, make_static_map, tk  # noqa: E402

__all__ = [
    "__version__",
    "__version_info__",
    "DynamicMap",
    "Key",
    "KeyTag",
    "Settings",
    "StaticMap",
    "dk",
    "ik",
    "make_dynamic_map",
    "make_static_map",
    "static_key_to_dynamic_key",
    "tk",
]
