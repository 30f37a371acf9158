"""
Key model shared by the static and dynamic maps.

- KeyTag: process-wide identity token for one value type
- Key: (name, tag) pair addressing a dynamic map entry
- conversion: value conformance and convertibility rules
"""

import heteromap.core.conversion as conversion
from heteromap.core.keys import Key, dk
from heteromap.core.tags import KeyTag

__all__ = ["Key", "KeyTag", "conversion", "dk"]
