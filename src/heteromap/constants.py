"""
Shared constants for heteromap.

This module provides a single source of truth for default values
that are used across multiple modules.
"""

ENV_PREFIX = "HETEROMAP_"
"""Prefix of environment variables read by Settings."""

DEFAULT_COPY_STRATEGY = "deepcopy"
"""Copy strategy of the default storage policy."""
