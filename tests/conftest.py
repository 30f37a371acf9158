"""
Shared pytest fixtures for heteromap tests.

This file is automatically loaded by pytest. Fixtures defined here are
available to all test files without explicit imports.
"""

import os as _os
import typing as _typing
import unittest.mock as _mock

import pytest as _pytest

import heteromap.config as config
import heteromap.core as core
import heteromap.dynamic as dynamic
import heteromap.static as static

# Environment keys that should be cleared for isolated tests
ENV_KEYS_TO_CLEAR = [
    "HETEROMAP_VERIFY_VALUES",
    "HETEROMAP_COPY_STRATEGY",
]


@_pytest.fixture(autouse=True)
def _reset_settings_cache() -> _typing.Iterator[None]:
    """Drop cached settings so environment patches take effect."""
    config.get_settings.cache_clear()
    yield
    config.get_settings.cache_clear()


@_pytest.fixture
def clean_env() -> dict[str, str]:
    """
    Return environment dict with heteromap keys removed.

    Use with mock.patch.dict to isolate tests from the actual environment.
    """
    return {k: v for k, v in _os.environ.items() if k not in ENV_KEYS_TO_CLEAR}


@_pytest.fixture
def isolated_env(clean_env: dict[str, str]):
    """
    Context manager that isolates tests from environment variables.

    Usage:
        def test_something(isolated_env):
            with isolated_env:
                settings = config.Settings()
    """
    return _mock.patch.dict(_os.environ, clean_env, clear=True)


@_pytest.fixture
def settings() -> config.Settings:
    """Explicit default settings, independent of the environment."""
    return config.Settings(verify_values=True, copy_strategy="deepcopy")


@_pytest.fixture
def unchecked_settings() -> config.Settings:
    """Settings with value verification turned off."""
    return config.Settings(verify_values=False, copy_strategy="deepcopy")


@_pytest.fixture
def example_static_map(settings: config.Settings) -> static.StaticMap:
    """The foo/bar/baz static map."""
    return static.make_static_map(
        (static.tk("foo", int), 1),
        (static.tk("bar", float), 2.0),
        (static.tk("baz", str), "hello"),
        settings=settings,
    )


@_pytest.fixture
def example_dynamic_map(settings: config.Settings) -> dynamic.DynamicMap:
    """The foo/bar/baz dynamic map."""
    return dynamic.make_dynamic_map(
        (core.Key("foo", int), 1),
        (core.Key("bar", float), 2.0),
        (core.Key("baz", str), "hello"),
        settings=settings,
    )
