"""Pytest configuration providing basic asyncio support and a clean config."""

from __future__ import annotations

import asyncio
import inspect

import pytest

import config as config_module

_CONFIG_ENV_VARS = [
    "HUGGING_FACE_API_KEY",
    "HF_API_URL",
    "HF_TIMEOUT_SECONDS",
    "HF_MAX_ATTEMPTS",
    "DEFAULT_MODEL",
    "PHRASE_WEIGHT",
    "MAX_BODY_BYTES",
    "PORT",
]


@pytest.fixture(autouse=True)
def clean_config(monkeypatch: pytest.MonkeyPatch):
    """Start every test from defaults, without a Hugging Face key."""
    for key in _CONFIG_ENV_VARS:
        monkeypatch.delenv(key, raising=False)
    cfg = config_module.reset_config()
    yield cfg
    config_module.reset_config()


def pytest_pyfunc_call(pyfuncitem):  # pragma: no cover - pytest hook
    """Allow pytest to run ``async def`` tests without extra plugins."""
    test_func = pyfuncitem.obj

    if inspect.iscoroutinefunction(test_func):
        funcargs = pyfuncitem.funcargs
        sig = inspect.signature(test_func)
        call_args = {
            name: value
            for name, value in funcargs.items()
            if name in sig.parameters
        }
        loop = asyncio.new_event_loop()
        try:
            asyncio.set_event_loop(loop)
            loop.run_until_complete(test_func(**call_args))
        finally:
            asyncio.set_event_loop(None)
            loop.close()
        return True
    return None
