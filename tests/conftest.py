"""Pytest bootstrap for local source imports and global state isolation.

The ``pytest`` console script can run with a sys.path that excludes the
repository root, so the root is prepended to make ``import pls`` resolve to
the local package. Every test also gets a user-level config path that does
not exist, so a developer's own ``config.yml`` never leaks into results, and
a ``pls`` logger without handlers left behind by earlier CLI runs.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Iterator
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parent.parent

if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))


def _reset_package_logger() -> None:
    logger = logging.getLogger("pls")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


@pytest.fixture(autouse=True)
def _no_user_config(tmp_path_factory: pytest.TempPathFactory, monkeypatch: pytest.MonkeyPatch) -> None:
    missing = tmp_path_factory.mktemp("user-config") / "config.yml"
    monkeypatch.setattr("pls.config.sources.USER_CONFIG_PATH", missing)


@pytest.fixture(autouse=True)
def _fresh_package_logger() -> Iterator[None]:
    _reset_package_logger()
    yield
    _reset_package_logger()
