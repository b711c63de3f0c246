"""Pytest fixtures shared by the fusion test suite.

Examples
--------
Run the behavioural scenarios only:

>>> pytest tests/steps -v
"""

from __future__ import annotations

import asyncio
import typing as typ

import pytest

if typ.TYPE_CHECKING:
    import collections.abc as cabc


@pytest.fixture
def _function_scoped_runner() -> cabc.Iterator[asyncio.Runner]:
    """Provide a function-scoped asyncio.Runner for sync BDD steps."""
    with asyncio.Runner() as runner:
        yield runner

