from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

if TYPE_CHECKING:
    from collections.abc import Callable


@pytest.fixture
def fixed_entropy() -> Callable[[], int]:
    """Entropy source that always returns the same seed."""
    return lambda: 1337
