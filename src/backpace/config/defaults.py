r"""Default values applied to fields omitted from a strategy
descriptor."""

from __future__ import annotations

__all__ = [
    "DEFAULT_DELAY",
    "DEFAULT_FACTOR",
    "DEFAULT_JITTER_ENABLED",
    "DEFAULT_JITTER_SEED",
    "DEFAULT_MAX_DELAY",
    "DEFAULT_MAX_RETRIES",
    "DEFAULT_MAX_TOTAL_DELAY",
]

from datetime import timedelta

# Default constant delay, and initial delay of the growing strategies
DEFAULT_DELAY = timedelta(milliseconds=500)

# Default maximum number of delays produced by a generator
# Set the field to None for an unbounded generator
DEFAULT_MAX_RETRIES = 4

# Jitter is enabled unless explicitly disabled
DEFAULT_JITTER_ENABLED = True

# No seed: the jitter generator is seeded from process entropy
DEFAULT_JITTER_SEED = None

# Default growth factor of the exponential strategy
# With 500ms: 500ms, 1s, 2s, 4s, ...
DEFAULT_FACTOR = 2.0

# Default cap applied to every single delay
DEFAULT_MAX_DELAY = timedelta(seconds=30)

# Default budget for the sum of all delays (exponential strategy only)
DEFAULT_MAX_TOTAL_DELAY = timedelta(seconds=60)
