"""Time utilities."""

import time


def epoch_seconds() -> int:
    """Return the current wall-clock time as whole seconds since the epoch."""
    return int(time.time())
