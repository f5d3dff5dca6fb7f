# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Jeff Culverhouse
"""Container health probe: healthy while the service keeps touching its ready file."""
import os
import sys
import time

from .mixins.helpers import READY_FILE


def is_healthy(path: str = READY_FILE, max_age: int = 90) -> bool:
    try:
        st = os.stat(path)
    except FileNotFoundError:
        return False
    return time.time() - st.st_mtime < max_age


def main() -> int:
    max_age = int(os.getenv("HEALTH_MAX_AGE", "90"))  # seconds
    return 0 if is_healthy(READY_FILE, max_age) else 1


if __name__ == "__main__":
    sys.exit(main())
