"""Settings read from the environment.

SYMCORE_LOG_LEVEL        level of the "symcore" logger (default WARNING)
SYMCORE_CHECK_CANONICAL  set to 0/false/no/off to skip the canonical-form asserts in node constructors
"""

import logging
import os

_FALSY = {"0", "false", "no", "off"}


def get_log_level() -> int:
    raw = os.environ.get("SYMCORE_LOG_LEVEL", "WARNING").strip().upper()
    if raw.isdigit():
        return int(raw)
    level = logging.getLevelName(raw)
    # getLevelName returns a str ("Level FOO") for unknown names
    return level if isinstance(level, int) else logging.WARNING


def canonical_checks_enabled() -> bool:
    raw = os.environ.get("SYMCORE_CHECK_CANONICAL")
    if raw is None:
        return True
    return raw.strip().lower() not in _FALSY


CHECK_CANONICAL = canonical_checks_enabled()
