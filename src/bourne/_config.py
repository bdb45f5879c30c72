"""
Import-time configuration read from the environment.

These switches are fixed for the lifetime of the process, mirroring a
build-time feature flag: changing the environment after import has no effect.
"""

import logging
import os
from collections.abc import Mapping

logger = logging.getLogger(__name__)

_FALSE_VALUES = frozenset({"0", "false", "no", "off"})
_FALLBACK_MAX_DEPTH = 256


def read_max_depth(environ: Mapping[str, str]) -> int:
    """Nesting limit from BOURNE_MAX_DEPTH, or 256 if unset or unusable."""
    raw = environ.get("BOURNE_MAX_DEPTH")
    if raw is None:
        return _FALLBACK_MAX_DEPTH
    try:
        depth = int(raw)
    except ValueError:
        depth = 0
    if depth < 1:
        logger.warning(
            "Ignoring BOURNE_MAX_DEPTH=%r: expected a positive integer, "
            "using %d",
            raw,
            _FALLBACK_MAX_DEPTH,
        )
        return _FALLBACK_MAX_DEPTH
    return depth


# Object key iteration follows insertion order unless explicitly disabled
PRESERVE_ORDER = (
    os.environ.get("BOURNE_PRESERVE_ORDER", "1").strip().lower()
    not in _FALSE_VALUES
)

# Shared nesting limit for parsing and serialization
DEFAULT_MAX_DEPTH = read_max_depth(os.environ)

# Profiling infrastructure - zero-cost when disabled
PROFILE_HOT_PATHS = __debug__ and "BOURNE_PROFILE" in os.environ
