"""Resource identity — turn a URL or file path into a stable file name stem."""

from __future__ import annotations

import re

_PREFIX_PATTERN = re.compile(r"www\.|^(?:http://|/|C:\\)")
_UNSAFE_CHARS = re.compile(r"[^0-9A-Za-z.]")


def resource_identity(resource_name: str) -> str:
    """Trim and sanitize a resource name for use as a file name.

    Every ``www.`` is removed along with a leading ``http://``, ``/`` or
    ``C:\\``, then anything outside ``[0-9A-Za-z.]`` becomes ``_``. The
    mapping is lossy: distinct names can share an identity.
    """
    trimmed = _PREFIX_PATTERN.sub("", resource_name)
    return _UNSAFE_CHARS.sub("_", trimmed)
