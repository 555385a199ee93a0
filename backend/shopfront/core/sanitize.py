"""String Sanitization — deterministic normalization of untrusted text.

Invariants:
    - sanitize is total: any str in, str out, never raises
    - Result never contains <, >, ' or " and is at most 255 chars
    - Idempotent: sanitize(sanitize(x)) == sanitize(x)
"""

import re

MAX_SANITIZED_LENGTH: int = 255

_STRIPPED_CHARS = re.compile(r"[<>'\"]")


def sanitize(raw: str) -> str:
    """Trim, drop angle brackets and quotes, cap the length."""
    cleaned = _STRIPPED_CHARS.sub("", raw.strip())
    # Removal or truncation can expose new edge whitespace
    return cleaned[:MAX_SANITIZED_LENGTH].strip()
