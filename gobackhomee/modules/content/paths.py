"""
Artifact path canonicalization.

Canonical form (protocol v1):
- Unicode NFC
- "/" separators (backslashes are converted)
- relative: leading "./" and "/" removed
- case-sensitive
- no empty, "." or ".." segments, no NUL
"""

import unicodedata

from ...errors import InvalidArtifactPath


def canonical_path(path: str) -> str:
    """
    Canonicalize an artifact path.

    Raises:
        InvalidArtifactPath: If the path cannot name a file inside a deployment

    Example:
        >>> canonical_path("./assets\\\\app.js")
        'assets/app.js'
    """
    if not isinstance(path, str):
        raise InvalidArtifactPath(f"Artifact path must be a string, got {type(path).__name__}")

    normalized = unicodedata.normalize("NFC", path).replace("\\", "/")
    if "\x00" in normalized:
        raise InvalidArtifactPath(f"Artifact path contains NUL: {path!r}")

    while normalized.startswith("./"):
        normalized = normalized[2:]
    normalized = normalized.lstrip("/")

    if not normalized:
        raise InvalidArtifactPath(f"Artifact path is empty: {path!r}")

    for segment in normalized.split("/"):
        if segment in ("", ".", ".."):
            raise InvalidArtifactPath(f"Artifact path has an invalid segment: {path!r}")

    return normalized


def sort_key(canonical: str) -> bytes:
    """Ordering key: UTF-8 bytes of the canonical path."""
    return canonical.encode("utf-8")
