"""
Subresource Integrity (SRI) for individual deployment assets.

Integrity strings follow the W3C format "<alg>-<base64 digest>", several
space-separated tokens allowed. Only the strongest algorithm present is
checked, as browsers do.
"""

import base64
import hashlib
import hmac
from typing import Dict, List, Tuple

from ...errors import IntegrityMismatch, InvalidArgument
from .merkle import ArtifactSet, Content, _as_bytes, canonicalize

# Weakest to strongest
SRI_ALGORITHMS = ("sha256", "sha384", "sha512")
DEFAULT_SRI_ALGORITHM = "sha384"


def subresource_integrity(content: Content, algorithm: str = DEFAULT_SRI_ALGORITHM) -> str:
    """Integrity string for one asset."""
    if algorithm not in SRI_ALGORITHMS:
        raise InvalidArgument(f"Unsupported SRI algorithm: {algorithm}")
    digest = hashlib.new(algorithm, _as_bytes(content)).digest()
    return f"{algorithm}-{base64.b64encode(digest).decode('ascii')}"


def _parse_integrity(integrity: str) -> List[Tuple[str, bytes]]:
    tokens = []
    for token in integrity.split():
        algorithm, sep, value = token.partition("-")
        if not sep or algorithm not in SRI_ALGORITHMS:
            continue
        value = value.split("?", 1)[0]  # options are reserved
        try:
            tokens.append((algorithm, base64.b64decode(value, validate=True)))
        except ValueError:
            continue
    return tokens


def verify_subresource(content: Content, integrity: str) -> str:
    """
    Check an asset against its integrity metadata.

    Returns:
        The matching integrity token

    Raises:
        InvalidArgument: No usable integrity token was supplied
        IntegrityMismatch: Content does not match
    """
    tokens = _parse_integrity(integrity or "")
    if not tokens:
        raise InvalidArgument(f"No supported integrity metadata in {integrity!r}")

    strongest = max(SRI_ALGORITHMS.index(alg) for alg, _ in tokens)
    algorithm = SRI_ALGORITHMS[strongest]
    actual = hashlib.new(algorithm, _as_bytes(content)).digest()

    for alg, expected in tokens:
        if alg == algorithm and hmac.compare_digest(expected, actual):
            return f"{algorithm}-{base64.b64encode(actual).decode('ascii')}"

    expected_tokens = " ".join(
        f"{alg}-{base64.b64encode(value).decode('ascii')}" for alg, value in tokens if alg == algorithm
    )
    raise IntegrityMismatch(expected_tokens, f"{algorithm}-{base64.b64encode(actual).decode('ascii')}")


def integrity_manifest(artifacts: ArtifactSet, algorithm: str = DEFAULT_SRI_ALGORITHM) -> Dict[str, str]:
    """Integrity string per canonical path, for serving with SRI enabled."""
    return {a.path: subresource_integrity(a.content, algorithm) for a in canonicalize(artifacts)}
