"""Artifact sets from directories on disk."""

import hmac
import logging
from pathlib import Path
from typing import Iterator, List, Union

from ...errors import IntegrityMismatch
from .merkle import Artifact, DigestBuilder, MerkleTree, format_digest, parse_digest

logger = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024


def iter_files(root: Union[str, Path]) -> Iterator[Path]:
    """Regular files below root, in no particular order."""
    root = Path(root)
    if not root.is_dir():
        raise NotADirectoryError(str(root))
    for path in root.rglob("*"):
        if path.is_file():
            yield path


def _chunks(path: Path) -> Iterator[bytes]:
    with path.open("rb") as handle:
        while True:
            chunk = handle.read(CHUNK_SIZE)
            if not chunk:
                break
            yield chunk


def load_artifacts(root: Union[str, Path]) -> List[Artifact]:
    """Read every file below root into memory."""
    root = Path(root)
    return [
        Artifact(path=path.relative_to(root).as_posix(), content=path.read_bytes())
        for path in iter_files(root)
    ]


def tree_for_directory(root: Union[str, Path]) -> MerkleTree:
    """Merkle tree of a directory, streaming file contents."""
    root = Path(root)
    builder = DigestBuilder()
    for path in iter_files(root):
        builder.add(path.relative_to(root).as_posix(), _chunks(path))
    logger.debug(f"Hashed {len(builder)} files under {root}")
    return builder.tree()


def digest_directory(root: Union[str, Path]) -> str:
    """Digest of a directory as it would be deployed."""
    return tree_for_directory(root).digest


def verify_directory(claimed: str, root: Union[str, Path]) -> str:
    """
    Verify a downloaded deployment directory against its digest.

    Raises:
        IntegrityMismatch: Directory content differs from the claimed digest
    """
    expected = parse_digest(claimed)
    actual = tree_for_directory(root).root
    if not hmac.compare_digest(expected, actual):
        raise IntegrityMismatch(format_digest(expected), format_digest(actual))
    return format_digest(actual)
