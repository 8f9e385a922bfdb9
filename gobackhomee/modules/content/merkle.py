"""
Content-addressed deployment digests.

A deployment's Hash is the root of a binary Merkle tree over its files.
Protocol v1 pins every parameter; changing any of them changes digests
already persisted in Deployment records, so it needs a new version:

    leaf  = SHA256(0x00 || uint64_be(len(path)) || path || content)
    node  = SHA256(0x01 || left || right)
    empty = SHA256(b"")

Leaves are ordered by the UTF-8 bytes of their canonical paths. An odd
trailing node is paired with a copy of itself. The digest string is
"sha256-merkle-v1:" followed by the lowercase hex root.
"""

import hashlib
import hmac
import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

from ...errors import IntegrityMismatch, InvalidArgument, InvalidArtifactPath
from .paths import canonical_path, sort_key

logger = logging.getLogger(__name__)

PROTOCOL_VERSION = "v1"
HASH_NAME = "sha256"
DIGEST_PREFIX = f"{HASH_NAME}-merkle-{PROTOCOL_VERSION}:"
DIGEST_SIZE = 32

LEAF_PREFIX = b"\x00"
NODE_PREFIX = b"\x01"

EMPTY_ROOT = hashlib.sha256(b"").digest()


Content = Union[bytes, bytearray, memoryview, str]


@dataclass(frozen=True)
class Artifact:
    """One file of a deployment: relative path and bytes."""
    path: str
    content: bytes


ArtifactSet = Union[
    Mapping[str, Content],
    Iterable[Union[Artifact, Tuple[str, Content]]],
]


def _as_bytes(content: Content) -> bytes:
    if isinstance(content, str):
        return content.encode("utf-8")
    if isinstance(content, (bytes, bytearray, memoryview)):
        return bytes(content)
    raise TypeError(f"Artifact content must be bytes or str, got {type(content).__name__}")


def format_digest(root: bytes) -> str:
    return DIGEST_PREFIX + root.hex()


EMPTY_DIGEST = format_digest(EMPTY_ROOT)


def parse_digest(digest: str) -> bytes:
    """
    Parse a digest string into its root bytes.

    Raises:
        InvalidArgument: Malformed digest or unsupported protocol version
    """
    if not isinstance(digest, str):
        raise InvalidArgument("Digest must be a string")
    raw = digest.strip()
    if not raw.startswith(DIGEST_PREFIX):
        raise InvalidArgument(f"Unsupported digest format (expected {DIGEST_PREFIX}...): {digest!r}")
    hex_part = raw[len(DIGEST_PREFIX):].lower()
    if len(hex_part) != DIGEST_SIZE * 2 or any(ch not in "0123456789abcdef" for ch in hex_part):
        raise InvalidArgument(f"Digest root must be {DIGEST_SIZE * 2} hex characters: {digest!r}")
    return bytes.fromhex(hex_part)


def _leaf_hasher(canonical: str):
    encoded = canonical.encode("utf-8")
    hasher = hashlib.sha256()
    hasher.update(LEAF_PREFIX)
    hasher.update(len(encoded).to_bytes(8, "big"))
    hasher.update(encoded)
    return hasher


def leaf_hash(path: str, content: Content) -> bytes:
    """Leaf digest of one artifact (path is canonicalized first)."""
    hasher = _leaf_hasher(canonical_path(path))
    hasher.update(_as_bytes(content))
    return hasher.digest()


def node_hash(left: bytes, right: bytes) -> bytes:
    return hashlib.sha256(NODE_PREFIX + left + right).digest()


def canonicalize(artifacts: ArtifactSet) -> List[Artifact]:
    """
    Canonicalize an artifact set into sorted (path, bytes) pairs.

    Enumeration order of the input never matters.

    Raises:
        InvalidArtifactPath: Invalid path, or two paths that canonicalize
            to the same name
    """
    items = artifacts.items() if isinstance(artifacts, Mapping) else artifacts

    by_path: Dict[str, Artifact] = {}
    for item in items:
        if isinstance(item, Artifact):
            path, content = item.path, item.content
        else:
            path, content = item
        canonical = canonical_path(path)
        if canonical in by_path:
            raise InvalidArtifactPath(f"Duplicate artifact path after canonicalization: {canonical}")
        by_path[canonical] = Artifact(path=canonical, content=_as_bytes(content))

    return [by_path[path] for path in sorted(by_path, key=sort_key)]


@dataclass(frozen=True)
class MerkleProof:
    """Inclusion proof: the sibling hashes from a leaf up to the root."""
    index: int
    siblings: Tuple[bytes, ...]

    def to_dict(self) -> Dict[str, object]:
        return {"index": self.index, "siblings": [s.hex() for s in self.siblings]}

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> "MerkleProof":
        return cls(
            index=int(data["index"]),
            siblings=tuple(bytes.fromhex(s) for s in data["siblings"]),
        )


class MerkleTree:
    """
    Binary Merkle tree over ordered leaf hashes.

    levels[0] holds the leaves, levels[-1] the root. Levels are stored
    without padding; a missing right sibling means "pair with self".
    """

    def __init__(self, leaves: Sequence[bytes], paths: Optional[Sequence[str]] = None):
        if paths is not None and len(paths) != len(leaves):
            raise ValueError("paths and leaves must have the same length")
        self.paths: Tuple[str, ...] = tuple(paths or ())
        self._index = {path: i for i, path in enumerate(self.paths)}
        self.levels: List[List[bytes]] = self._build(list(leaves))

    @staticmethod
    def _build(leaves: List[bytes]) -> List[List[bytes]]:
        if not leaves:
            return [[]]
        levels = [leaves]
        level = leaves
        while len(level) > 1:
            parents = []
            for i in range(0, len(level), 2):
                left = level[i]
                right = level[i + 1] if i + 1 < len(level) else left
                parents.append(node_hash(left, right))
            levels.append(parents)
            level = parents
        return levels

    @classmethod
    def from_artifacts(cls, artifacts: ArtifactSet) -> "MerkleTree":
        ordered = canonicalize(artifacts)
        leaves = []
        for artifact in ordered:
            hasher = _leaf_hasher(artifact.path)
            hasher.update(artifact.content)
            leaves.append(hasher.digest())
        return cls(leaves, [a.path for a in ordered])

    def __len__(self) -> int:
        return len(self.levels[0])

    @property
    def root(self) -> bytes:
        if not self.levels[0]:
            return EMPTY_ROOT
        return self.levels[-1][0]

    @property
    def digest(self) -> str:
        return format_digest(self.root)

    def proof(self, target: Union[int, str]) -> MerkleProof:
        """
        Build the inclusion proof for a leaf.

        Args:
            target: Leaf index, or artifact path when the tree knows its paths
        """
        if isinstance(target, str):
            canonical = canonical_path(target)
            if canonical not in self._index:
                raise KeyError(canonical)
            index = self._index[canonical]
        else:
            index = target
        if not 0 <= index < len(self):
            raise IndexError(f"Leaf index {index} out of range")

        siblings = []
        position = index
        for level in self.levels[:-1]:
            sibling = position ^ 1
            siblings.append(level[sibling] if sibling < len(level) else level[position])
            position //= 2
        return MerkleProof(index=index, siblings=tuple(siblings))


def root_from_proof(leaf: bytes, proof: MerkleProof) -> bytes:
    """Fold a leaf hash up through its proof."""
    current = leaf
    position = proof.index
    for sibling in proof.siblings:
        if position % 2 == 0:
            current = node_hash(current, sibling)
        else:
            current = node_hash(sibling, current)
        position //= 2
    return current


def compute_digest(artifacts: ArtifactSet) -> str:
    """Digest ("Hash") of an artifact set."""
    return MerkleTree.from_artifacts(artifacts).digest


def verify_digest(claimed: str, artifacts: ArtifactSet) -> str:
    """
    Recompute the digest of a downloaded artifact set and compare.

    Returns:
        The verified digest

    Raises:
        IntegrityMismatch: Recomputed root differs from the claimed one
    """
    expected = parse_digest(claimed)
    actual = MerkleTree.from_artifacts(artifacts).root
    if not hmac.compare_digest(expected, actual):
        logger.error(f"Deployment digest mismatch: expected {format_digest(expected)}, got {format_digest(actual)}")
        raise IntegrityMismatch(format_digest(expected), format_digest(actual))
    return format_digest(actual)


def verify_inclusion(claimed: str, path: str, content: Content, proof: MerkleProof) -> None:
    """
    Verify one downloaded file against a published digest.

    Lets a client trust a single asset without fetching the whole set.

    Raises:
        IntegrityMismatch: The file is not part of the claimed deployment
    """
    expected = parse_digest(claimed)
    actual = root_from_proof(leaf_hash(path, content), proof)
    if not hmac.compare_digest(expected, actual):
        raise IntegrityMismatch(format_digest(expected), format_digest(actual), path=canonical_path(path))


def version_label(digest: str, length: int = 12) -> str:
    """Short human label for a digest, e.g. for deployment URLs."""
    if not 4 <= length <= DIGEST_SIZE * 2:
        raise InvalidArgument("length must be between 4 and 64")
    return parse_digest(digest).hex()[:length]


class DigestBuilder:
    """
    Incremental digest computation.

    Files may be added in any order and their content streamed in chunks,
    so large deployments never have to be held in memory at once.
    """

    def __init__(self):
        self._leaves: Dict[str, bytes] = {}

    def __len__(self) -> int:
        return len(self._leaves)

    def add(self, path: str, content: Union[Content, Iterable[bytes]]) -> bytes:
        """
        Add one artifact.

        Args:
            path: Relative artifact path
            content: Bytes, str, or an iterable of byte chunks

        Returns:
            The leaf hash
        """
        canonical = canonical_path(path)
        if canonical in self._leaves:
            raise InvalidArtifactPath(f"Duplicate artifact path after canonicalization: {canonical}")

        hasher = _leaf_hasher(canonical)
        if isinstance(content, (bytes, bytearray, memoryview, str)):
            hasher.update(_as_bytes(content))
        else:
            for chunk in content:
                hasher.update(_as_bytes(chunk))

        leaf = hasher.digest()
        self._leaves[canonical] = leaf
        return leaf

    def tree(self) -> MerkleTree:
        paths = sorted(self._leaves, key=sort_key)
        return MerkleTree([self._leaves[p] for p in paths], paths)

    def digest(self) -> str:
        return self.tree().digest
