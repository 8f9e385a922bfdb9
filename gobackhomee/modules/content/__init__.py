"""
Content Module - Black Box Interface

Purpose: Name deployments by their content and verify downloads
Interface: compute_digest(), verify_digest(), MerkleTree, DigestBuilder,
           verify_inclusion(), subresource_integrity(), verify_subresource()
Hidden: Leaf/node encoding, tree padding, path canonicalization
"""

from .fs import digest_directory, load_artifacts, verify_directory
from .merkle import (
    DIGEST_PREFIX,
    EMPTY_DIGEST,
    EMPTY_ROOT,
    Artifact,
    DigestBuilder,
    MerkleProof,
    MerkleTree,
    canonicalize,
    compute_digest,
    leaf_hash,
    parse_digest,
    root_from_proof,
    verify_digest,
    verify_inclusion,
    version_label,
)
from .paths import canonical_path
from .sri import integrity_manifest, subresource_integrity, verify_subresource

__all__ = [
    "Artifact",
    "DIGEST_PREFIX",
    "DigestBuilder",
    "EMPTY_DIGEST",
    "EMPTY_ROOT",
    "MerkleProof",
    "MerkleTree",
    "canonical_path",
    "canonicalize",
    "compute_digest",
    "digest_directory",
    "integrity_manifest",
    "leaf_hash",
    "load_artifacts",
    "parse_digest",
    "root_from_proof",
    "subresource_integrity",
    "verify_digest",
    "verify_directory",
    "verify_inclusion",
    "verify_subresource",
    "version_label",
]
