"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

hasher.py
Implements streaming full-content hashing with pluggable hash algorithms.

The digest is the only equality proxy between files: no byte-for-byte
comparison follows it, so the default algorithm is a cryptographic one.
"""

import hashlib
import logging

import xxhash

from onelink.core.errors import HashInitError
from onelink.core.interfaces import HashAlgorithm
from onelink.core.models import HashAlgorithmName

logger = logging.getLogger(__name__)

READ_CHUNK_SIZE = 1024 * 1024  # 1MB


# Use the same way to implement and use any other hashing algorithm
class SHA256AlgorithmImpl(HashAlgorithm):
    name = "sha256"

    def new(self):
        return hashlib.sha256()


class XXH128AlgorithmImpl(HashAlgorithm):
    name = "xxh128"

    def new(self):
        return xxhash.xxh3_128()


ALGORITHMS = {
    HashAlgorithmName.SHA256: SHA256AlgorithmImpl,
    HashAlgorithmName.XXH128: XXH128AlgorithmImpl,
}


def get_algorithm(name: HashAlgorithmName) -> HashAlgorithm:
    """
    Build the algorithm for `name` and check that it can actually hash.

    Raises:
        HashInitError: The algorithm is unknown or cannot be constructed.
    """
    try:
        algorithm = ALGORITHMS[name]()
        algorithm.new().update(b"")
    except KeyError:
        raise HashInitError(f"Unknown hash algorithm: {name!r}")
    except (ValueError, TypeError, AttributeError) as e:
        raise HashInitError(f"Hash algorithm {name!r} is unavailable: {e}") from e
    logger.debug(f"Using {algorithm.name} for content hashing")
    return algorithm


class HasherImpl:
    """
    Streams a file through the configured algorithm in fixed-size chunks.
    Read errors propagate as OSError; the checksum engine decides what to skip.
    """

    def __init__(self, algorithm: HashAlgorithm, chunk_size: int = READ_CHUNK_SIZE):
        self.algorithm = algorithm
        self.chunk_size = chunk_size

    def compute_full_hash(self, path: str) -> bytes:
        h = self.algorithm.new()
        with open(path, 'rb') as f:
            while True:
                data = f.read(self.chunk_size)
                if not data:
                    break
                h.update(data)
        return h.digest()
