"""
Helper to fingerprint file contents.
"""

from __future__ import annotations

import logging
from typing import BinaryIO, Iterator, Tuple

import xxhash

_log = logging.getLogger(__name__)

_log_debug = _log.debug

CHUNK_SIZE = 2 * 1024 * 1024
"""Default size of the read buffer used while hashing a stream."""


class LayerDiffError(Exception):
    """
    Base class of all errors raised while reading and fingerprinting layer entries.
    """


class StreamReadError(LayerDiffError):
    """
    Error raised if the payload stream of an entry fails before reaching its end. The source archive
    is read in a single pass, so the read is never retried.
    """


def compute_hash(stream: BinaryIO, chunk_size: int = CHUNK_SIZE) -> Tuple[int, int]:
    """
    Streams the given binary input through a fixed-size buffer and computes its 64-bit xxHash.

    :param stream: Readable binary stream positioned at the start of the payload.
    :param chunk_size: Size of the scratch buffer in bytes.
    :raises StreamReadError: If reading from the stream fails.
    :return: Tuple of the fingerprint and the number of bytes read.
    """
    if chunk_size <= 0:
        raise ValueError(f'Invalid chunk size: {chunk_size}')

    digest = xxhash.xxh64()
    bytes_read = 0
    for chunk in _read_chunks(stream, chunk_size):
        bytes_read += len(chunk)
        digest.update(chunk)

    return digest.intdigest(), bytes_read


def _read_chunks(stream: BinaryIO, chunk_size: int) -> Iterator[memoryview]:
    # Streams without readinto() only provide read(), which allocates a new chunk per call.
    readinto = getattr(stream, 'readinto', None)
    buffer = bytearray(chunk_size) if readinto is not None else None
    view = memoryview(buffer) if buffer is not None else None
    bytes_read = 0
    while True:
        try:
            if readinto is not None:
                count = readinto(buffer)
                chunk = view[:count] if count else None
            else:
                data = stream.read(chunk_size)
                chunk = memoryview(data) if data else None
        except (OSError, EOFError) as error:
            raise StreamReadError(f'Failed to read stream after {bytes_read} bytes: {error}') \
                from error
        if chunk is None:
            break
        bytes_read += len(chunk)
        yield chunk


class FileHasher:
    """
    Helper class to compute content fingerprints of io streams.
    """

    def __init__(self, chunk_size: int = CHUNK_SIZE):
        """
        :param chunk_size: Buffer size used to read the input streams.
        """
        if chunk_size <= 0:
            raise ValueError(f'Invalid chunk size: {chunk_size}')
        self.chunk_size = chunk_size

    def __repr__(self):
        return f'FileHasher(chunk_size={self.chunk_size})'

    def compute_hash(self, input_io: BinaryIO) -> Tuple[int, int]:
        """
        Computes the fingerprint for an input io object.
        :param input_io: input io object
        :return: fingerprint and number of bytes consumed
        """
        fingerprint, bytes_read = compute_hash(input_io, self.chunk_size)
        _log_debug('Hashed %d bytes: %016x', bytes_read, fingerprint)
        return fingerprint, bytes_read
