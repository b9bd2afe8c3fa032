"""
Tests of the content fingerprinting.
"""
import io
import unittest
from unittest import TestCase

import xxhash

from layer_diff.file_comparison import CHUNK_SIZE, FileHasher, StreamReadError, compute_hash
from tests._util import FailingStream, ReadOnlyStream

FIXTURES = [
    b'',
    b'a',
    b'b',
    b'abc',
    b'abcd',
    b'acb',
    b'\x00',
    b'\x00\x00',
    b'hello world\n',
    b'hello world',
    bytes(range(256)),
    bytes(reversed(range(256))),
    b'x' * 4096,
    b'x' * 4095 + b'y',
]


class TestComputeHash(TestCase):
    """
    Tests the streaming hash function.
    """

    def test_default_chunk_size(self):
        """
        The default buffer holds 2 MiB.
        """
        self.assertEqual(2 * 1024 * 1024, CHUNK_SIZE)

    def test_deterministic(self):
        """
        Hashing the same bytes twice yields the same fingerprint.
        """
        for data in FIXTURES:
            with self.subTest(data=data[:16]):
                self.assertEqual(compute_hash(io.BytesIO(data)), compute_hash(io.BytesIO(data)))

    def test_matches_xxh64(self):
        """
        The fingerprint is the 64-bit xxHash of the payload.
        """
        for data in FIXTURES:
            with self.subTest(data=data[:16]):
                fingerprint, bytes_read = compute_hash(io.BytesIO(data))
                self.assertEqual(xxhash.xxh64(data).intdigest(), fingerprint)
                self.assertEqual(len(data), bytes_read)
                self.assertLess(fingerprint, 2 ** 64)

    def test_independent_of_chunk_size(self):
        """
        The fingerprint only depends on the bytes, not on how they are read.
        """
        data = bytes(range(256)) * 40
        expected = compute_hash(io.BytesIO(data))
        for chunk_size in (1, 7, 512, 4096, len(data), len(data) + 1):
            with self.subTest(chunk_size=chunk_size):
                self.assertEqual(expected, compute_hash(io.BytesIO(data), chunk_size))

    def test_distinct_fixtures(self):
        """
        Distinct fixtures have distinct fingerprints.
        """
        fingerprints = {compute_hash(io.BytesIO(data))[0] for data in FIXTURES}
        self.assertEqual(len(FIXTURES), len(fingerprints))

    def test_empty_stream(self):
        """
        An empty payload is read without error.
        """
        fingerprint, bytes_read = compute_hash(io.BytesIO(b''))
        self.assertEqual(0, bytes_read)
        self.assertEqual(xxhash.xxh64(b'').intdigest(), fingerprint)

    def test_read_only_stream(self):
        """
        Streams without readinto() are read with read().
        """
        data = bytes(range(256)) * 3
        fingerprint, bytes_read = compute_hash(ReadOnlyStream(data), chunk_size=100)

        self.assertEqual(xxhash.xxh64(data).intdigest(), fingerprint)
        self.assertEqual(len(data), bytes_read)
        self.assertEqual((fingerprint, bytes_read), compute_hash(io.BytesIO(data)))

    def test_read_only_stream_empty(self):
        """
        An empty stream without readinto() is read without error.
        """
        self.assertEqual(compute_hash(io.BytesIO(b'')), compute_hash(ReadOnlyStream(b'')))

    def test_stream_error(self):
        """
        Read errors are reported as `StreamReadError`.
        """
        with self.assertRaises(StreamReadError) as context:
            compute_hash(FailingStream(b'partial'), chunk_size=4)
        self.assertIsInstance(context.exception.__cause__, OSError)

    def test_invalid_chunk_size(self):
        """
        The chunk size must be positive.
        """
        with self.assertRaises(ValueError):
            compute_hash(io.BytesIO(b'abc'), chunk_size=0)


class TestFileHasher(TestCase):
    """
    Tests the `FileHasher` wrapper.
    """

    def test_compute_hash(self):
        """
        The hasher uses its configured chunk size.
        """
        hasher = FileHasher(chunk_size=3)
        self.assertEqual(compute_hash(io.BytesIO(b'abcdefg')),
                         hasher.compute_hash(io.BytesIO(b'abcdefg')))
        self.assertEqual('FileHasher(chunk_size=3)', repr(hasher))

    def test_invalid_chunk_size(self):
        """
        The chunk size must be positive.
        """
        with self.assertRaises(ValueError):
            FileHasher(chunk_size=-1)


if __name__ == '__main__':
    unittest.main()
