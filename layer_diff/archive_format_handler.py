"""
Reading of layer archives. A layer is a tar archive, optionally compressed, that is read in a single
forward pass.
"""
from __future__ import annotations

import io
import logging
import pathlib as pl
import tarfile
from typing import BinaryIO, Iterator, Optional, Union

from layer_diff.file_comparison import FileHasher, LayerDiffError, StreamReadError
from layer_diff.file_info import FileInfo, new_file_info
from layer_diff.utils import canonical_path

_log = logging.getLogger(__name__)

_log_debug = _log.debug

Layer = Union[pl.Path, str, BinaryIO]


class ArchiveFormatError(LayerDiffError):
    """
    Error raised if a layer is not a readable tar archive.
    """


class TarLayerHandler:
    """
    Handler for tar-based layers, including various compressed variants thereof.
    """

    def __init__(self, hasher: Optional[FileHasher] = None):
        """
        :param hasher: File hasher used to compute the fingerprints identifying file differences.
        """
        self._hasher = hasher if hasher is not None else FileHasher()

    def check_file(self, path: pl.Path) -> bool:
        """
        Checks if the given path can be processed by this handler.

        :param path: Input path
        :return: True, if the path is a tar archive.
        """
        path = pl.Path(path)
        return path.is_file() and tarfile.is_tarfile(path)

    def _open(self, layer: Layer) -> tarfile.TarFile:
        try:
            if isinstance(layer, (str, pl.Path)):
                return tarfile.open(name=layer, mode='r|*')
            return tarfile.open(fileobj=layer, mode='r|*')
        except (tarfile.ReadError, tarfile.CompressionError) as error:
            raise ArchiveFormatError(f'Not a tar file: {error}') from error

    def _read_member(self, archive: tarfile.TarFile, member: tarfile.TarInfo) -> FileInfo:
        path = canonical_path(member.name)
        if member.isdir():
            return new_file_info(None, member, path, self._hasher)

        # Links, devices and fifos have no payload in the archive. Unknown member types do.
        if member.isreg() or member.type not in tarfile.SUPPORTED_TYPES:
            stream = archive.extractfile(member)
        else:
            stream = io.BytesIO()
        try:
            with stream:
                return new_file_info(stream, member, path, self._hasher)
        except tarfile.ReadError as error:
            raise StreamReadError(f'Failed to read {path!r}: {error}') from error

    def compute_listing(self, layer: Layer) -> Iterator[FileInfo]:
        """
        Lists the entries of the given layer and computes fingerprints for each of them. Every
        payload is drained before the next entry is read.

        :param layer: Path to the layer archive or a readable binary file object.
        :raises ArchiveFormatError: If the input is not a tar archive.
        :raises StreamReadError: If the archive is truncated or unreadable.
        :raises SizeMismatchError: If an entry payload differs from its declared size.
        :return: Entries of the layer in archive order.
        """
        _log_debug('Reading layer %s', layer)
        with self._open(layer) as archive:
            while True:
                try:
                    member = archive.next()
                except tarfile.TarError as error:
                    raise StreamReadError(f'Failed to read layer header: {error}') from error
                if member is None:
                    break
                yield self._read_member(archive, member)
