"""
Per-entry metadata extracted from a layer archive.
"""

from __future__ import annotations

import dataclasses
import logging
import tarfile
from dataclasses import dataclass, field
from typing import BinaryIO, Optional, Tuple, Union

from layer_diff.diff_type import DiffType
from layer_diff.file_comparison import FileHasher, LayerDiffError

_log = logging.getLogger(__name__)

_log_debug = _log.debug


class SizeMismatchError(LayerDiffError):
    """
    Error raised if the number of bytes read for an entry differs from the size declared in its
    header. This means the archive is truncated or corrupt.
    """

    def __init__(self, path: str, expected: int, actual: int):
        super().__init__(f'Not enough bytes in {path!r}: {actual} ({expected} expected)'
                         if actual < expected else
                         f'Too many bytes in {path!r}: {actual} ({expected} expected)')
        self.path = path
        self.expected = expected
        self.actual = actual


@dataclass(frozen=True)
class TarHeader:
    """
    Snapshot of the archive-native attributes of an entry. The values are carried along unmodified
    and are not used for comparisons.
    """
    name: str = ''
    mode: int = 0
    uid: int = 0
    gid: int = 0
    uname: str = ''
    gname: str = ''
    size: int = 0
    mtime: Union[int, float] = 0
    linkname: str = ''
    devmajor: int = 0
    devminor: int = 0
    pax_headers: Tuple[Tuple[str, str], ...] = ()

    @classmethod
    def from_tarinfo(cls, info: tarfile.TarInfo) -> TarHeader:
        """
        :param info: Member header of a tar archive.
        :return: Immutable copy of the header attributes.
        """
        return cls(
            name=info.name,
            mode=info.mode,
            uid=info.uid,
            gid=info.gid,
            uname=info.uname,
            gname=info.gname,
            size=info.size,
            mtime=info.mtime,
            linkname=info.linkname,
            devmajor=info.devmajor,
            devminor=info.devminor,
            pax_headers=tuple(sorted(info.pax_headers.items())),
        )


@dataclass(frozen=True)
class FileInfo:
    """
    Metadata and content fingerprint of a single layer entry. Directories always carry the
    fingerprint 0.
    """
    path: str = ''
    type_flag: bytes = b''
    fingerprint: int = 0
    header: TarHeader = field(default_factory=TarHeader)

    @property
    def is_dir(self) -> bool:
        """
        :return: True, if this entry is a directory.
        """
        return self.type_flag == tarfile.DIRTYPE

    def copy(self) -> FileInfo:
        """
        :return: Independent duplicate of this entry.
        """
        return dataclasses.replace(self)

    def compare(self, other: FileInfo) -> DiffType:
        """
        Determines the diff type between this entry and its counterpart in another layer based on
        the entry types and the content fingerprints. Metadata such as timestamps is ignored.

        :param other: Entry with the same path in the other layer.
        :return: `DiffType.UNCHANGED` or `DiffType.CHANGED`.
        """
        if self.type_flag != other.type_flag:
            return DiffType.CHANGED
        if not self.is_dir and self.fingerprint != other.fingerprint:
            return DiffType.CHANGED
        return DiffType.UNCHANGED


def _normalize_type_flag(type_flag: bytes) -> bytes:
    # Old-style, contiguous and sparse files are regular files as well.
    if type_flag in tarfile.REGULAR_TYPES:
        return tarfile.REGTYPE
    return type_flag


def new_file_info(stream: Optional[BinaryIO], header: tarfile.TarInfo, path: str,
                  hasher: Optional[FileHasher] = None) -> FileInfo:
    """
    Extracts the metadata from a tar header and the entry contents and creates a `FileInfo`. The
    stream is drained completely for all entries except directories, which are not read at all.

    :param stream: Payload of the entry, may be None for directories.
    :param header: Tar header of the entry.
    :param path: Canonical path of the entry.
    :param hasher: Hasher used to fingerprint the payload.
    :raises StreamReadError: If the payload cannot be read.
    :raises SizeMismatchError: If the payload length differs from the declared size.
    :return: Metadata of the entry.
    """
    type_flag = _normalize_type_flag(header.type)

    if type_flag == tarfile.DIRTYPE:
        return FileInfo(
            path=path,
            type_flag=type_flag,
            fingerprint=0,
            header=TarHeader.from_tarinfo(header),
        )

    if stream is None:
        raise ValueError(f'Missing payload stream for non-directory entry {path!r}')
    if hasher is None:
        hasher = FileHasher()

    _log_debug('Reading %s(%d)...', path, header.size)
    fingerprint, bytes_read = hasher.compute_hash(stream)
    if bytes_read != header.size:
        _log_debug('Size mismatch in %s: %d bytes read, %d declared', path, bytes_read,
                   header.size)
        raise SizeMismatchError(path, header.size, bytes_read)

    return FileInfo(
        path=path,
        type_flag=type_flag,
        fingerprint=fingerprint,
        header=TarHeader.from_tarinfo(header),
    )
