"""
Diffing implementation.
"""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Optional

from layer_diff.archive_format_handler import Layer, TarLayerHandler
from layer_diff.diff_data import DiffRecord, DiffTreeDirNode, LayerDiff, ViewConfig, \
    build_diff_tree
from layer_diff.diff_type import DiffType
from layer_diff.file_comparison import CHUNK_SIZE, FileHasher
from layer_diff.file_info import FileInfo

_log = logging.getLogger(__name__)

_log_debug = _log.debug


def index_listing(listing: Iterable[FileInfo]) -> Dict[str, FileInfo]:
    """
    Maps each path of a layer listing to its entry. If a path is listed more than once, the last
    occurrence wins, as it would when the layer is extracted.

    :param listing: Layer listing.
    :return: Dict mapping paths to entries.
    """
    index = {}
    for info in listing:
        if info.path in index:
            _log_debug('Duplicate entry %s, keeping the last one', info.path)
        index[info.path] = info
    return index


def compare_listings(listing1: Iterable[FileInfo], listing2: Iterable[FileInfo]) -> List[DiffRecord]:
    """
    Computes a simple diff between the two listings. The diff only compares entries with the same
    path. Paths present in only one listing are reported as `DiffType.REMOVED` or
    `DiffType.ADDED`.

    :param listing1: Earlier layer listing
    :param listing2: Later layer listing
    :return: List of diff records sorted by path, one for each path present in at least one of the
        two listings.
    """
    index1 = index_listing(listing1)
    index2 = index_listing(listing2)
    paths1 = sorted(index1)
    paths2 = sorted(index2)

    # Since the paths are sorted we can simply traverse both listings in parallel, always
    # proceeding with the listing where the next path is lexicographically smaller. Where we
    # proceed determines the diff output for the given entry.
    records = []
    i, j = 0, 0
    while i < len(paths1) and j < len(paths2):
        left = index1[paths1[i]]
        right = index2[paths2[j]]
        if left.path == right.path:
            records.append(DiffRecord(left.path, left.compare(right), left, right))
            i += 1
            j += 1
        elif left.path < right.path:
            records.append(DiffRecord(left.path, DiffType.REMOVED, left=left))
            i += 1
        else:
            records.append(DiffRecord(right.path, DiffType.ADDED, right=right))
            j += 1
    # When the first pass is completed, one of the lists might not have been traversed fully. These
    # loops deal with the remaining items.
    while i < len(paths1):
        records.append(DiffRecord(paths1[i], DiffType.REMOVED, left=index1[paths1[i]]))
        i += 1
    while j < len(paths2):
        records.append(DiffRecord(paths2[j], DiffType.ADDED, right=index2[paths2[j]]))
        j += 1

    return records


class LayerDiffer:
    """
    Basic layer diffing tool.
    """

    def __init__(self, chunk_size: int = CHUNK_SIZE, view_config: Optional[ViewConfig] = None):
        """
        :param chunk_size: Size of the read buffer used by the stream hashing implementation
        :param view_config: View defaults of the nodes of generated diff trees.
        """
        self.view_config = view_config if view_config is not None else ViewConfig()
        self._file_hasher = FileHasher(chunk_size)
        self._format_handler = TarLayerHandler(self._file_hasher)

    def compute_listing(self, layer: Layer) -> List[FileInfo]:
        """
        Enumerates and fingerprints the contents of the provided layer.

        :param layer: Layer path or file object.
        :raises LayerDiffError: If the layer is not readable.
        :return: List of layer entries.
        """
        return list(self._format_handler.compute_listing(layer))

    def compute_diff(self, left_layer: Layer, right_layer: Layer) -> LayerDiff:
        """
        Computes a full diff between two layers.
        :param left_layer: The earlier layer.
        :param right_layer: The later layer.
        :return: Diff between the layers.
        """
        listing1 = self.compute_listing(left_layer)
        listing2 = self.compute_listing(right_layer)
        _log_debug('Comparing %d with %d entries', len(listing1), len(listing2))

        return LayerDiff(records=compare_listings(listing1, listing2))

    def compute_tree(self, layer_diff: LayerDiff) -> DiffTreeDirNode:
        """
        :param layer_diff: Diff computed by `compute_diff`.
        :return: Diff tree with aggregated directory states.
        """
        return build_diff_tree(layer_diff, self.view_config)
