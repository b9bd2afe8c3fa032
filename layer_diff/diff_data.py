"""
Data classes representing a layer diff.
"""

from __future__ import annotations

import dataclasses
from abc import ABC
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from layer_diff.diff_type import DiffType, merge_all
from layer_diff.file_info import FileInfo
from layer_diff.utils import path_parts


@dataclass(frozen=True)
class ViewConfig:
    """
    Defaults for the view state of new tree nodes.
    """
    collapse_dir: bool = False


@dataclass
class ViewInfo:
    """
    UI specific state of a single tree node.
    """
    collapsed: bool = False
    hidden: bool = False

    @classmethod
    def new(cls, config: Optional[ViewConfig] = None) -> ViewInfo:
        """
        :param config: View defaults, `ViewConfig()` if omitted.
        :return: View state initialized from the given defaults.
        """
        if config is None:
            config = ViewConfig()
        return cls(collapsed=config.collapse_dir, hidden=False)

    def copy(self) -> ViewInfo:
        return dataclasses.replace(self)


@dataclass
class NodeData:
    """
    Payload of a diff tree node: entry metadata, view state and the diff type of the node.
    """
    view_info: ViewInfo = field(default_factory=ViewInfo)
    file_info: FileInfo = field(default_factory=FileInfo)
    diff_type: DiffType = DiffType.UNCHANGED

    @classmethod
    def new(cls, config: Optional[ViewConfig] = None) -> NodeData:
        """
        Creates the payload of a freshly created node: an empty entry, the default view state and
        `DiffType.UNCHANGED`.

        :param config: View defaults.
        :return: New node payload.
        """
        return cls(view_info=ViewInfo.new(config), file_info=FileInfo(),
                   diff_type=DiffType.UNCHANGED)

    def copy(self) -> NodeData:
        """
        :return: Duplicate that shares no mutable state with this payload.
        """
        return NodeData(
            view_info=self.view_info.copy(),
            file_info=self.file_info.copy(),
            diff_type=self.diff_type,
        )


@dataclass
class DiffRecord:
    """
    This record represents a layer path with the associated difference state between the two
    inputs. The entry of a side is None if the path is missing there.
    """
    path: str
    result: DiffType
    left: Optional[FileInfo] = None
    right: Optional[FileInfo] = None

    @property
    def file_info(self) -> FileInfo:
        """
        :return: The most recent entry of this path.
        """
        return self.right if self.right is not None else self.left


@dataclass
class LayerDiff:
    """
    This class contains the full results of a layer diff.
    """
    records: List[DiffRecord]

    def stats(self) -> Dict[DiffType, int]:
        """
        Computes the total number of occurrences per `DiffType`.
        :return: Dict mapping `DiffType` to the corresponding path counts.
        """
        counts = {diff_type: 0 for diff_type in DiffType}
        for record in self.records:
            counts[record.result] += 1

        return counts

    @property
    def all_unchanged(self) -> bool:
        return all(record.result == DiffType.UNCHANGED for record in self.records)


@dataclass
class DiffTreeNode(ABC):
    """
    Base class of a node in a diff tree.
    """
    name: str
    data: NodeData

    @property
    def diff_type(self) -> DiffType:
        return self.data.diff_type


@dataclass
class DiffTreeDirNode(DiffTreeNode):
    """
    Node in a diff tree representing a directory. Its diff type is the merge of its own record (if
    the directory is listed in a layer) and the diff types of all its children.
    """
    children: List[DiffTreeNode]

    def __init__(self, name: str, data: NodeData, children: List[DiffTreeNode],
                 has_record: bool = False):
        """
        :param name: Name of this node.
        :param data: Node payload, its diff type is overwritten with the aggregated state.
        :param children: List of children of this directory.
        :param has_record: True, if `data.diff_type` holds a comparison result of the directory.
        """
        super().__init__(name, data)
        self.children = children

        states = [child.diff_type for child in self.children]
        if has_record:
            states.insert(0, data.diff_type)
        self.data.diff_type = merge_all(states)


@dataclass
class DiffTreeFileNode(DiffTreeNode):
    """
    Diff tree node representing a non-directory entry.
    """


def build_diff_tree(layer_diff: LayerDiff, config: Optional[ViewConfig] = None) -> DiffTreeDirNode:
    """
    Helper function to build a diff tree from a layer diff. Directory states are aggregated from
    the bottom up.

    :param layer_diff: Input layer diff.
    :param config: View defaults for the created nodes.
    :return: Root node of the generated diff tree.
    """

    class DictNode:
        """
        Helper class used to represent the intermediate diff tree.
        """

        def __init__(self):
            """
            Creates an empty subtree without dirs or files.
            """
            self.record: Optional[DiffRecord] = None
            self.files: List[DiffTreeFileNode] = []
            self.dirs: Dict[str, DictNode] = {}

    def make_data(record: Optional[DiffRecord]) -> NodeData:
        data = NodeData.new(config)
        if record is not None:
            data.file_info = record.file_info
            data.diff_type = record.result
        return data

    def to_tree_node(name: str, node: DictNode) -> DiffTreeDirNode:
        """
        Converts a `DictNode`-based tree to a diff-tree recursively.

        :param name: Root name
        :param node: Root `DictNode`
        :return: Directory node with aggregated diff type.
        """
        children = []
        for key, value in sorted(node.dirs.items()):
            children.append(to_tree_node(key, value))

        children += sorted(node.files, key=lambda child: child.name)

        return DiffTreeDirNode(name, make_data(node.record), children,
                               has_record=node.record is not None)

    # First, build the DictNode-based tree from the records
    archive_root = DictNode()
    for record in layer_diff.records:
        parts = path_parts(record.path)
        if not parts:
            archive_root.record = record
            continue

        directory = archive_root
        for part in parts[:-1]:
            directory = directory.dirs.setdefault(part, DictNode())

        name = parts[-1]
        entries = [info for info in (record.left, record.right) if info is not None]
        if any(info.is_dir for info in entries):
            directory.dirs.setdefault(name, DictNode()).record = record
        else:
            directory.files.append(DiffTreeFileNode(name, make_data(record)))

    # Then convert to DiffTreeNodes
    return to_tree_node('/', archive_root)
