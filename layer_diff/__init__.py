"""
Layer diff tool
"""

from .__version__ import (
    __author__,
    __description__,
    __license__,
    __title__,
    __version__,
)

from .diff_type import (
    DiffType,
    merge_all,
    diff_type_label,
)

from .file_comparison import (
    CHUNK_SIZE,
    FileHasher,
    LayerDiffError,
    StreamReadError,
    compute_hash,
)

from .file_info import (
    FileInfo,
    TarHeader,
    SizeMismatchError,
    new_file_info,
)

from .diff_data import (
    ViewConfig,
    ViewInfo,
    NodeData,
    DiffRecord,
    LayerDiff,
    DiffTreeNode,
    DiffTreeDirNode,
    DiffTreeFileNode,
    build_diff_tree,
)

from .archive_format_handler import (
    TarLayerHandler,
    ArchiveFormatError,
)

from .layer_diff import (
    LayerDiffer,
    compare_listings,
    index_listing,
)

from .cli_output import (
    print_diff,
    DiffPrinter,
)
