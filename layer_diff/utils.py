"""
Utility functions.
"""

import posixpath
from typing import List


def path_parts(path: str) -> List[str]:
    """
    Splits an archive path into its parts. Empty segments and '.' are dropped, '..' removes the
    preceding segment but never climbs above the archive root.

    :param path: Input path.
    :return: parts of the path
    """
    parts = []
    for part in path.split('/'):
        if part in ('', '.'):
            continue
        if part == '..':
            if parts:
                parts.pop()
            continue
        parts.append(part)

    return parts


def canonical_path(path: str) -> str:
    """
    Converts an archive member name to the canonical, '/'-rooted form used to pair entries of
    different layers, e.g. './etc/passwd' and 'etc/passwd' both become '/etc/passwd'.

    :param path: Archive member name.
    :return: Canonical path.
    """
    return posixpath.join('/', *path_parts(path))
