"""
Command-line interface to the layer-diff module.
"""

import argparse
import logging
import pathlib as pl
import sys

from layer_diff import LayerDiffer, LayerDiffError, ViewConfig, print_diff
from layer_diff.file_comparison import CHUNK_SIZE


def main(argv=None):
    """
    Main method that handles the command line interface of layer-diff
    """
    parser = argparse.ArgumentParser('layer-diff', description='''Diff tool for image layers.''')
    parser.add_argument('layer1',
                        type=pl.Path,
                        metavar='LAYER_1',
                        help='Earlier layer archive.')
    parser.add_argument('layer2',
                        type=pl.Path,
                        metavar='LAYER_2',
                        help='Later layer archive.')
    parser.add_argument('--chunk-size',
                        type=int,
                        default=CHUNK_SIZE,
                        help='Size of the read buffer used for hashing file contents.')
    parser.add_argument('--suppress-common',
                        action='store_true',
                        help='Only prints the paths that differ.')
    parser.add_argument('--quiet', '-q',
                        action='store_true',
                        help='Only print something if the layers differ.')
    parser.add_argument('--tree',
                        action='store_true',
                        help='Print the output as a tree instead of a flat list of paths.')
    parser.add_argument('--collapse-dir',
                        action='store_true',
                        help='Do not expand directories in the tree output.')
    parser.add_argument('--verbose', '-v',
                        action='store_true',
                        help='Print debug messages.')
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING,
                        format='%(levelname)s %(name)s: %(message)s')

    if args.chunk_size <= 0:
        parser.error('--chunk-size must be positive')

    view_config = ViewConfig(collapse_dir=args.collapse_dir)
    differ = LayerDiffer(chunk_size=args.chunk_size, view_config=view_config)
    try:
        layer_diff = differ.compute_diff(args.layer1, args.layer2)
    except FileNotFoundError as error:
        print(f'File not found: {error.filename}', file=sys.stderr)
        return 2
    except LayerDiffError as error:
        print(f'Failed to diff layers: {error}', file=sys.stderr)
        return 2

    print_diff(layer_diff, suppress_common_lines=args.suppress_common, quiet=args.quiet,
               tree=args.tree, view_config=view_config)
    return 0 if layer_diff.all_unchanged else 1


if __name__ == '__main__':
    sys.exit(main())
