"""
Helper to display a LayerDiff on the command line in various formats.
"""

import sys

from layer_diff.diff_data import LayerDiff, DiffTreeNode, DiffTreeDirNode, DiffTreeFileNode, \
    build_diff_tree, ViewConfig
from layer_diff.diff_type import DiffType


class DiffPrinter:
    """
    Utility to print layer diffs in various formats
    """

    def __init__(self, suppress_common_lines=False, quiet=False, tree=False,
                 view_config=None, output=sys.stdout):
        """
        :param suppress_common_lines: True to only print lines that differ.
        :param quiet: True to use a short one line summary of the number of differences
        :param tree: True to print a tree-like diff output.
        :param view_config: View defaults of the tree nodes, collapsed directories are not expanded.
        :param output: Output stream to write to.
        """
        self.suppress_common_lines = suppress_common_lines
        self.quiet = quiet
        self.tree = tree
        self.view_config = view_config if view_config is not None else ViewConfig()
        self.output = output

        self._divider = '*' * 80

    def line(self, *args):
        """
        Prints a line to the configured output stream.
        :param args: line contents
        """
        print(*args, file=self.output)

    def print_diff(self, layer_diff: LayerDiff):
        """
        Prints the given diff in the configured output format.
        :param layer_diff: Layer diff to print.
        """
        counts_per_state = layer_diff.stats()

        if self.quiet:
            if not layer_diff.all_unchanged:
                self.line('Different:'
                          f' u={counts_per_state[DiffType.UNCHANGED]}'
                          f' c={counts_per_state[DiffType.CHANGED]}'
                          f' a={counts_per_state[DiffType.ADDED]}'
                          f' r={counts_per_state[DiffType.REMOVED]}'
                          )
            return

        self.line(self._divider)

        if self.tree:
            self.print_diff_tree(layer_diff)
        else:
            self.print_line_diff(layer_diff)

        self.line(self._divider)

        max_count = len(str(max(counts_per_state.values(), default=0)))
        pattern = f'{{state_name:10s}} {{state_count:{max_count:d}d}}'
        for state in DiffType:
            self.line(pattern.format(state_name=str(state) + ':',
                                     state_count=counts_per_state[state]))

        self.line(self._divider)

    def print_line_diff(self, layer_diff: LayerDiff):
        """
        Prints a line-based diff.
        :param layer_diff: Layer diff to print.
        """
        state_to_symbol = {
            DiffType.UNCHANGED: ' ',
            DiffType.CHANGED: '|',
            DiffType.REMOVED: '<',
            DiffType.ADDED: '>',
        }
        longest_path = max((len(r.path) for r in layer_diff.records), default=1)
        record_template = f'{{path:{longest_path}s}} {{state_sym:s}} {{state_name:s}}'
        for record in layer_diff.records:
            if not (self.suppress_common_lines and record.result == DiffType.UNCHANGED):
                self.line(record_template.format(
                    path=record.path,
                    state_sym=state_to_symbol[record.result],
                    state_name=str(record.result)))

    def print_diff_tree(self, layer_diff: LayerDiff):
        """
        Prints a tree-style diff. Collapsed directories are printed without their children and
        hidden nodes are skipped.
        :param layer_diff: Layer diff to print.
        """
        state_to_symbol = {
            DiffType.UNCHANGED: '=',
            DiffType.CHANGED: '#',
            DiffType.REMOVED: '<',
            DiffType.ADDED: '>',
        }

        def print_tree_node(node: DiffTreeNode, prefix):
            """
            Helper function to print a node of the tree and all of its child nodes.
            :param node: node to print
            :param prefix: current line prefix.
            """
            if node.data.view_info.hidden:
                return
            if self.suppress_common_lines and node.diff_type == DiffType.UNCHANGED:
                return

            if isinstance(node, DiffTreeDirNode):
                collapsed = node.data.view_info.collapsed
                self.line(prefix + f'{state_to_symbol[node.diff_type]:s} {node.name:s}'
                          + ('/...' if collapsed and node.children else ''))
                if not collapsed:
                    for child in node.children:
                        print_tree_node(child, prefix + '|   ')
            elif isinstance(node, DiffTreeFileNode):
                self.line(prefix + f'{state_to_symbol[node.diff_type]:s} {node.name:s}')
            else:
                raise ValueError('Invalid node type ' + str(type(node)))

        tree = build_diff_tree(layer_diff, self.view_config)
        # The root is always expanded.
        tree.data.view_info.collapsed = False
        print_tree_node(tree, '')


def print_diff(layer_diff: LayerDiff, *, suppress_common_lines=False, quiet=False,
               tree=False, view_config=None) -> None:
    """
    Prints the diff object in a human-readable format to the standard output.

    :param layer_diff: diff object
    """

    printer = DiffPrinter(suppress_common_lines=suppress_common_lines, quiet=quiet, tree=tree,
                          view_config=view_config)
    printer.print_diff(layer_diff)
