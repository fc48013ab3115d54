"""Traversal, counting, and path-reconstruction tests for ``TreeIterator``."""

from __future__ import annotations

import unittest

from seektree.result_tree import (
    Node,
    TreeIterator,
    build_result_tree,
    count_files,
    count_nodes,
    file_paths_under,
)

PATHS = [
    "docs\\x.txt",
    "docs\\sub\\y.txt",
    "docs\\sub\\z.txt",
    "notes.md",
]


def _walk(walker: TreeIterator, root: Node) -> list[tuple[str, int]]:
    walker.reset(root)
    visited = [(walker.current.name, walker.depth)]
    while walker.advance():
        visited.append((walker.current.name, walker.depth))
    return visited


class TreeIteratorTests(unittest.TestCase):
    def setUp(self) -> None:
        self.tree = build_result_tree(PATHS, "kim", 5)

    def test_preorder_visits_children_in_stored_order_with_depths(self) -> None:
        visited = _walk(TreeIterator(), self.tree.root)

        self.assertEqual(
            visited,
            [
                ("kim", 0),
                ("docs\\", 1),
                ("x.txt", 2),
                ("sub\\", 2),
                ("y.txt", 3),
                ("z.txt", 3),
                ("notes.md", 1),
            ],
        )

    def test_iterator_is_reusable_across_trees(self) -> None:
        walker = TreeIterator()
        other = build_result_tree(["a\\b.flac"], "lee")

        first = _walk(walker, self.tree.root)
        second = _walk(walker, other.root)
        third = _walk(walker, self.tree.root)

        self.assertEqual(second, [("lee", 0), ("a\\", 1), ("b.flac", 2)])
        self.assertEqual(first, third)

    def test_advance_after_exhaustion_stays_false(self) -> None:
        walker = TreeIterator(Node.directory("empty"))

        self.assertFalse(walker.advance())
        self.assertIsNone(walker.current)
        self.assertFalse(walker.advance())

    def test_path_concatenates_names_below_root(self) -> None:
        walker = TreeIterator()

        self.assertTrue(walker.seek(self.tree.root, 5))
        self.assertEqual(walker.current.name, "z.txt")
        self.assertEqual(walker.path(), "docs\\sub\\z.txt")
        self.assertEqual([node.name for node in walker.ancestors()], ["kim", "docs\\", "sub\\"])

        self.assertTrue(walker.seek(self.tree.root, 0))
        self.assertEqual(walker.path(), "")
        self.assertFalse(walker.seek(self.tree.root, 99))

    def test_counts(self) -> None:
        self.assertEqual(count_nodes(self.tree.root), 6)
        self.assertEqual(count_files(self.tree.root), 4)

    def test_file_paths_under_directory_and_file(self) -> None:
        root = self.tree.root

        self.assertEqual(file_paths_under(root, 0), PATHS)
        self.assertEqual(file_paths_under(root, 1), PATHS[:3])
        self.assertEqual(file_paths_under(root, 3), ["docs\\sub\\y.txt", "docs\\sub\\z.txt"])
        self.assertEqual(file_paths_under(root, 2), ["docs\\x.txt"])
        self.assertEqual(file_paths_under(root, 42), [])


if __name__ == "__main__":
    unittest.main()
