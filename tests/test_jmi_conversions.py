"""
Unit tests for JMI conversions.

Tests keyed-map construction, tree assembly and the conversion dispatcher.
"""

import copy
import unittest

from mbee.errors import (
    CircularReferenceError,
    ConversionNotImplementedError,
    DataFormatError,
    DuplicateKeyError,
)
from mbee.jmi import build_forest, build_index, build_tree, convert_jmi, flatten, get_field
from mbee.models import TreeNode


def ids(nodes):
    return [node.element["id"] for node in nodes]


class TestFieldPaths(unittest.TestCase):
    """Test reading record fields by path."""

    def test_top_level_field(self):
        """Test reading a plain field."""
        self.assertEqual(get_field({"id": "1"}, "id"), "1")

    def test_nested_field(self):
        """Test reading a dotted path."""
        record = {"parent": {"uid": "p1"}}
        self.assertEqual(get_field(record, "parent.uid"), "p1")

    def test_missing_field_with_default(self):
        """Test a missing path returns the default."""
        self.assertIsNone(get_field({"id": "1"}, "parent", None))
        self.assertIsNone(get_field({"parent": None}, "parent.uid", None))

    def test_missing_field_without_default(self):
        """Test a missing path without default is a format error."""
        with self.assertRaises(DataFormatError) as ctx:
            get_field({"name": "x"}, "id")
        self.assertIn("[id]", ctx.exception.description)

    def test_non_mapping_record(self):
        """Test reading from something that is not a record."""
        with self.assertRaises(DataFormatError):
            get_field(["id"], "id")


class TestBuildIndex(unittest.TestCase):
    """Test JMI type 1 to type 2 conversion."""

    def test_index_by_id(self):
        """Test every record is stored under its id."""
        records = [{"id": "1", "name": "a"}, {"id": "2", "name": "b"}]
        index = build_index(records)

        self.assertEqual(set(index), {"1", "2"})
        self.assertIs(index["1"], records[0])
        self.assertIs(index["2"], records[1])

    def test_index_by_custom_field(self):
        """Test keying on another field, as webhooks are keyed on name."""
        records = [{"id": "1", "name": "hook-a"}, {"id": "2", "name": "hook-b"}]
        index = build_index(records, "name")

        self.assertEqual(index["hook-b"]["id"], "2")

    def test_duplicate_keys(self):
        """Test duplicate keys fail and name the key."""
        records = [{"id": "1", "parent": None}, {"id": "1", "parent": None}]

        with self.assertRaises(DuplicateKeyError) as ctx:
            build_index(records)

        self.assertEqual(ctx.exception.key, "1")
        self.assertIn("[1]", ctx.exception.description)
        self.assertEqual(ctx.exception.status, 403)

    def test_not_a_list(self):
        """Test non-list input is rejected."""
        for data in ({"id": "1"}, "abc", 42, None):
            with self.assertRaises(DataFormatError) as ctx:
                build_index(data)
            self.assertEqual(ctx.exception.status, 400)

    def test_record_without_key(self):
        """Test a record lacking the key field is rejected."""
        with self.assertRaises(DataFormatError):
            build_index([{"id": "1"}, {"name": "no id"}])

    def test_unhashable_key(self):
        """Test a key value that cannot key a mapping is rejected."""
        with self.assertRaises(DataFormatError):
            build_index([{"id": ["1"]}])

    def test_input_not_mutated(self):
        """Test building the index leaves the records untouched."""
        records = [{"id": "1", "parent": None}, {"id": "2", "parent": "1"}]
        before = copy.deepcopy(records)
        build_index(records)
        self.assertEqual(records, before)

    def test_idempotent(self):
        """Test two calls on the same input give equal maps."""
        records = [{"id": "1"}, {"id": "2"}]
        self.assertEqual(build_index(records), build_index(records))

    def test_empty_list(self):
        """Test an empty list gives an empty map."""
        self.assertEqual(build_index([]), {})


class TestBuildTree(unittest.TestCase):
    """Test JMI type 1 to type 3 conversion."""

    def test_root_with_children(self):
        """Test a root with two children keeps input order."""
        records = [
            {"id": "1", "parent": None},
            {"id": "2", "parent": "1"},
            {"id": "3", "parent": "1"},
        ]
        tree = build_tree(records)

        self.assertIsInstance(tree, TreeNode)
        self.assertEqual(tree.element["id"], "1")
        self.assertEqual(ids(tree.children), ["2", "3"])

    def test_child_before_parent(self):
        """Test a child listed before its parent."""
        records = [{"id": "2", "parent": "1"}, {"id": "1", "parent": None}]
        tree = build_tree(records)

        self.assertEqual(tree.element["id"], "1")
        self.assertEqual(ids(tree.children), ["2"])
        self.assertEqual(tree.children[0].children, [])

    def test_missing_parent_field_is_root(self):
        """Test a record without a parent field is a root."""
        tree = build_tree([{"id": "1"}, {"id": "2", "parent": "1"}])
        self.assertEqual(tree.element["id"], "1")

    def test_linear_chain_flattens_in_order(self):
        """Test a chain of records reads back in input order."""
        records = [
            {"id": "1", "parent": None},
            {"id": "2", "parent": "1"},
            {"id": "3", "parent": "2"},
            {"id": "4", "parent": "3"},
        ]
        self.assertEqual([r["id"] for r in flatten(build_tree(records))], ["1", "2", "3", "4"])

    def test_two_record_cycle(self):
        """Test records naming each other as parent."""
        records = [{"id": "a", "parent": "b"}, {"id": "b", "parent": "a"}]

        with self.assertRaises(CircularReferenceError) as ctx:
            build_tree(records)
        self.assertEqual(ctx.exception.status, 403)

    def test_cycle_beside_a_valid_root(self):
        """Test a cycle is detected even when a root exists."""
        records = [
            {"id": "root", "parent": None},
            {"id": "child", "parent": "root"},
            {"id": "a", "parent": "b"},
            {"id": "b", "parent": "a"},
        ]

        with self.assertRaises(CircularReferenceError) as ctx:
            build_tree(records)
        self.assertIn("a", ctx.exception.description)
        self.assertIn("b", ctx.exception.description)

    def test_self_parent(self):
        """Test a record that is its own parent."""
        records = [{"id": "root", "parent": None}, {"id": "x", "parent": "x"}]

        with self.assertRaises(CircularReferenceError):
            build_tree(records)

    def test_dangling_parent(self):
        """Test a parent reference to a record not in the input."""
        records = [{"id": "1", "parent": None}, {"id": "2", "parent": "ghost"}]

        with self.assertRaises(CircularReferenceError) as ctx:
            build_tree(records)
        self.assertIn("ghost", ctx.exception.description)

    def test_empty_input(self):
        """Test no records is a format error, not a cycle."""
        with self.assertRaises(DataFormatError) as ctx:
            build_tree([])
        self.assertNotIsInstance(ctx.exception, CircularReferenceError)

    def test_duplicate_keys(self):
        """Test duplicates surface before any linking."""
        records = [{"id": "1", "parent": None}, {"id": "1", "parent": None}]

        with self.assertRaises(DuplicateKeyError):
            build_tree(records)

    def test_multiple_roots_error(self):
        """Test several roots fail under the default policy."""
        records = [{"id": "1", "parent": None}, {"id": "2", "parent": None}]

        with self.assertRaises(DataFormatError) as ctx:
            build_tree(records)
        self.assertIn("1, 2", ctx.exception.description)

    def test_multiple_roots_first_and_last(self):
        """Test the first and last root policies."""
        records = [
            {"id": "1", "parent": None},
            {"id": "1a", "parent": "1"},
            {"id": "2", "parent": None},
        ]

        first = build_tree(records, root_policy="first")
        last = build_tree(records, root_policy="last")

        self.assertEqual(first.element["id"], "1")
        self.assertEqual(ids(first.children), ["1a"])
        self.assertEqual(last.element["id"], "2")
        self.assertEqual(last.children, [])

    def test_unknown_root_policy(self):
        """Test an unknown policy is rejected."""
        with self.assertRaises(DataFormatError):
            build_tree([{"id": "1"}], root_policy="random")

    def test_nested_parent_field(self):
        """Test parent references stored in a nested object."""
        records = [
            {"uid": "p", "parent": None},
            {"uid": "c", "parent": {"uid": "p"}},
        ]
        tree = build_tree(records, parent_field="parent.uid", key_field="uid")

        self.assertEqual(tree.element["uid"], "p")
        self.assertEqual([n.element["uid"] for n in tree.children], ["c"])

    def test_idempotent(self):
        """Test two calls on the same input give equal trees."""
        records = [
            {"id": "3", "parent": "1"},
            {"id": "1", "parent": None},
            {"id": "2", "parent": "1"},
        ]
        self.assertEqual(build_tree(records), build_tree(records))

    def test_round_trip_keeps_every_record(self):
        """Test flattening a tree gives back exactly the input records."""
        records = [
            {"id": "c", "parent": "b", "payload": 3},
            {"id": "a", "parent": None, "payload": 1},
            {"id": "b", "parent": "a", "payload": 2},
            {"id": "d", "parent": "a", "payload": 4},
            {"id": "e", "parent": "c", "payload": 5},
        ]
        flat = flatten(build_tree(records))

        by_id = lambda r: r["id"]
        self.assertEqual(sorted(flat, key=by_id), sorted(records, key=by_id))

    def test_deep_chain(self):
        """Test a chain deeper than the recursion limit."""
        depth = 5000
        records = [{"id": "0", "parent": None}]
        records += [{"id": str(i), "parent": str(i - 1)} for i in range(1, depth)]

        tree = build_tree(records)
        flat = flatten(tree)

        self.assertEqual(len(flat), depth)
        self.assertEqual(flat[-1]["id"], str(depth - 1))
        self.assertEqual(tree.count(), depth)


class TestBuildForest(unittest.TestCase):
    """Test building one tree per root."""

    def test_forest_in_input_order(self):
        """Test every root tree is returned, in input order."""
        records = [
            {"id": "b", "parent": None},
            {"id": "a1", "parent": "a"},
            {"id": "a", "parent": None},
        ]
        forest = build_forest(records)

        self.assertEqual(ids(forest), ["b", "a"])
        self.assertEqual(ids(forest[1].children), ["a1"])

    def test_forest_still_detects_cycles(self):
        """Test cycles are not hidden by allowing several roots."""
        records = [{"id": "r", "parent": None}, {"id": "x", "parent": "y"}, {"id": "y", "parent": "x"}]

        with self.assertRaises(CircularReferenceError):
            build_forest(records)

    def test_empty_input(self):
        """Test no records is a format error, not a cycle."""
        with self.assertRaises(DataFormatError):
            build_forest([])


class TestConvertJMI(unittest.TestCase):
    """Test the JMI conversion dispatcher."""

    records = [
        {"id": "1", "parent": None},
        {"id": "2", "parent": "1"},
    ]

    def test_type1_to_type2(self):
        """Test converting to a keyed map."""
        result = convert_jmi(1, 2, self.records)
        self.assertEqual(set(result), {"1", "2"})

    def test_type1_to_type2_custom_field(self):
        """Test converting to a map keyed on another field."""
        result = convert_jmi(1, 2, [{"id": "1", "name": "n1"}], "name")
        self.assertIn("n1", result)

    def test_type1_to_type3(self):
        """Test converting to a tree."""
        result = convert_jmi(1, 3, self.records)
        self.assertIsInstance(result, TreeNode)
        self.assertEqual(ids(result.children), ["2"])

    def test_type1_to_type3_cycle(self):
        """Test converting cyclic data to a tree fails."""
        with self.assertRaises(CircularReferenceError):
            convert_jmi(1, 3, [{"id": "a", "parent": "b"}, {"id": "b", "parent": "a"}])

    def test_unsupported_pair(self):
        """Test unsupported conversions report status 501."""
        for pair in [(1, 4), (2, 3), (3, 1), (2, 1)]:
            with self.assertRaises(ConversionNotImplementedError) as ctx:
                convert_jmi(pair[0], pair[1], self.records)
            self.assertEqual(ctx.exception.status, 501)
            self.assertEqual(ctx.exception.kind, "NotImplementedError")

    def test_unsupported_pair_is_not_implemented_error(self):
        """Test the error is also the builtin NotImplementedError."""
        with self.assertRaises(NotImplementedError):
            convert_jmi(1, 4, self.records)

    def test_type1_data_must_be_a_list(self):
        """Test non-list type 1 data is rejected before conversion."""
        for to_version in (2, 3):
            with self.assertRaises(DataFormatError) as ctx:
                convert_jmi(1, to_version, {"id": "1"})
            self.assertEqual(ctx.exception.status, 400)


if __name__ == '__main__':
    unittest.main()
