import unittest

from input_parsing import (
    InvalidDependencyError,
    is_valid_dependency,
    is_valid_name,
    parse_attributes,
    parse_dependencies,
    parse_dependency,
    remove_white_space,
    valid_split,
)


class TestNames(unittest.TestCase):
    def test_valid_names(self):
        for name in ["a", "_a1", "Cust_Name", "PhoneNo1", "  b  "]:
            self.assertTrue(is_valid_name(name), name)

    def test_invalid_names(self):
        for name in ["", "1a", "a-b", "a b", "a,b", "a\n"]:
            self.assertFalse(is_valid_name(name), repr(name))

    def test_remove_white_space(self):
        self.assertEqual(remove_white_space("\t a b  "), "a b")


class TestSplitting(unittest.TestCase):
    def test_valid_split_drops_empty_parts(self):
        self.assertEqual(valid_split("a, , b,", ","), ["a", "b"])

    def test_parse_attributes_skips_invalid(self):
        self.assertEqual(parse_attributes("A, B, 1x, Cust_Name, a-b"), ["A", "B", "Cust_Name"])


class TestDependencies(unittest.TestCase):
    def test_parse_dependency(self):
        self.assertEqual(parse_dependency("a, b -> c"), ({"a", "b"}, {"c"}))
        self.assertEqual(parse_dependency("a->b,c"), ({"a"}, {"b", "c"}))

    def test_rejects_wrong_arrow_count(self):
        for text in ["a, b", "a -> b -> c", "a -> ", " -> b"]:
            with self.assertRaises(InvalidDependencyError):
                parse_dependency(text)

    def test_rejects_empty_side_after_validation(self):
        with self.assertRaises(InvalidDependencyError) as ctx:
            parse_dependency("1a -> b")
        self.assertIsInstance(ctx.exception, ValueError)
        self.assertIn("1a -> b", str(ctx.exception))

    def test_parse_dependencies(self):
        deps, errors = parse_dependencies("a -> b, f; c -> ; a, c -> d")
        self.assertEqual(deps, [({"a"}, {"b", "f"}), ({"a", "c"}, {"d"})])
        self.assertEqual(len(errors), 1)
        self.assertEqual(errors[0].text, "c ->")

    def test_is_valid_dependency(self):
        self.assertTrue(is_valid_dependency("a, b -> c; d -> e"))
        self.assertFalse(is_valid_dependency("a => b"))
        self.assertFalse(is_valid_dependency(""))


if __name__ == "__main__":
    unittest.main()
