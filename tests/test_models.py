import unittest

from models import (
    Dependency,
    NormalForm,
    Relation,
    attribute_set_key,
    compare_attribute_sets,
)


def make_relation():
    relation = Relation("R", ["a", "b", "c", "d", "e", "f", "g", "h"])
    relation.add_dependency(["a"], ["b", "f"])
    relation.add_dependency(["a", "c"], ["d", "g"])
    relation.add_dependency(["b", "c", "d"], ["e", "h"])
    return relation


class TestAttributeSetOrder(unittest.TestCase):
    def test_smaller_set_first(self):
        self.assertEqual(compare_attribute_sets({"z"}, {"a", "b"}), -1)
        self.assertEqual(compare_attribute_sets({"a", "b"}, {"z"}), 1)

    def test_elementwise_for_equal_size(self):
        self.assertEqual(compare_attribute_sets({"a", "c"}, {"a", "b"}), 1)
        self.assertEqual(compare_attribute_sets({"c", "a"}, {"a", "c"}), 0)

    def test_sort_key(self):
        self.assertEqual(attribute_set_key({"b", "a"}), (2, ("a", "b")))
        self.assertEqual(attribute_set_key(set()), (0, ()))


class TestDependency(unittest.TestCase):
    def test_equality_ignores_insertion_order(self):
        d1 = Dependency(["b", "a"], ["d", "c"])
        d2 = Dependency(["a", "b"], ["c", "d"])
        self.assertEqual(d1, d2)
        self.assertEqual(hash(d1), hash(d2))
        self.assertEqual(len({d1, d2}), 1)

    def test_strict_total_order(self):
        d1 = Dependency(["a"], ["b"])
        d2 = Dependency(["a"], ["c"])
        d3 = Dependency(["a", "b"], ["c"])
        self.assertLess(d1, d2)
        self.assertLess(d2, d3)
        self.assertFalse(d1 < d1)
        self.assertEqual(sorted([d3, d1, d2, d1]), [d1, d1, d2, d3])

    def test_empty_side_rejected(self):
        with self.assertRaises(ValueError):
            Dependency([], ["a"])
        with self.assertRaises(ValueError):
            Dependency(["a"], [])

    def test_combine(self):
        combined = Dependency(["a"], ["b"]).combine(Dependency(["a"], ["c"]))
        self.assertEqual(combined, Dependency(["a"], ["b", "c"]))

        other = Dependency(["x"], ["c"])
        self.assertEqual(Dependency(["a"], ["b"]).combine(other), Dependency(["a"], ["b"]))

    def test_rhs_part_inside_lhs_dropped(self):
        self.assertEqual(Dependency(["a", "b"], ["a", "c"]), Dependency(["a", "b"], ["c"]))
        self.assertEqual(Dependency(["a", "b"], ["a", "c"]).rhs, {"c"})

    def test_trivial_dependency_rejected(self):
        with self.assertRaises(ValueError):
            Dependency(["a"], ["a"])
        with self.assertRaises(ValueError):
            Dependency(["a", "b"], ["b"])

    def test_str(self):
        self.assertEqual(str(Dependency(["c", "a"], ["d", "g"])), "a, c -> d, g")


class TestRelationMutation(unittest.TestCase):
    def setUp(self):
        self.relation = make_relation()

    def test_constructor_merges_dependencies(self):
        relation = Relation("R", ["a", "b", "c"], [
            Dependency(["a"], ["b"]),
            Dependency(["a"], ["c"]),
        ])
        self.assertEqual(relation.dependencies, [Dependency(["a"], ["b", "c"])])

    def test_constructor_adds_missing_attributes(self):
        relation = Relation("R", dependencies=[Dependency(["a"], ["b"])])
        self.assertEqual(relation.attributes, {"a", "b"})

    def test_copy_is_independent(self):
        copy = self.relation.copy()
        self.assertEqual(copy, self.relation)
        copy.remove_attribute("a")
        self.assertIn("a", self.relation.attributes)
        self.assertEqual(len(self.relation.dependencies), 3)

    def test_add_attribute(self):
        self.assertTrue(self.relation.add_attribute("i"))
        self.assertIn("i", self.relation.attributes)
        # Существующий атрибут и пустая строка
        self.assertFalse(self.relation.add_attribute("a"))
        self.assertFalse(self.relation.add_attribute(""))

    def test_add_attributes(self):
        self.assertEqual(self.relation.add_attributes(["k", "l", "a", "b"]), 2)
        self.assertTrue({"k", "l"}.issubset(self.relation.attributes))
        self.assertEqual(self.relation.add_attributes(self.relation.attributes), 0)

    def test_add_dependency_merges_same_lhs(self):
        stored = self.relation.add_dependency(["a"], ["h"])
        self.assertEqual(stored, Dependency(["a"], ["b", "f", "h"]))
        self.assertEqual(self.relation.find_dependency(["a"]), stored)
        self.assertEqual(len(self.relation.dependencies), 3)

    def test_add_dependency_filters_trivial_part(self):
        stored = self.relation.add_dependency(["b"], ["b", "c"])
        self.assertEqual(stored, Dependency(["b"], ["c"]))
        self.assertIsNone(self.relation.add_dependency(["a", "b"], ["a"]))

    def test_add_dependency_update_mode(self):
        stored = self.relation.add_dependency(["x", "y"], ["z"])
        self.assertIsNotNone(stored)
        self.assertTrue({"x", "y", "z"}.issubset(self.relation.attributes))

    def test_add_dependency_without_update(self):
        relation = Relation("S", ["a", "b"])
        # Левая часть вне отношения - зависимость отклоняется
        self.assertIsNone(relation.add_dependency(["x"], ["a"], update=False))
        # Неизвестные атрибуты правой части отбрасываются
        stored = relation.add_dependency(["a"], ["b", "x"], update=False)
        self.assertEqual(stored, Dependency(["a"], ["b"]))
        self.assertEqual(relation.attributes, {"a", "b"})
        # Правая часть опустела
        self.assertIsNone(relation.add_dependency(["b"], ["x"], update=False))

    def test_add_dependencies_counts_added(self):
        relation = Relation("S", ["a", "b", "c"])
        added = relation.add_dependencies([
            Dependency(["a"], ["b"]),
            Dependency(["x"], ["c"]),
            Dependency(["b"], ["c"]),
        ], update=False)
        self.assertEqual(added, 2)

    def test_remove_dependency_partial(self):
        removed = self.relation.remove_dependency(["a", "c"], ["d"])
        self.assertTrue(removed)
        self.assertEqual(self.relation.find_dependency(["a", "c"]), Dependency(["a", "c"], ["g"]))

    def test_remove_dependency_complete(self):
        dep = Dependency(["a", "c"], ["d", "g"])
        self.assertTrue(self.relation.remove_functional_dependency(dep))
        self.assertIsNone(self.relation.find_dependency(["a", "c"]))
        self.assertFalse(self.relation.remove_functional_dependency(dep))

    def test_remove_missing_dependency(self):
        self.assertFalse(self.relation.remove_dependency(["a"], ["c"]))
        self.assertFalse(self.relation.remove_dependency(["x"], ["a"]))

    def test_remove_attribute_from_rhs_keeps_dependency(self):
        self.assertTrue(self.relation.remove_attribute("f"))
        self.assertEqual(self.relation.find_dependency(["a"]), Dependency(["a"], ["b"]))

    def test_remove_attribute_from_lhs_deletes_dependency(self):
        self.assertTrue(self.relation.remove_attribute("b"))
        self.assertIsNone(self.relation.find_dependency(["b", "c", "d"]))
        # b был и в правой части a -> b, f
        self.assertEqual(self.relation.find_dependency(["a"]), Dependency(["a"], ["f"]))
        self.assertNotIn("b", self.relation.attributes)

    def test_remove_attribute_empties_rhs(self):
        relation = Relation("S", ["a", "b"], [Dependency(["a"], ["b"])])
        relation.remove_attribute("b")
        self.assertEqual(relation.dependencies, [])

    def test_remove_missing_attribute(self):
        self.assertFalse(self.relation.remove_attribute("x"))

    def test_remove_attributes(self):
        self.assertEqual(self.relation.remove_attributes(["e", "h", "x"]), 2)
        self.assertEqual(self.relation.attributes, set("abcdfg"))
        # Правая часть b, c, d -> e, h опустела
        self.assertIsNone(self.relation.find_dependency(["b", "c", "d"]))
        self.assertEqual(self.relation.remove_attributes([]), 0)

    def test_set_attributes_projects_dependencies(self):
        self.relation.set_attributes(["a", "b", "c", "d", "e"])
        self.assertEqual(self.relation.attributes, set("abcde"))
        self.assertEqual(self.relation.dependencies, [
            Dependency(["a"], ["b"]),
            Dependency(["a", "c"], ["d"]),
            Dependency(["b", "c", "d"], ["e"]),
        ])

    def test_set_attributes_drops_unknown_lhs(self):
        self.relation.set_attributes(["b", "c", "d", "e"])
        self.assertEqual(self.relation.dependencies, [Dependency(["b", "c", "d"], ["e"])])

    def test_set_dependencies(self):
        added = self.relation.set_dependencies([Dependency(["a"], ["c"]), Dependency(["c"], ["x"])])
        self.assertEqual(added, 2)
        self.assertEqual(self.relation.dependencies, [Dependency(["a"], ["c"]), Dependency(["c"], ["x"])])
        self.assertIn("x", self.relation.attributes)

    def test_set_dependencies_without_update(self):
        added = self.relation.set_dependencies([Dependency(["a"], ["c"]), Dependency(["x"], ["a"])],
                                               update=False)
        self.assertEqual(added, 1)
        self.assertEqual(self.relation.dependencies, [Dependency(["a"], ["c"])])

    def test_set_dependencies_from_own_list(self):
        own = self.relation.dependencies
        self.relation.set_dependencies(own)
        self.assertEqual(self.relation.dependencies, own)

    def test_clear_attributes_clears_dependencies(self):
        self.relation.clear_attributes()
        self.assertEqual(self.relation.attributes, frozenset())
        self.assertEqual(self.relation.dependencies, [])

    def test_clear_dependencies(self):
        self.relation.clear_dependencies()
        self.assertEqual(self.relation.dependencies, [])
        self.assertEqual(len(self.relation.attributes), 8)


class TestRelationQueries(unittest.TestCase):
    def setUp(self):
        self.relation = make_relation()

    def test_closure(self):
        self.assertEqual(self.relation.closure(["a", "c"]), self.relation.attributes)
        self.assertEqual(self.relation.closure(["b"]), {"b"})

    def test_candidate_keys(self):
        self.assertEqual(self.relation.candidate_keys(), [frozenset({"a", "c"})])

    def test_key_predicates(self):
        self.assertTrue(self.relation.is_superkey(["a", "c", "e"]))
        self.assertFalse(self.relation.is_superkey(["a"]))
        self.assertTrue(self.relation.is_partialkey(["a"]))
        self.assertFalse(self.relation.is_partialkey(["a", "c"]))
        self.assertTrue(self.relation.is_prime(["c"]))
        self.assertFalse(self.relation.is_prime(["b"]))

    def test_violations(self):
        self.assertEqual(self.relation.violations(NormalForm.SECOND_NF),
                         [Dependency(["a"], ["b", "f"])])
        self.assertFalse(self.relation.is_normal(NormalForm.BCNF))
        self.assertTrue(self.relation.is_normal(NormalForm.FIRST_NF))


class TestRelationOrdering(unittest.TestCase):
    def test_equality(self):
        self.assertEqual(make_relation(), make_relation())
        other = make_relation()
        other.name = "S"
        self.assertNotEqual(make_relation(), other)

    def test_sorting(self):
        small = Relation("R", ["a"])
        large = Relation("R", ["a", "b"])
        with_dep = Relation("R", ["a", "b"], [Dependency(["a"], ["b"])])
        self.assertEqual(sorted([with_dep, large, small]), [small, large, with_dep])


class TestNormalForm(unittest.TestCase):
    def test_at_least(self):
        self.assertTrue(NormalForm.BCNF.at_least(NormalForm.THIRD_NF))
        self.assertTrue(NormalForm.SECOND_NF.at_least(NormalForm.SECOND_NF))
        self.assertFalse(NormalForm.FIRST_NF.at_least(NormalForm.SECOND_NF))


if __name__ == "__main__":
    unittest.main()
