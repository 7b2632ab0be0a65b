"""
Tests for the shared helpers: the Unset sentinel, coalesce, rename, mirror,
prefixed and tokenize.
"""
import copy
import unittest
from types import MappingProxyType
from unittest import TestCase

from argtree.utils import *


class UnsetTest(TestCase):
    def testSingleton(self):
        self.assertIs(UnsetType(), Unset)
        self.assertIs(copy.copy(Unset), Unset)

    def testFalsyAndRepr(self):
        self.assertFalse(Unset)
        self.assertEqual(repr(Unset), "Unset")

    def testFinal(self):
        with self.assertRaises(TypeError):
            type("Subclass", (UnsetType,), {})

    def testCoalesce(self):
        self.assertEqual(coalesce(Unset, "fallback"), "fallback")
        self.assertEqual(coalesce(0, "fallback"), 0)
        self.assertIsNone(coalesce(None, "fallback"))


class RenameTest(TestCase):
    def testDirectForm(self):
        function = rename(lambda: None, "named")
        self.assertEqual(function.__name__, "named")
        self.assertEqual(function.__qualname__, "named")

    def testDecoratorForm(self):
        @rename("other")
        def function():
            pass

        self.assertEqual(function.__name__, "other")

    def testRejectsBadArguments(self):
        with self.assertRaises(TypeError):
            rename(1, "name")
        with self.assertRaises(TypeError):
            rename()


class MirrorTest(TestCase):
    def setUp(self):
        class Holder:
            items = mirror("items")
            table = mirror("table")
            tags = mirror("tags")
            label = mirror("label")

            def __init__(self):
                self._items = [1, 2]
                self._table = {"a": 1}
                self._tags = {"x"}
                self._label = "text"

        self.holder = Holder()

    def testSnapshots(self):
        self.assertEqual(self.holder.items, (1, 2))
        self.assertIsInstance(self.holder.table, MappingProxyType)
        self.assertEqual(self.holder.tags, frozenset({"x"}))
        self.assertEqual(self.holder.label, "text")

    def testReadOnly(self):
        with self.assertRaises(AttributeError):
            self.holder.label = "changed"
        with self.assertRaises(TypeError):
            self.holder.table["b"] = 2


class PrefixedTest(TestCase):
    def testFiltersInOrder(self):
        self.assertEqual(list(prefixed(["spawn", "speed", "stop"], "sp")), ["spawn", "speed"])

    def testEmptyPartialMatchesAll(self):
        self.assertEqual(list(prefixed(["a", "b"], "")), ["a", "b"])

    def testIgnoreCaseKeepsOriginalSpelling(self):
        self.assertEqual(list(prefixed(["Spawn", "stop"], "SP", ignorecase=True)), ["Spawn"])
        self.assertEqual(list(prefixed(["Spawn"], "sp")), [])


class TokenizeTest(TestCase):
    def testSplitsOnWhitespace(self):
        self.assertEqual(tokenize("tp  3\t4"), ["tp", "3", "4"])
        self.assertEqual(tokenize(""), [])

    def testKeepsQuotesInsideTokens(self):
        self.assertEqual(tokenize('say "hi there"'), ["say", '"hi', 'there"'])

    def testPartialTrailingBlank(self):
        self.assertEqual(tokenize("tp ", partial=True), ["tp", ""])
        self.assertEqual(tokenize("tp he", partial=True), ["tp", "he"])
        self.assertEqual(tokenize("", partial=True), [""])

    def testRejectsNonString(self):
        with self.assertRaises(TypeError):
            tokenize(["tp"])


if __name__ == "__main__":
    unittest.main()
