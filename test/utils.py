"""
Tests for the shared helpers.

This module verifies semantic guarantees of `herald.utils`:
- The Unset sentinel is a falsy, final singleton.
- coalesce() only replaces Unset.
- rename() in both its direct and decorator forms.
- mirror() exposes copies of containers, never the backing field.
- ordinal() words and suffixes.
"""
import unittest
from unittest import TestCase

from herald.utils import *


class UtilsTest(TestCase):
    """
    Test suite for the helpers in `herald.utils`.
    """

    def testUnsetSingleton(self) -> None:
        self.assertIs(UnsetType(), Unset)
        self.assertFalse(Unset)
        self.assertEqual(repr(Unset), "Unset")

    def testUnsetIsFinal(self) -> None:
        with self.assertRaises(TypeError):
            type("Subclass", (UnsetType,), {})

    def testCoalesce(self) -> None:
        self.assertEqual(coalesce(Unset, "fallback"), "fallback")
        self.assertIsNone(coalesce(Unset))
        self.assertEqual(coalesce(0, "fallback"), 0)
        self.assertIsNone(coalesce(None, "fallback"))

    def testRenameDirect(self) -> None:
        def function():
            pass

        self.assertIs(rename(function, "renamed"), function)
        self.assertEqual(function.__name__, "renamed")
        self.assertEqual(function.__qualname__, "renamed")

    def testRenameDecorator(self) -> None:
        @rename("renamed")
        def function():
            pass

        self.assertEqual(function.__name__, "renamed")

    def testRenameRejectsBadArguments(self) -> None:
        with self.assertRaises(TypeError):
            rename(42, "name")
        with self.assertRaises(TypeError):
            rename()

    def testMirrorCopiesContainers(self) -> None:
        class Holder:
            values = mirror("values")

            def __init__(self):
                self._values = [1, [2]]

        holder = Holder()
        values = holder.values
        values[1].append(3)
        self.assertEqual(holder.values, [1, [2]])
        with self.assertRaises(AttributeError):
            holder.values = []

    def testOrdinal(self) -> None:
        self.assertEqual([ordinal(number) for number in (1, 2, 10)], ["first", "second", "tenth"])
        self.assertEqual([ordinal(number) for number in (11, 12, 13, 21, 22, 23, 104)],
                         ["11th", "12th", "13th", "21st", "22nd", "23rd", "104th"])


if __name__ == "__main__":
    unittest.main()
