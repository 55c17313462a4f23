"""
Tests for the internal helpers and the logging setup.

This module verifies:
- The Unset sentinel (singleton, falsy, copy/pickle identity, finality).
- coalesce/rename/mirror/pluralize behavior.
- setup_logging() level mapping and handler idempotence.
"""
import copy
import logging
import pickle
import unittest
from unittest import TestCase

from rich.logging import RichHandler

from simpleconsole.logs import *
from simpleconsole.utils import *


class TestUnset(TestCase):

    def testSingleton(self):
        self.assertIs(UnsetType(), Unset)

    def testFalsy(self):
        self.assertFalse(Unset)
        self.assertIsNot(Unset, None)
        self.assertEqual(repr(Unset), "Unset")

    def testCopyAndPickle(self):
        self.assertIs(copy.copy(Unset), Unset)
        self.assertIs(copy.deepcopy(Unset), Unset)
        self.assertIs(pickle.loads(pickle.dumps(Unset)), Unset)

    def testFinal(self):
        with self.assertRaises(TypeError):
            type("Subclass", (UnsetType,), {})


class TestHelpers(TestCase):

    def testCoalesce(self):
        self.assertEqual(coalesce(Unset, "fallback"), "fallback")
        self.assertIsNone(coalesce(None, "fallback"))
        self.assertEqual(coalesce(0, 1), 0)
        self.assertIsNone(coalesce(Unset))

    def testRename(self):
        @rename("renamed")
        def function():
            pass

        self.assertEqual(function.__name__, "renamed")
        self.assertEqual(function.__qualname__, "renamed")

        with self.assertRaises(TypeError):
            rename(1)
        with self.assertRaises(TypeError):
            rename()

    def testMirror(self):
        class Holder:
            items = mirror("items")

            def __init__(self):
                self._items = ["a"]

        holder = Holder()
        holder.items.append("b")
        self.assertEqual(holder.items, ["a"])
        with self.assertRaises(AttributeError):
            holder.items = []

    def testPluralize(self):
        self.assertEqual(pluralize("argument"), "arguments")
        self.assertEqual(pluralize("option"), "options")
        self.assertEqual(pluralize("entry"), "entries")
        self.assertEqual(pluralize("required Option"), "required Options")


class TestLogging(TestCase):

    def testLevels(self):
        self.assertEqual(get_level(0), logging.WARNING)
        self.assertEqual(get_level(1), logging.INFO)
        self.assertEqual(get_level(2), logging.DEBUG)
        self.assertEqual(get_level(7), logging.DEBUG)
        self.assertEqual(get_level(-1), logging.WARNING)

    def testSetupIsIdempotent(self):
        logger = setup_logging(2)
        setup_logging(0)
        handlers = [x for x in logger.handlers if isinstance(x, RichHandler)]
        self.assertEqual(len(handlers), 1)
        self.assertEqual(logger.name, "simpleconsole")
        self.assertEqual(logger.level, logging.WARNING)
        self.assertFalse(logger.propagate)


if __name__ == "__main__":
    unittest.main()
