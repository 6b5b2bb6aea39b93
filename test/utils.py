"""
Tests for the internal helpers.

This module verifies the semantic guarantees of the utilities:
- Unset: singleton identity, falsy semantics, representation, copy/pickle
  identity, union support and finality.
- coalesce(): Unset replacement without touching other falsy values.
- rename(): direct and decorator forms, argument validation.
- mirror(): read-only properties over private fields with frozen containers.
"""
import copy
import pickle
import unittest
from threading import Thread, Lock
from types import MappingProxyType
from unittest import TestCase

from switchyard.utils import *


class UnsetTest(TestCase):
    """
    Test suite for the `UnsetType` singleton.
    """

    def setUp(self) -> None:
        self.unset: UnsetType = UnsetType()

    def testSingleton(self) -> None:
        """
        The constructor returns the same object reference on every call.
        """
        self.assertIs(self.unset, UnsetType())
        self.assertIs(Unset, self.unset)

    def testRepr(self) -> None:
        self.assertEqual(repr(self.unset), "Unset")
        self.assertEqual(str(self.unset), "Unset")

    def testFalsely(self) -> None:
        self.assertFalse(bool(self.unset))

    def testNotEqualToNoneOrFalse(self) -> None:
        """
        Falsy does not imply equality with other falsy values (None/False).
        """
        self.assertNotEqual(self.unset, None)
        self.assertNotEqual(self.unset, False)  # noqa: E712

    def testCopyDeepcopyPreserveSingleton(self) -> None:
        self.assertIs(copy.copy(self.unset), self.unset)
        self.assertIs(copy.deepcopy(self.unset), self.unset)

    def testPickleRoundTrip(self) -> None:
        self.assertIs(pickle.loads(pickle.dumps(self.unset)), self.unset)

    def testThreadSafetySingleton(self) -> None:
        """
        Concurrent constructions return the same instance.
        """
        results: list[UnsetType] = []
        lock: Lock = Lock()

        def worker():
            instance = UnsetType()
            with lock:
                results.append(instance)

        threads: list[Thread] = [Thread(target=worker) for _ in range(16)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        self.assertEqual(len(results), 16)
        for instance in results:
            self.assertIs(instance, self.unset)

    def testUnionWithTypes(self) -> None:
        """
        `str | Unset` builds a union usable with isinstance().
        """
        self.assertIsInstance(Unset, str | Unset)
        self.assertIsInstance("text", str | Unset)
        self.assertNotIsInstance(0, str | Unset)

    def testFinalClass(self) -> None:
        with self.assertRaises(TypeError):
            type("UnsetType", (UnsetType,), {})


class CoalesceTest(TestCase):

    def testUnsetIsReplaced(self) -> None:
        self.assertEqual(coalesce(Unset, "fallback"), "fallback")
        self.assertIsNone(coalesce(Unset))

    def testFalsyValuesArePreserved(self) -> None:
        for value in (None, 0, "", False, []):
            self.assertIs(coalesce(value, "fallback"), value)


class RenameTest(TestCase):

    def testDirectForm(self) -> None:
        def function():
            pass

        self.assertIs(rename(function, "renamed"), function)
        self.assertEqual(function.__name__, "renamed")
        self.assertEqual(function.__qualname__, "renamed")

    def testDecoratorForm(self) -> None:
        @rename("renamed")
        def function():
            pass

        self.assertEqual(function.__name__, "renamed")

    def testInvalidArguments(self) -> None:
        with self.assertRaises(TypeError):
            rename(42, "name")
        with self.assertRaises(TypeError):
            rename(lambda: None, 42)
        with self.assertRaises(TypeError):
            rename()
        with self.assertRaises(TypeError):
            rename("name")(42)


class MirrorTest(TestCase):

    class Holder:
        items = mirror("items")
        table = mirror("table")
        label = mirror("label")

        def __init__(self):
            self._items = ["a", "b"]
            self._table = {"k": "v"}
            self._label = "text"

    def testScalarIsReturned(self) -> None:
        self.assertEqual(self.Holder().label, "text")

    def testContainersAreFrozen(self) -> None:
        holder = self.Holder()
        self.assertEqual(holder.items, ("a", "b"))
        self.assertIsInstance(holder.table, MappingProxyType)
        with self.assertRaises(TypeError):
            holder.table["k"] = "w"  # noqa

    def testPropertyIsReadOnly(self) -> None:
        with self.assertRaises(AttributeError):
            self.Holder().label = "other"  # noqa

    def testNameMustBeString(self) -> None:
        with self.assertRaises(TypeError):
            mirror(42)


if __name__ == '__main__':
    unittest.main()
