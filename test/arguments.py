"""
Arguments module behavioral tests (option specs, shapes, descriptor protocol).

Scope
- Validate Option construction: names, alt names, types, shapes and defaults.
- Validate shape inference from the declared type.
- Validate binding (display name from the attribute, single binding).
- Validate the descriptor protocol: defaults, stored values and per-command
  list/map containers.

Conventions
- Test method names follow CamelCase per project convention.
- Tests use the public API (Option, Shape, Command).
"""

from __future__ import annotations

import unittest
from enum import Enum
from pathlib import Path
from unittest import TestCase

from switchyard import Command, Option, Shape
from switchyard.utils import Unset


class Color(Enum):
    red = 1
    green = 2


class TestOptionConstruction(TestCase):
    """Construction, validation and introspection of option specs."""

    def testDefaults(self):
        option = Option()
        self.assertIsNone(option.altname)
        self.assertIs(option.type, str)
        self.assertIs(option.shape, Shape.SCALAR)
        self.assertIsNone(option.default)
        self.assertIsNone(option.descr)
        self.assertFalse(option.hidden)

    def testAltNameIsStripped(self):
        self.assertEqual(Option(" o ").altname, "o")

    def testInvalidNamesRejected(self):
        for name in ("-o", "/o", "1x", "verbose-", "_x", "a b"):
            with self.subTest(name=name), self.assertRaises(ValueError):
                Option(name)

    def testEmptyNameRejected(self):
        with self.assertRaises(ValueError):
            Option(name="  ")

    def testNonStringNameRejected(self):
        with self.assertRaises(TypeError):
            Option(42)

    def testHyphenatedNamesAccepted(self):
        self.assertEqual(Option(name="no-build").name, "no-build")

    def testTypeMustBeCallable(self):
        with self.assertRaises(TypeError):
            Option(type="int")

    def testDescrEmptyRejected(self):
        with self.assertRaises(ValueError):
            Option(descr="   ")

    def testDescrExplicitNoneRejected(self):
        with self.assertRaises(TypeError):
            Option(descr=None)

    def testBooleanDefaultsToFalse(self):
        option = Option(type=bool)
        self.assertIs(option.default, False)
        self.assertTrue(option.boolean)

    def testExplicitDefault(self):
        self.assertEqual(Option(type=int, default=3).default, 3)

    def testNonBooleanSwitches(self):
        self.assertFalse(Option().boolean)
        self.assertFalse(Option(type=Color).boolean)

    def testContainerDefaultRejected(self):
        with self.assertRaises(TypeError):
            Option(type=list, default=["a"])
        with self.assertRaises(TypeError):
            Option(type=dict, default={})

    def testRepr(self):
        self.assertTrue(repr(Option("o")).startswith("option(name=Unset, altname='o'"))

    def testGenericAlias(self):
        self.assertIs(Option[int](type=int).shape, Shape.SCALAR)


class TestShapeInference(TestCase):
    """Value shape inferred from the declared type or given explicitly."""

    def testScalarTypes(self):
        for type in (str, int, float, bool, Path, lambda value: value):
            with self.subTest(type=type):
                self.assertIs(Option(type=type).shape, Shape.SCALAR)

    def testListTypes(self):
        for type in (list, tuple, set, list[str], frozenset[str]):
            with self.subTest(type=type):
                self.assertIs(Option(type=type).shape, Shape.LIST)

    def testMapTypes(self):
        for type in (dict, dict[str, str]):
            with self.subTest(type=type):
                self.assertIs(Option(type=type).shape, Shape.MAP)

    def testEnumType(self):
        self.assertIs(Option(type=Color).shape, Shape.ENUM)

    def testExplicitShape(self):
        self.assertIs(Option(shape=Shape.LIST).shape, Shape.LIST)

    def testExplicitShapeMustBeShape(self):
        with self.assertRaises(TypeError):
            Option(shape="list")

    def testEnumShapeRequiresEnumType(self):
        with self.assertRaises(TypeError):
            Option(shape=Shape.ENUM)


class TestOptionBinding(TestCase):
    """Names and attributes assigned when the owning class is created."""

    def testNameFromAttribute(self):
        class Sample(Command):
            no_build = Option()
            _private_ = Option()

        self.assertEqual(Sample.options["no_build"].name, "no-build")
        self.assertEqual(Sample.options["_private_"].name, "private")
        self.assertEqual(Sample.options["no_build"].attribute, "no_build")

    def testExplicitNameWins(self):
        class Sample(Command):
            output = Option(name="out-dir")

        self.assertEqual(Sample.options["output"].name, "out-dir")

    def testUnboundOption(self):
        option = Option()
        self.assertIs(option.name, Unset)
        self.assertFalse(option.attribute)

    def testBindingTwiceRejected(self):
        option = Option()
        with self.assertRaises(TypeError):
            class Sample(Command):
                first = option
                second = option


class TestDescriptor(TestCase):
    """Reading and writing option values on command instances."""

    class Sample(Command):
        output = Option("o")
        count = Option(type=int, default=1)
        verbose = Option("v", type=bool)
        tags = Option(type=list)
        properties = Option(type=dict)

    def testClassAccessReturnsOption(self):
        self.assertIsInstance(self.Sample.__dict__["output"], Option)
        self.assertIs(self.Sample.output, self.Sample.options["output"])

    def testDefaultsBeforeAssignment(self):
        command = self.Sample()
        self.assertIsNone(command.output)
        self.assertEqual(command.count, 1)
        self.assertIs(command.verbose, False)

    def testStoredValue(self):
        command = self.Sample()
        command.output = "dir"
        self.assertEqual(command.output, "dir")
        self.assertIsNone(self.Sample().output)

    def testContainersAreCreatedOnce(self):
        command = self.Sample()
        self.assertEqual(command.tags, [])
        self.assertIs(command.tags, command.tags)
        self.assertEqual(command.properties, {})
        self.assertIs(command.properties, command.properties)

    def testContainersAreNotShared(self):
        first, second = self.Sample(), self.Sample()
        first.tags.append("a")
        self.assertEqual(second.tags, [])


if __name__ == "__main__":
    unittest.main()
