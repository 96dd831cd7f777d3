"""
Default registry behavioral tests (decorator, shortcuts, public API).

Scope
- Validate @command(): declaration, executer binding, non-callable rejection.
- Validate module-level shortcuts against the default registry.
- Validate the package-level re-exports.

Conventions
- Test method names follow CamelCase per project convention.
- Tests use the public API (command, run, find, ...) and clear the default
  registry after each test.
"""

from __future__ import annotations

import unittest
from unittest import TestCase

import herald
from herald import command, context, count, create, detach, find, registry, run, sort


class TestDefaultRegistry(TestCase):
    """Behavioral tests for the default registry shortcuts."""

    def setUp(self):
        self.faults = []
        registry.on_fail = self.faults.append

    def tearDown(self):
        registry.clear()

    def testCommandDecorator(self):
        @command("kick", "i|g", ("id", "reason"), 1, 2)
        def kick(session, args):
            return args[0]

        self.assertIs(find("kick").on_exec, kick)
        self.assertEqual(find("kick").info, "<id:integer> <*reason:...>")
        self.assertEqual(run(1, "kick 7 spamming the chat"), 7)

    def testCommandDecoratorOptions(self):
        @command("ban", protected=True, authority=3, help="ban someone")
        def ban(session, args):
            return 1

        listener = find("ban")
        self.assertTrue(listener.protected)
        self.assertEqual(listener.authority, 3)
        self.assertEqual(listener.help, "ban someone")

    def testCommandDecoratorRejectsNonCallable(self):
        with self.assertRaises(TypeError):
            command("broken")("not callable")
        self.assertIsNone(find("broken"))

    def testShortcuts(self):
        create("b")
        create("c")
        create("a")
        self.assertEqual(count(), 3)
        sort()
        self.assertEqual([listener.name for listener in registry], ["c", "b", "a"])
        detach("b")
        self.assertIsNone(find("b"))
        self.assertEqual(count(), 2)

    def testContextShortcut(self):
        seen = []

        @command("where")
        def where(session, args):
            seen.append(context().command)
            return 1

        self.assertIsNone(context())
        run(1, "where")
        self.assertEqual(seen, ["where"])

    def testRunNeverRaises(self):
        self.assertEqual(run(1, "missing"), -1)
        self.assertEqual(len(self.faults), 1)


class TestPublicApi(TestCase):
    """Behavioral tests for the package namespace."""

    def testExports(self):
        for name in ("Registry", "Listener", "ArgFlag", "FaultCode", "dispatch", "current", "install"):
            self.assertIn(name, herald.__all__)
            self.assertTrue(hasattr(herald, name))

    def testDefaultRegistryShadowsModule(self):
        self.assertIsInstance(herald.registry, herald.Registry)

    def testVersionInfo(self):
        self.assertEqual(herald.version_info.releaselevel, "final")


if __name__ == "__main__":
    unittest.main()
