"""
Command layer tests: the builder, the frozen command, failure handlers and
the tp end-to-end scenario.

Conventions
- Test method names follow CamelCase per project convention.
- Senders are plain recorders; nothing is printed.
"""
import unittest
from concurrent.futures import ThreadPoolExecutor
from unittest import TestCase

from argtree.arguments import Integer
from argtree.commands import *
from argtree.contexts import Outcome
from argtree.faults import DispatchExhausted, RequirementFailure
from argtree.nodes import literal, argument, permission
from argtree.registry import Registry


class Recorder:
    def __init__(self, *granted):
        self.messages = []
        self.granted = set(granted)

    def has_permission(self, node):
        return node in self.granted

    def send(self, message):
        self.messages.append(message)


class TestTeleport(TestCase):
    """
    tp here | tp <x> <y>, both coordinates non-negative.
    """

    def setUp(self):
        self.invocations = []
        self.command = (
            command("tp")
            .then(literal("here").executes(lambda context: self.invocations.append(("here",))))
            .then(
                argument("x", Integer(min=0))
                .then(argument("y", Integer(min=0)).executes(
                    lambda context: self.invocations.append(("there", context["x"], context["y"]))
                ))
            )
            .auto_fail()
            .build()
        )
        self.sender = Recorder()

    def testHere(self):
        self.assertTrue(self.command.on_command(self.sender, "tp", ["here"]))
        self.assertEqual(self.invocations, [("here",)])
        self.assertEqual(self.sender.messages, [])

    def testCoordinates(self):
        context = self.command.execute(self.sender, "tp", ["3", "4"])
        self.assertIs(context.outcome, Outcome.EXECUTED)
        self.assertEqual(self.invocations, [("there", 3, 4)])
        self.assertEqual(dict(context.arguments), {"x": 3, "y": 4})

    def testUnknownWord(self):
        self.assertFalse(self.command.on_command(self.sender, "tp", ["abc"]))
        context = self.command.execute(self.sender, "tp", ["abc"])
        self.assertIsInstance(context.fault, DispatchExhausted)
        self.assertEqual(self.sender.messages, ["Invalid integer: abc", "Invalid integer: abc"])
        self.assertEqual(self.invocations, [])

    def testHugeNumberFailsCleanly(self):
        token = "9" * 5000
        self.assertFalse(self.command.on_command(self.sender, "tp", [token, "1"]))
        self.assertEqual(self.sender.messages, ["Invalid integer: %s" % token])
        self.assertEqual(self.invocations, [])

    def testIncomplete(self):
        self.assertFalse(self.command.on_command(self.sender, "tp", ["3"]))
        self.assertEqual(self.sender.messages, ["Incomplete command"])

    def testTabComplete(self):
        self.assertEqual(self.command.on_tab_complete(self.sender, "tp", ["he"]), ["here"])
        self.assertEqual(self.command.on_tab_complete(self.sender, "tp", [""]), ["here"])
        self.assertEqual(self.command.on_tab_complete(self.sender, "tp", ["xy"]), [])
        # completion failures stay silent
        self.assertEqual(self.command.on_tab_complete(self.sender, "tp", ["abc", ""]), [])
        self.assertEqual(self.sender.messages, [])

    def testUsages(self):
        self.assertEqual(self.command.usages, ("tp here", "tp <x> <y>"))

    def testArgsMustNotBeAString(self):
        with self.assertRaises(TypeError):
            self.command.on_command(self.sender, "tp", "here")

    def testConcurrentCallers(self):
        def run(index):
            sender = Recorder()
            context = self.command.execute(sender, "tp", [str(index), str(index * 2)])
            return context["x"], context["y"], context.succeeded

        with ThreadPoolExecutor(max_workers=8) as pool:
            results = list(pool.map(run, range(200)))
        self.assertEqual(results, [(index, index * 2, True) for index in range(200)])
        self.assertEqual(sorted(self.invocations), sorted(("there", index, index * 2) for index in range(200)))


class TestCommandBuilder(TestCase):
    def testRootIsCaseInsensitiveLiteral(self):
        root = command("Spawn").build().root
        self.assertEqual(root.name, "Spawn")
        self.assertTrue(root.type.ignorecase)

    def testFailureHandlerIsSetOnce(self):
        builder = command("go").auto_fail()
        self.assertIs(builder.failure, autofail)
        with self.assertRaises(TypeError):
            builder.on_fail(strict)
        with self.assertRaises(TypeError):
            command("go").on_fail("strict")

    def testWithoutHandler(self):
        built = command("go").executes(lambda context: None).build()
        self.assertIsNone(built.failure)
        self.assertFalse(built.on_command(Recorder(), "go", ["extra"]))

    def testRegister(self):
        with Registry() as registry:
            built = command("go").executes(lambda context: None).register(registry, "g")
            self.assertIs(registry.get("g"), built)
            self.assertIs(registry.get("GO"), built)

    def testCommandValidation(self):
        root = literal("go").build()
        with self.assertRaises(TypeError):
            Command("", root)
        with self.assertRaises(TypeError):
            Command("go", literal("go"))
        with self.assertRaises(TypeError):
            Command("go", root, failure=1)


class TestFailureHandlers(TestCase):
    def setUp(self):
        self.builder = (
            command("admin")
            .requires(permission("admin.use"))
            .then(literal("silent").requires(None, lambda context: False).executes(lambda context: None))
            .then(literal("run").executes(lambda context: None))
        )

    def testAutofailForwardsMessages(self):
        built = self.builder.auto_fail().build()
        sender = Recorder()
        self.assertFalse(built.on_command(sender, "admin", ["run"]))
        self.assertEqual(sender.messages, ["You do not have permission to use this command"])

    def testAutofailKeepsSilentRequirementsSilent(self):
        built = self.builder.auto_fail().build()
        sender = Recorder("admin.use")
        self.assertFalse(built.on_command(sender, "admin", ["silent"]))
        self.assertEqual(sender.messages, [])
        self.assertTrue(built.on_command(sender, "admin", ["run"]))

    def testStrictRaisesOnExecution(self):
        built = self.builder.on_fail(strict).build()
        with self.assertRaises(RequirementFailure) as raised:
            built.on_command(Recorder(), "admin", ["run"])
        self.assertEqual(raised.exception.options["command"], "admin")

    def testStrictIgnoresCompletion(self):
        built = self.builder.on_fail(strict).build()
        self.assertEqual(built.on_tab_complete(Recorder(), "admin", ["r"]), [])
        self.assertEqual(built.on_tab_complete(Recorder("admin.use"), "admin", ["r"]), ["run"])


if __name__ == "__main__":
    unittest.main()
