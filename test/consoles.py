"""
Console tests (execute flow, hooks, built-in options, exit codes, output).

Conventions
- Test method names follow CamelCase per project convention.
- stdout/stderr are in-memory rich consoles without colors.
"""
import io
import logging
import unittest
from unittest import TestCase

from rich.console import Console as RichConsole

from simpleconsole import Console
from simpleconsole.faults import *


def make_console(**options):
    return Console(
        "command",
        stdout=RichConsole(file=io.StringIO(), width=120, color_system=None),
        stderr=RichConsole(file=io.StringIO(), width=120, color_system=None),
        colorful=False,
        **options,
    )


def stdout(app):
    return app._stdout.file.getvalue()


def stderr(app):
    return app._stderr.file.getvalue()


class TestConsoleExecute(TestCase):

    def testExecuteCallback(self):
        params = {}
        app = make_console()
        app.add_parameter("name", app.STRING)
        app.add_parameter("steps", app.NUMERIC)
        app.add_parameter("--foo", app.STRING)
        app.add_parameter("--bar", app.STRING, default="BAR")

        def main(app):
            params.update(app.params)

        code = app.execute(["command", "Hello", "--foo", "QWQ"], main)

        self.assertEqual(code, Console.SUCCESS)
        self.assertEqual(params, {
            "name": "Hello",
            "steps": False,
            "foo": "QWQ",
            "bar": "BAR",
        })

    def testExecuteExtends(self):
        class App(Console):
            parsed = None

            def configure(self):
                self.add_parameter("name", self.STRING)
                self.add_parameter("steps", self.NUMERIC)
                self.add_parameter("--foo", self.STRING)
                self.add_parameter("--bar", self.STRING, default="BAR")

            def do_execute(self):
                self.parsed = dict(self.params)
                return self.SUCCESS

        app = App(
            "command",
            stdout=RichConsole(file=io.StringIO()),
            stderr=RichConsole(file=io.StringIO()),
        )
        self.assertEqual(app.execute(["command", "Hello", "--foo", "QWQ"]), 0)
        self.assertEqual(app.parsed["name"], "Hello")
        self.assertEqual(app.parsed["foo"], "QWQ")
        self.assertIs(app.parsed["steps"], False)
        self.assertEqual(app.parsed["bar"], "BAR")

    def testExitCodeFromMain(self):
        app = make_console()
        self.assertEqual(app.execute(["command"], lambda app: 3), 3)
        self.assertEqual(app.execute(["command"], lambda app: None), Console.SUCCESS)

    def testDefaultDoExecute(self):
        self.assertEqual(make_console().execute(["command"]), Console.SUCCESS)

    def testGet(self):
        app = make_console()
        app.add_parameter("--location|-l", app.STRING)
        app.execute(["command", "-l", "Europe"], lambda app: None)
        self.assertEqual(app.get("location"), "Europe")
        self.assertEqual(app.get("-l"), "Europe")
        self.assertEqual(app.get("missing", "fallback"), "fallback")

    def testRun(self):
        app = make_console()
        with self.assertRaises(SystemExit) as context:
            app.run(["command"], lambda app: 2)
        self.assertEqual(context.exception.code, 2)


class TestConsoleBuiltins(TestCase):

    def testHelp(self):
        app = make_console(header="SHOW ME - v1.0")
        app.add_parameter("name", app.STRING, "Name Description", required=True)
        app.add_parameter("--foo|-f", app.STRING, "Foo Description")
        called = []

        self.assertEqual(app.execute(["command", "Hello", "--help"], called.append), Console.SUCCESS)
        self.assertEqual(called, [])
        output = stdout(app)
        self.assertIn("SHOW ME - v1.0", output)
        self.assertIn("usage: command", output)
        self.assertIn("-h, --help", output)
        self.assertIn("-v, --verbosity", output)
        self.assertIn("Foo Description", output)

    def testHelpWinsOverInvalidInput(self):
        app = make_console()
        app.add_parameter("name", app.STRING, required=True)

        self.assertEqual(app.execute(["command", "-h"]), Console.SUCCESS)
        self.assertIn("<name>", stdout(app))
        self.assertEqual(stderr(app), "")

    def testHelpAfterTerminatorIsArgument(self):
        app = make_console()
        app.add_parameter("name", app.STRING, required=True)

        self.assertEqual(app.execute(["command", "--", "--help"], lambda app: None), Console.SUCCESS)
        self.assertEqual(app.get("name"), "--help")
        self.assertNotIn("help", app.params)

    def testVerbosity(self):
        app = make_console()
        app.execute(["command", "-vv"], lambda app: None)
        self.assertEqual(app.verbosity, 2)
        self.assertEqual(logging.getLogger("simpleconsole").level, logging.DEBUG)

        app.execute(["command"], lambda app: None)
        self.assertEqual(app.verbosity, 0)
        self.assertEqual(logging.getLogger("simpleconsole").level, logging.WARNING)

    def testBuiltinKeysLeftOut(self):
        app = make_console()
        app.add_parameter("--foo", app.STRING)

        app.execute(["command", "-vv", "--foo", "x"], lambda app: None)
        self.assertEqual(app.verbosity, 2)
        self.assertEqual(dict(app.params), {"foo": "x"})
        self.assertIsNone(app.get("verbosity"))

    def testUserAliasesWin(self):
        app = make_console()
        app.add_parameter("--version|-v", app.BOOLEAN)

        app.execute(["command", "-v"], lambda app: None)
        self.assertIs(app.get("version"), True)
        self.assertEqual(app.get_option("verbosity").names, ("--verbosity",))

    def testUserHelpWins(self):
        app = make_console()
        app.add_parameter("--help", app.STRING)

        self.assertEqual(app.execute(["command", "--help", "topic"], lambda app: None), Console.SUCCESS)
        self.assertEqual(app.get("help"), "topic")
        self.assertEqual(dict(app.params), {"help": "topic"})
        self.assertEqual(stdout(app), "")

    def testBuiltinsInstalledOnce(self):
        app = make_console()
        app.execute(["command"], lambda app: None)
        app.execute(["command"], lambda app: None)
        self.assertEqual(list(app.options), ["help", "verbosity"])


class TestConsoleFailures(TestCase):

    def testInvalidParameter(self):
        app = make_console()
        app.add_parameter("name", app.STRING, required=True)

        self.assertEqual(app.execute(["command"], lambda app: None), Console.FAILURE)
        output = stderr(app)
        self.assertIn("usage: command", output)
        self.assertIn("required argument 'name' is missing", output)
        self.assertIn("Missing Argument", output)
        self.assertEqual(stdout(app), "")

    def testInvalidParameterOutsideShell(self):
        app = make_console(shell=False)
        app.add_parameter("name", app.STRING, required=True)

        with self.assertRaises(MissingParameterError):
            app.execute(["command"], lambda app: None)

    def testExceptionInMain(self):
        def main(app):
            raise RuntimeError("boom")

        app = make_console()
        self.assertEqual(app.execute(["command"], main), Console.FAILURE)
        self.assertIn("RuntimeError: boom", stderr(app))
        self.assertNotIn("Traceback", stderr(app))

    def testExceptionInMainVerbose(self):
        def main(app):
            raise RuntimeError("boom")

        app = make_console()
        self.assertEqual(app.execute(["command", "-v"], main), Console.FAILURE)
        self.assertIn("Traceback", stderr(app))
        self.assertIn("boom", stderr(app))

    def testExceptionOutsideShell(self):
        def main(app):
            raise RuntimeError("boom")

        with self.assertRaises(RuntimeError):
            make_console(shell=False).execute(["command"], main)


class TestConsoleOutput(TestCase):

    def testWrite(self):
        app = make_console()
        app.write("Hello ")
        app.writeln("[World]")
        self.assertEqual(stdout(app), "Hello [World]\n")

    def testError(self):
        app = make_console()
        app.error("oops")
        self.assertEqual(stderr(app), "oops\n")
        self.assertEqual(stdout(app), "")

    def testConfirm(self):
        app = make_console(stdin=io.StringIO("y\n"))
        self.assertIs(app.in_("Are you sure [Y/n]", True, True), True)
        self.assertIn("Are you sure [Y/n]", stdout(app))

        app = make_console(stdin=io.StringIO("n\n"))
        self.assertIs(app.in_("Are you sure", True, True), False)

    def testConfirmDefault(self):
        self.assertIs(make_console(stdin=io.StringIO("\n")).in_("Sure?", True, True), True)
        self.assertIs(make_console(stdin=io.StringIO("")).in_("Sure?", boolean=True), False)

    def testConfirmAsksAgain(self):
        app = make_console(stdin=io.StringIO("maybe\ny\n"))
        self.assertIs(app.in_("Sure?", boolean=True), True)
        self.assertEqual(stdout(app).count("Sure?"), 2)

    def testAsk(self):
        app = make_console(stdin=io.StringIO("Asika\n"))
        self.assertEqual(app.in_("Your name"), "Asika")

        app = make_console(stdin=io.StringIO("\n"))
        self.assertEqual(app.in_("Your name", "World"), "World")
        self.assertEqual(stderr(app), "")

    def testTypeConstants(self):
        self.assertEqual(Console.SUCCESS, 0)
        self.assertEqual(Console.FAILURE, 1)
        self.assertEqual(Console.ARRAY.value, "array")


if __name__ == "__main__":
    unittest.main()
