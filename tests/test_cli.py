import argparse
import unittest
from unittest import mock

import cli
from config import WatchmanSettings


class ShellTests(unittest.TestCase):
    def run_shell(self, commands, initial=None):
        printed = []
        with mock.patch("builtins.input", side_effect=commands), mock.patch(
            "builtins.print", side_effect=lambda *args, **kwargs: printed.append(" ".join(map(str, args)))
        ):
            cli.run(WatchmanSettings(), initial)
        return printed

    def test_remember_and_restore_session(self) -> None:
        printed = self.run_shell(["set x 1", "remember", "set x 2", "restore", "get x", "states", "quit"])
        self.assertEqual(
            printed[1:],
            [
                "[change] x -> 1",
                "[remember] * -> {'x': 1}",
                "[change] x -> 2",
                "[restore] * -> {'x': 1}",
                "1",
                "[]",
                "Goodbye.",
            ],
        )

    def test_property_history_and_unset(self) -> None:
        printed = self.run_shell(
            ["remember a", "set a [1, 2]", "states a", "unset a", "unset missing", "quit"],
            initial={"a": "one"},
        )
        self.assertIn("[remember] a -> 'one'", printed)
        self.assertIn("[change] a -> [1, 2]", printed)
        self.assertIn('["one"]', printed)
        self.assertIn("[change] a -> True", printed)
        self.assertIn("[change] missing -> False", printed)

    def test_text_values_and_usage_errors(self) -> None:
        printed = self.run_shell(["set greeting hello world", "get", "set lonely", "bogus", "quit"])
        self.assertIn("[change] greeting -> 'hello world'", printed)
        self.assertIn('{"greeting": "hello world"}', printed)
        self.assertIn("Usage: set name value", printed)
        self.assertIn("Unknown command 'bogus'. Type 'help' for commands.", printed)

    def test_eof_exits_cleanly(self) -> None:
        printed = self.run_shell(["", "help", EOFError()])
        self.assertIn(cli.HELP, printed)
        self.assertEqual(printed[-1], "\nExiting...")


class ArgumentTests(unittest.TestCase):
    def test_parse_value(self) -> None:
        self.assertEqual(cli.parse_value("3"), 3)
        self.assertEqual(cli.parse_value('{"a": true}'), {"a": True})
        self.assertEqual(cli.parse_value("plain"), "plain")

    def test_parse_assignment(self) -> None:
        self.assertEqual(cli.parse_assignment("count=3"), ("count", 3))
        self.assertEqual(cli.parse_assignment("name=a=b"), ("name", "a=b"))
        with self.assertRaises(argparse.ArgumentTypeError):
            cli.parse_assignment("novalue")

    def test_main_builds_settings_and_initial_attributes(self) -> None:
        with mock.patch.object(cli, "load_settings", return_value=WatchmanSettings()), mock.patch.object(
            cli, "configure_logger"
        ) as configure, mock.patch.object(cli, "run") as run:
            code = cli.main(["--set", "a=1", "--set", "b=text", "--log-level", "debug", "--thread-safe"])

        self.assertEqual(code, 0)
        configure.assert_called_once_with("", "DEBUG", False)
        settings, initial = run.call_args.args
        self.assertTrue(settings.thread_safe)
        self.assertEqual(initial, {"a": 1, "b": "text"})

    def test_main_rejects_bad_log_level(self) -> None:
        with mock.patch.object(cli, "load_settings", return_value=WatchmanSettings()), mock.patch(
            "sys.stderr"
        ), self.assertRaises(SystemExit):
            cli.main(["--log-level", "loud"])


if __name__ == "__main__":
    unittest.main(verbosity=2)
