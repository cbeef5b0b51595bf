# tests/test_cli_runner.py

"""Tests for the headless CLI commands."""

import io
import json
import unittest
from unittest.mock import patch

from rich.console import Console

from src.cli.runner import (
    ConsoleNotifier,
    cli_search,
    run_clear_cache,
    run_recent,
    run_stats,
)
from src.services.notifications import RecordingNotifier
from src.services.search_orchestrator import SearchOrchestrator
from src.storage.backends import MemoryStorage
from src.storage.result_cache import ResultCache


def _orchestrator() -> SearchOrchestrator:
    return SearchOrchestrator(
        cache=ResultCache(MemoryStorage()), notifier=RecordingNotifier()
    )


class TestCliSearch(unittest.IsolatedAsyncioTestCase):
    """cli_search exit codes and output."""

    async def test_missing_input_exit_code_two(self) -> None:
        code = await cli_search(None, "  ", "json", _orchestrator())
        self.assertEqual(code, 2)

    async def test_json_output(self) -> None:
        """Products go to stdout as a JSON array."""
        with patch("sys.stdout", new_callable=io.StringIO) as out:
            code = await cli_search(
                None, "wireless earbuds", "json", _orchestrator()
            )
        self.assertEqual(code, 0)
        products = json.loads(out.getvalue())
        self.assertEqual(len(products), 3)
        self.assertEqual(products[0]["id"], "earbuds-1")
        self.assertEqual(products[0]["discountPercentage"], 63)
        self.assertEqual(products[0]["savings"], 50.0)
        self.assertIn("affiliateUrl", products[0])

    async def test_table_output(self) -> None:
        with patch("src.cli.runner.Console") as console_cls:
            code = await cli_search(
                None, "led strip", "table", _orchestrator()
            )
        self.assertEqual(code, 0)
        console_cls.return_value.print.assert_called_once()

    async def test_no_products_exit_code_one(self) -> None:
        code = await cli_search(None, "xyzzy", "json", _orchestrator())
        self.assertEqual(code, 1)


class TestCacheCommands(unittest.IsolatedAsyncioTestCase):
    """--recent, --stats and --clear-cache."""

    async def test_recent_stats_clear(self) -> None:
        orchestrator = _orchestrator()
        with patch("sys.stdout", new_callable=io.StringIO):
            await cli_search(None, "wireless earbuds", "json", orchestrator)

        with patch("src.cli.runner.Console") as console_cls:
            self.assertEqual(run_recent(5, orchestrator), 0)
        console_cls.return_value.print.assert_called_once()

        self.assertEqual(run_stats(orchestrator), 0)
        self.assertEqual(run_clear_cache(orchestrator), 0)
        self.assertEqual(orchestrator.recent_searches(), [])

    def test_recent_when_empty(self) -> None:
        with patch("src.cli.runner.Console") as console_cls:
            self.assertEqual(run_recent(5, _orchestrator()), 0)
        console_cls.return_value.print.assert_not_called()


class TestConsoleNotifier(unittest.TestCase):
    """Notifications rendered to a console."""

    def test_title_and_message_printed(self) -> None:
        buffer = io.StringIO()
        console = Console(file=buffer, width=120, color_system=None)
        ConsoleNotifier(console).notify(
            "Try different keywords", title="No Products Found",
            severity="warning",
        )
        text = buffer.getvalue()
        self.assertIn("No Products Found", text)
        self.assertIn("Try different keywords", text)


if __name__ == "__main__":
    unittest.main()
