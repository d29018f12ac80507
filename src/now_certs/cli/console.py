"""CLI console helpers with optional Rich support.

This module intentionally avoids module-level imports of optional UI
dependencies so bootstrap paths (``--help``, ``--version``) remain
functional even when Rich is not installed.

Two proxies are exported: :data:`out` for regular command output on
stdout, and :data:`console` for errors and diagnostics on stderr.
"""

from __future__ import annotations

import sys
from typing import Any

from now_certs.exceptions import MissingDependencyError


def _load_rich_console_class() -> type[Any]:
	"""Return ``rich.console.Console`` class or raise ``MissingDependencyError``."""
	try:
		from rich.console import Console
	except ModuleNotFoundError as exc:
		raise MissingDependencyError(
			"rich is not installed. Install with: pip install rich",
		) from exc
	return Console


def get_rich_console(*, stderr: bool = True) -> Any:
	"""Create a Rich console instance targeting stderr (or stdout).

	Lines are never wrapped at the terminal width, so domain names and
	table rows reach pipes intact.
	"""
	console_class = _load_rich_console_class()
	return console_class(stderr=stderr, highlight=False, soft_wrap=True)


def escape(text: str) -> str:
	"""Escape Rich markup in user-supplied *text*."""
	try:
		from rich.markup import escape as rich_escape
	except ModuleNotFoundError:
		return text
	return rich_escape(text)


class _ConsoleProxy:
	"""Minimal ``print``-compatible proxy with Rich fallback."""

	def __init__(self, *, stderr: bool) -> None:
		self._stderr = stderr

	def print(self, *objects: object, end: str = "\n") -> None:
		"""Render with Rich when available, else plain print."""
		try:
			rich_console = get_rich_console(stderr=self._stderr)
		except MissingDependencyError:
			stream = sys.stderr if self._stderr else sys.stdout
			print(*objects, end=end, file=stream, flush=True)
			return
		rich_console.print(*objects, end=end)
		rich_console.file.flush()


console = _ConsoleProxy(stderr=True)
out = _ConsoleProxy(stderr=False)
