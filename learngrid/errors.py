"""Errors that carry a description and the call stack where they were raised."""

from __future__ import annotations

import os
import traceback

FULL_DEBUG_ENV = "LEARNGRID_FULL_DEBUG"
_PACKAGE_MARKER = "learngrid"
_INVALID_STACK = "<invalid>"


def wrap_lines_with_tab_prefix(text: str) -> str:
    """Prefix every line of ``text`` with a tab."""
    return "\n".join(f"\t{line}" for line in text.split("\n"))


def _capture_stack() -> str:
    lines = (
        line
        for entry in traceback.format_stack()
        for line in entry.splitlines()
    )
    kept = [
        line
        for line in lines
        if _PACKAGE_MARKER in line and __file__ not in line
    ]
    return "\t\t\n".join(kept) if kept else _INVALID_STACK


class LearnError(Exception):
    """An error wrapping another one, with a description and a captured stack."""

    def __init__(
        self,
        wrapped: object = None,
        description: str = "",
        stack: str | None = None,
    ) -> None:
        super().__init__(wrapped, description)
        self.wrapped = wrapped
        self.description = description
        self.stack = _capture_stack() if stack is None else stack
        if isinstance(wrapped, BaseException):
            self.__cause__ = wrapped

    def __str__(self) -> str:
        if os.environ.get(FULL_DEBUG_ENV) == "true":
            return (
                f"LearnError( {wrap_lines_with_tab_prefix(str(self.wrapped))}\n"
                f"\tCaptured at: {wrap_lines_with_tab_prefix(self.stack)}\n)"
            )
        return f"LearnError( {self.description}: {self.wrapped} )"


def describe_error(description: str, err: object) -> LearnError:
    """Wrap ``err`` in a LearnError with a description."""
    return LearnError(err, description)


def wrap_error(err: object) -> LearnError:
    """Wrap ``err`` in a LearnError without a description."""
    return LearnError(err)


def format_error(err: object, fmt: str, *args: object) -> LearnError:
    """Wrap ``err`` with a description built from ``fmt % args``."""
    description = fmt % args if args else fmt
    return describe_error(description, err)