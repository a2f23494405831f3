"""Verification of assertion conditions and reporting of failures.

Assertion helpers describe *what* failed; this module decides *how* a failure
surfaces. Outside an :class:`AssertionScope` a failure raises
:class:`AssertionFailedError` straight away. Inside a scope failures are
collected and raised together when the scope exits.
"""

from __future__ import annotations

import logging
from contextvars import ContextVar
from typing import Any

from propassert.formatting import render_message, sanitize_reason

logger = logging.getLogger(__name__)

_current_scope: ContextVar[AssertionScope | None] = ContextVar(
    "propassert_assertion_scope", default=None
)


class AssertionFailedError(AssertionError):
    """Raised when one or more assertions fail."""

    def __init__(self, failures: list[str]):
        self.failures = list(failures)
        super().__init__("\n".join(self.failures))


class AssertionScope:
    """Collect failures instead of raising on the first one.

    Usage::

        with AssertionScope():
            properties(Person).should().be_virtual()
            properties(Person).should().be_decorated_with(Required)

    Scopes nest; an inner scope hands its failures to the outer one on exit.
    """

    def __init__(self) -> None:
        self._failures: list[str] = []
        self._parent: AssertionScope | None = None
        self._token = None

    @classmethod
    def current(cls) -> AssertionScope | None:
        return _current_scope.get()

    @property
    def failures(self) -> list[str]:
        return list(self._failures)

    def add_failure(self, message: str) -> None:
        self._failures.append(message)

    def discard(self) -> list[str]:
        """Return the collected failures and forget them."""
        failures = self._failures
        self._failures = []
        return failures

    def __enter__(self) -> AssertionScope:
        self._parent = _current_scope.get()
        self._token = _current_scope.set(self)
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        _current_scope.reset(self._token)
        self._token = None
        if exc_type is not None or not self._failures:
            return
        failures = self.discard()
        if self._parent is not None:
            for failure in failures:
                self._parent.add_failure(failure)
            return
        raise AssertionFailedError(failures)


class Verification:
    """Fluent builder that checks a condition and reports a failure message."""

    def __init__(self) -> None:
        self._condition = True
        self._reason = ""

    def for_condition(self, condition: bool) -> Verification:
        self._condition = bool(condition)
        return self

    def because_of(self, reason: str = "", *reason_args: Any) -> Verification:
        self._reason = sanitize_reason(reason, *reason_args)
        return self

    def fail_with(self, template: str, *args: Any) -> bool:
        """Report *template* if the condition does not hold.

        Returns the condition so callers can branch on it when failures are
        being collected by a scope.
        """
        if self._condition:
            return True

        message = render_message(template, self._reason, args)
        logger.debug(f"Assertion failed: {message}")

        scope = _current_scope.get()
        if scope is not None:
            scope.add_failure(message)
            return False
        raise AssertionFailedError([message])


def verify() -> Verification:
    """Begin a verification."""
    return Verification()
