"""Assertions over a selection of properties from a class."""

from __future__ import annotations

import logging
from typing import Any, Iterable

from propassert.assertions.base import AndConstraint
from propassert.execution import verify
from propassert.formatting import escape_braces
from propassert.reflection import PropertyInfo, is_decorated_with


def _descriptions(properties: Iterable[PropertyInfo]) -> str:
    return "\n".join(escape_braces(prop.description) for prop in properties)


class PropertyInfoAssertions:
    """Assertions for the properties selected from ``subject_type``.

    Attributes:
        subject_type: The class that contains the properties.
        subject_properties: The selected properties, in selection order.
    """

    def __init__(
        self,
        subject_type: type,
        properties: Iterable[PropertyInfo],
        logger: logging.Logger | None = None,
    ):
        self.subject_type = subject_type
        self.subject_properties: tuple[PropertyInfo, ...] = tuple(properties)
        self._logger = logger or logging.getLogger(__name__)

    def be_virtual(
        self, reason: str = "", *reason_args: Any
    ) -> AndConstraint[PropertyInfoAssertions]:
        """Assert that every selected property can be overridden.

        Args:
            reason: Phrase explaining why the assertion is needed. "because"
                is prepended when the phrase does not start with it.
            reason_args: Values for ``{0}``-style placeholders in *reason*.
        """
        non_virtual = [p for p in self.subject_properties if not p.is_virtual]
        self._logger.debug(
            f"be_virtual on {self.subject_type.__qualname__}: "
            f"{len(non_virtual)} of {len(self.subject_properties)} not virtual"
        )

        verify().for_condition(not non_virtual).because_of(
            reason, *reason_args
        ).fail_with(
            "Expected all selected properties from type {0} to be virtual{reason}, "
            "but the following properties are not virtual:\n"
            + _descriptions(non_virtual),
            self.subject_type,
        )
        return AndConstraint(self)

    def not_be_virtual(
        self, reason: str = "", *reason_args: Any
    ) -> AndConstraint[PropertyInfoAssertions]:
        """Assert that none of the selected properties can be overridden."""
        virtual = [p for p in self.subject_properties if p.is_virtual]
        self._logger.debug(
            f"not_be_virtual on {self.subject_type.__qualname__}: "
            f"{len(virtual)} of {len(self.subject_properties)} virtual"
        )

        verify().for_condition(not virtual).because_of(reason, *reason_args).fail_with(
            "Expected all selected properties from type {0} not to be virtual{reason}, "
            "but the following properties are virtual:\n" + _descriptions(virtual),
            self.subject_type,
        )
        return AndConstraint(self)

    def be_decorated_with(
        self, marker_type: type, reason: str = "", *reason_args: Any
    ) -> AndConstraint[PropertyInfoAssertions]:
        """Assert that every selected property carries a marker of exactly ``marker_type``.

        Args:
            marker_type: The marker class to look for. Instances of its
                subclasses do not count.
            reason: Phrase explaining why the assertion is needed. "because"
                is prepended when the phrase does not start with it.
            reason_args: Values for ``{0}``-style placeholders in *reason*.
        """
        missing = [
            p for p in self.subject_properties if not is_decorated_with(p, marker_type)
        ]
        self._logger.debug(
            f"be_decorated_with({marker_type.__qualname__}) on "
            f"{self.subject_type.__qualname__}: {len(missing)} without marker"
        )

        verify().for_condition(not missing).because_of(reason, *reason_args).fail_with(
            "Expected all selected properties from type {0} to be decorated with "
            "{1}{reason}, but the following properties are not:\n"
            + _descriptions(missing),
            self.subject_type,
            marker_type,
        )
        return AndConstraint(self)

    def not_be_decorated_with(
        self, marker_type: type, reason: str = "", *reason_args: Any
    ) -> AndConstraint[PropertyInfoAssertions]:
        """Assert that no selected property carries a marker of exactly ``marker_type``."""
        decorated = [
            p for p in self.subject_properties if is_decorated_with(p, marker_type)
        ]
        self._logger.debug(
            f"not_be_decorated_with({marker_type.__qualname__}) on "
            f"{self.subject_type.__qualname__}: {len(decorated)} with marker"
        )

        verify().for_condition(not decorated).because_of(
            reason, *reason_args
        ).fail_with(
            "Expected all selected properties from type {0} not to be decorated with "
            "{1}{reason}, but the following properties are:\n"
            + _descriptions(decorated),
            self.subject_type,
            marker_type,
        )
        return AndConstraint(self)
