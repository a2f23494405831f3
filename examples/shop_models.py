"""Example domain classes checked by examples/rules.yaml.

Run from the repository root with::

    PYTHONPATH=examples propassert check examples/rules.yaml
"""

from __future__ import annotations

from decimal import Decimal
from typing import Annotated, final

from propassert import marked


class Persisted:
    """Marks a property the storage layer maps to a column."""


class Order:
    @property
    @marked(Persisted())
    def reference(self) -> str:
        return "ORD-1"

    @property
    def total(self) -> Annotated[Decimal, Persisted()]:
        return Decimal("9.99")


class Money:
    @property
    @final
    def amount(self) -> Decimal:
        return Decimal("1.00")

    @property
    def currency(self) -> str:
        return "EUR"
