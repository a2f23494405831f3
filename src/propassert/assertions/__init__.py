"""Fluent assertions over class properties."""

from propassert.assertions.base import AndConstraint, AssertionResult
from propassert.assertions.properties import PropertyInfoAssertions

__all__ = ["AndConstraint", "AssertionResult", "PropertyInfoAssertions"]
