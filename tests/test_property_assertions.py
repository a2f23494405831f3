"""Tests for PropertyInfoAssertions."""

import pytest

from propassert import AssertionFailedError, AssertionScope, PropertyInfo, properties
from propassert.assertions import AndConstraint, PropertyInfoAssertions
from propassert.reflection import get_properties
from sample_models import Customer, Empty, MaxLength, Person, Required, Sealed, Strict, StrictRequired


def _assertions(cls) -> PropertyInfoAssertions:
    return PropertyInfoAssertions(cls, get_properties(cls))


# --- construction ---


def test_construction_stores_type_and_properties():
    props = get_properties(Person)
    assertions = PropertyInfoAssertions(Person, props)
    assert assertions.subject_type is Person
    assert list(assertions.subject_properties) == props


def test_properties_are_not_affected_by_later_changes_to_the_source():
    props = get_properties(Person)
    assertions = PropertyInfoAssertions(Person, props)
    props.clear()
    assert len(assertions.subject_properties) == 2


# --- be_virtual ---


def test_be_virtual_passes_when_all_virtual():
    result = _assertions(Customer).be_virtual()
    assert isinstance(result, AndConstraint)


def test_be_virtual_fails_listing_non_virtual_properties():
    with pytest.raises(AssertionFailedError) as exc_info:
        _assertions(Person).be_virtual()

    assert str(exc_info.value) == (
        "Expected all selected properties from type Person to be virtual, "
        "but the following properties are not virtual:\n"
        "int age"
    )


def test_be_virtual_lists_every_offender_in_order():
    with pytest.raises(AssertionFailedError) as exc_info:
        _assertions(Sealed).be_virtual()

    message = str(exc_info.value)
    assert message.endswith("not virtual:\nstr code\nint version")


def test_be_virtual_includes_reason():
    with pytest.raises(AssertionFailedError) as exc_info:
        _assertions(Person).be_virtual("{0} must override accessors", "the proxy")

    assert "to be virtual because the proxy must override accessors, but" in str(
        exc_info.value
    )


def test_be_virtual_with_hand_built_records():
    records = [
        PropertyInfo(name="Name", declared_type="String", is_virtual=True),
        PropertyInfo(name="Age", declared_type="Int32", is_virtual=False),
    ]
    with pytest.raises(AssertionFailedError) as exc_info:
        PropertyInfoAssertions(Person, records).be_virtual()

    message = str(exc_info.value)
    assert message.endswith(":\nInt32 Age")
    assert "String Name" not in message


def test_not_be_virtual():
    _assertions(Sealed).not_be_virtual()

    with pytest.raises(AssertionFailedError) as exc_info:
        _assertions(Person).not_be_virtual()
    assert str(exc_info.value) == (
        "Expected all selected properties from type Person not to be virtual, "
        "but the following properties are virtual:\n"
        "str name"
    )


# --- be_decorated_with ---


def test_be_decorated_with_passes_when_all_marked():
    properties(Customer).that_are_public().should().be_decorated_with(Required)


def test_be_decorated_with_fails_listing_unmarked_properties():
    with pytest.raises(AssertionFailedError) as exc_info:
        _assertions(Person).be_decorated_with(Required)

    assert str(exc_info.value) == (
        "Expected all selected properties from type Person to be decorated with "
        "Required, but the following properties are not:\n"
        "int age"
    )


def test_be_decorated_with_requires_exact_kind():
    with pytest.raises(AssertionFailedError):
        _assertions(Strict).be_decorated_with(Required)
    _assertions(Strict).be_decorated_with(StrictRequired)


def test_be_decorated_with_reason():
    with pytest.raises(AssertionFailedError) as exc_info:
        _assertions(Person).be_decorated_with(MaxLength, "because forms validate input")

    assert "decorated with MaxLength because forms validate input, but" in str(
        exc_info.value
    )


def test_not_be_decorated_with():
    _assertions(Sealed).not_be_decorated_with(Required)

    with pytest.raises(AssertionFailedError) as exc_info:
        _assertions(Person).not_be_decorated_with(Required)
    assert str(exc_info.value).endswith("the following properties are:\nstr name")


# --- vacuous truth, idempotence, chaining ---


def test_empty_selection_passes_everything():
    assertions = _assertions(Empty)
    assertions.be_virtual()
    assertions.not_be_virtual()
    assertions.be_decorated_with(Required)
    assertions.not_be_decorated_with(Required)


def test_repeated_calls_give_same_outcome():
    assertions = _assertions(Person)
    messages = []
    for _ in range(2):
        with AssertionScope() as scope:
            assertions.be_virtual()
            assertions.be_decorated_with(Required)
            messages.append(scope.discard())
    assert messages[0] == messages[1]
    assert len(messages[0]) == 2


def test_and_constraint_chains_on_same_subject():
    assertions = _assertions(Customer)
    chained = assertions.be_virtual().and_
    assert chained is assertions
    assertions.be_virtual().and_.be_decorated_with(Required)


def test_scope_collects_failures_from_chained_calls():
    with pytest.raises(AssertionFailedError) as exc_info:
        with AssertionScope():
            _assertions(Person).be_virtual().and_.be_decorated_with(Required)

    assert len(exc_info.value.failures) == 2
