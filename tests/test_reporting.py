from __future__ import annotations

import pytest
from junitparser import Failure, JUnitXml

from propassert.reporting.junit import summarize, write_junit


# ---------------------------------------------------------------------------
# Shared fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def sample_results() -> dict:
    return {
        "person": {
            "target": "models:Person",
            "assertions": [
                {
                    "name": "be_virtual:person",
                    "passed": False,
                    "message": (
                        "Expected all selected properties from type Person to be "
                        "virtual, but the following properties are not virtual:\n"
                        "int age\nstr code"
                    ),
                },
                {
                    "name": "be_decorated_with(Required):person",
                    "passed": True,
                    "message": "2 properties checked",
                },
            ],
            "all_passed": False,
        },
        "customer": {
            "target": "models:Customer",
            "assertions": [
                {"name": "be_virtual:customer", "passed": True, "message": ""},
            ],
            "all_passed": True,
        },
    }


def test_write_junit_one_suite_per_check(tmp_path, sample_results):
    path = write_junit(tmp_path, sample_results)

    assert path == tmp_path / "junit.xml"
    xml = JUnitXml.fromfile(str(path))
    suites = list(xml)
    assert [s.name for s in suites] == ["person", "customer"]
    assert [c.name for c in suites[0]] == [
        "be_virtual:person",
        "be_decorated_with(Required):person",
    ]


def test_write_junit_records_failures(tmp_path, sample_results):
    xml = JUnitXml.fromfile(str(write_junit(tmp_path, sample_results)))
    person = list(xml)[0]

    assert person.failures == 1
    failing_case = list(person)[0]
    failure = failing_case.result[0]
    assert isinstance(failure, Failure)
    assert failure.message.startswith("Expected all selected properties")
    assert failure.text.endswith("int age\nstr code")
    assert list(person)[1].result == []


def test_write_junit_records_target_property(tmp_path, sample_results):
    xml = JUnitXml.fromfile(str(write_junit(tmp_path, sample_results)))
    props = {p.name: p.value for p in list(xml)[1].properties()}
    assert props == {"target": "models:Customer"}


def test_summarize_round_trips_results(tmp_path, sample_results):
    write_junit(tmp_path, sample_results)
    summary = summarize(tmp_path)

    assert [s["name"] for s in summary] == ["person", "customer"]
    person, customer = summary
    assert person["passed"] is False
    assert person["total"] == 2
    assert person["target"] == "models:Person"
    assert person["failures"][0]["name"] == "be_virtual:person"
    assert person["failures"][0]["message"].endswith("int age\nstr code")
    assert customer["passed"] is True
    assert customer["failures"] == []


def test_write_junit_empty_results(tmp_path):
    xml = JUnitXml.fromfile(str(write_junit(tmp_path, {})))
    assert list(xml) == []
