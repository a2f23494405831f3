from __future__ import annotations

from pathlib import Path
from typing import Any

from junitparser import Failure, JUnitXml, TestCase, TestSuite


def write_junit(run_dir: Path, results: dict[str, dict[str, Any]]) -> Path:
    """Write junit.xml from per-check results, return path."""
    xml = JUnitXml()

    for check_name, check_result in results.items():
        suite = TestSuite(check_name)
        target = check_result.get("target")
        if target:
            suite.add_property("target", target)

        for assertion in check_result.get("assertions", []):
            case = TestCase(assertion["name"])
            case.classname = check_name
            if not assertion.get("passed", True):
                message = assertion.get("message", "")
                failure = Failure(message.splitlines()[0] if message else "")
                failure.text = message
                case.result = [failure]
            suite.add_testcase(case)

        # Use append (not +=) to preserve properties
        xml.append(suite)

    junit_path = run_dir / "junit.xml"
    xml.write(str(junit_path), pretty=True)
    return junit_path


def summarize(run_dir: Path) -> list[dict[str, Any]]:
    """Read junit.xml back into one summary dict per check."""
    xml = JUnitXml.fromfile(str(run_dir / "junit.xml"))

    summary = []
    for suite in xml:
        target = None
        for prop in suite.properties():
            if prop.name == "target":
                target = prop.value
        failures = []
        total = 0
        for case in suite:
            total += 1
            for result in case.result:
                if isinstance(result, Failure):
                    failures.append(
                        {"name": case.name, "message": result.text or result.message or ""}
                    )
        summary.append(
            {
                "name": suite.name,
                "target": target,
                "total": total,
                "failures": failures,
                "passed": not failures,
            }
        )
    return summary
