from __future__ import annotations

import logging
from dataclasses import asdict
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import yaml

from propassert.assertions.base import AssertionResult
from propassert.assertions.properties import PropertyInfoAssertions
from propassert.config import (
    Assertion,
    CheckConfig,
    MarkerSpec,
    RulesConfig,
    SelectConfig,
    import_object,
)
from propassert.execution import AssertionScope
from propassert.selectors import PropertySelector
from propassert.verbose import setup_logger

CheckName = str


def _import_class(ref: str) -> type:
    obj = import_object(ref)
    if not isinstance(obj, type):
        raise ValueError(f"'{ref}' is not a class")
    return obj


def select_properties(target: type, select: SelectConfig) -> PropertySelector:
    selector = PropertySelector(target)
    if select.public_only:
        selector = selector.that_are_public()
    if select.decorated_with:
        selector = selector.that_are_decorated_with(_import_class(select.decorated_with))
    if select.not_decorated_with:
        selector = selector.that_are_not_decorated_with(
            _import_class(select.not_decorated_with)
        )
    return selector


def _run_assertion(
    assertions: PropertyInfoAssertions, assertion: Assertion, check_name: str
) -> AssertionResult:
    kind = next(iter(type(assertion).model_fields))
    spec = getattr(assertion, kind)

    name = f"{kind}:{check_name}"
    with AssertionScope() as scope:
        if kind == "be_virtual":
            assertions.be_virtual(spec.because, *spec.args)
        elif kind == "not_be_virtual":
            assertions.not_be_virtual(spec.because, *spec.args)
        elif isinstance(spec, MarkerSpec):
            marker_type = _import_class(spec.marker)
            name = f"{kind}({marker_type.__qualname__}):{check_name}"
            if kind == "be_decorated_with":
                assertions.be_decorated_with(marker_type, spec.because, *spec.args)
            else:
                assertions.not_be_decorated_with(marker_type, spec.because, *spec.args)
        else:
            raise ValueError(f"Unknown assertion type: '{kind}'")
        failures = scope.discard()

    if failures:
        return AssertionResult(name=name, passed=False, message="\n".join(failures))
    count = len(assertions.subject_properties)
    return AssertionResult(name=name, passed=True, message=f"{count} properties checked")


def evaluate_check(check: CheckConfig, logger: logging.Logger) -> list[AssertionResult]:
    """Evaluate every assertion of *check*, collecting failures instead of raising.

    Raises ValueError when the target or a marker reference cannot be resolved.
    ``Runner.execute`` records that as a failed ``error:<check>`` result.
    """
    logger.info(f"Evaluating check '{check.name}' against {check.target}")
    target = _import_class(check.target)
    selector = select_properties(target, check.select)
    logger.debug(f"Selected properties: {selector.names()}")

    assertions = PropertyInfoAssertions(target, selector, logger=logger)
    results = []
    for assertion in check.assertions:
        result = _run_assertion(assertions, assertion, check.name)
        logger.info(f"{result.name} passed={result.passed}")
        results.append(result)
    return results


class Runner:
    """Runs every check of a rules file and writes the results."""

    def __init__(
        self,
        config: RulesConfig,
        output_dir: Path,
        check_filter: str | None = None,
        verbose: bool = False,
    ):
        self.config = config
        self.output_dir = output_dir
        self.check_filter = check_filter
        self.verbose = verbose
        self.results: dict[CheckName, dict[str, Any]] = {}

    @property
    def all_passed(self) -> bool:
        return all(r["all_passed"] for r in self.results.values())

    def execute(self) -> Path:
        """Run all checks. Returns the run directory."""
        checks = self.config.checks
        if self.check_filter:
            checks = [c for c in checks if c.name == self.check_filter]
            if not checks:
                raise ValueError(f"No check named '{self.check_filter}'")

        run_id = datetime.now(timezone.utc).strftime("%Y-%m-%d_%H%M%S_%f")
        run_dir = self.output_dir / run_id
        run_dir.mkdir(parents=True, exist_ok=True)

        logger = setup_logger(
            run_dir / "debug.log",
            verbose=self.verbose,
            logger_name=f"propassert_run_{run_id}",
        )
        logger.debug("Starting check run")

        print(f"Running {len(checks)} check(s)...")
        try:
            for index, check in enumerate(checks, start=1):
                try:
                    results = evaluate_check(check, logger)
                except ValueError as e:
                    print(f"  [{index}/{len(checks)}] ERROR  {check.name}: {e}")
                    logger.error(f"Check '{check.name}' failed to run: {e}")
                    self.results[check.name] = {
                        "target": check.target,
                        "assertions": [
                            asdict(
                                AssertionResult(
                                    name=f"error:{check.name}",
                                    passed=False,
                                    message=str(e),
                                )
                            )
                        ],
                        "all_passed": False,
                    }
                    continue

                all_passed = all(r.passed for r in results)
                n_passed = sum(1 for r in results if r.passed)
                status = "PASS" if all_passed else "FAIL"
                print(
                    f"  [{index}/{len(checks)}] {status}  {check.name} ({n_passed}/{len(results)} assertions)"
                )
                self.results[check.name] = {
                    "target": check.target,
                    "assertions": [asdict(r) for r in results],
                    "all_passed": all_passed,
                }

            self._write_results(run_dir, checks)
        finally:
            for handler in list(logger.handlers):
                handler.close()
                logger.removeHandler(handler)

        return run_dir

    def _write_results(self, run_dir: Path, checks: list[CheckConfig]) -> None:
        """Write junit.xml and meta.yaml to the run directory."""
        from propassert.reporting.junit import write_junit

        write_junit(run_dir, self.results)

        try:
            import importlib.metadata

            version = importlib.metadata.version("propassert")
        except Exception:
            version = "unknown"

        meta: dict[str, Any] = {
            "run_id": run_dir.name,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "checks": [c.name for c in checks],
            "all_passed": self.all_passed,
            "propassert_version": version,
        }
        (run_dir / "meta.yaml").write_text(yaml.dump(meta, sort_keys=False))
