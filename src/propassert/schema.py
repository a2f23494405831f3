"""Generate JSON Schema and docs for the rules YAML format."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Iterable

from propassert.config import RulesConfig

_ASSERTION_MODELS = {
    "BeVirtualAssertion": "ReasonSpec",
    "NotBeVirtualAssertion": "ReasonSpec",
    "BeDecoratedWithAssertion": "MarkerSpec",
    "NotBeDecoratedWithAssertion": "MarkerSpec",
}


def _ensure_parent(path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)


def _collect_refs(obj: object) -> set[str]:
    """Return all ``$defs`` names referenced via ``$ref`` inside *obj*."""
    refs: set[str] = set()
    if isinstance(obj, dict):
        if "$ref" in obj:
            ref = obj["$ref"]
            if ref.startswith("#/$defs/"):
                refs.add(ref.removeprefix("#/$defs/"))
        for v in obj.values():
            refs |= _collect_refs(v)
    elif isinstance(obj, list):
        for v in obj:
            refs |= _collect_refs(v)
    return refs


def _order_defs(defs: dict) -> dict:
    """Topologically sort ``$defs`` so referenced types precede referencing types."""
    ordered: dict[str, dict] = {}
    visited: set[str] = set()

    def _visit(name: str) -> None:
        if name in visited or name not in defs:
            return
        visited.add(name)
        for dep in _collect_refs(defs[name]):
            _visit(dep)
        ordered[name] = defs[name]

    for name in defs:
        _visit(name)
    return ordered


def generate_json_schema() -> dict:
    schema = RulesConfig.model_json_schema()
    if "$defs" in schema:
        schema["$defs"] = _order_defs(schema["$defs"])
    return schema


def write_json_schema(path: Path) -> None:
    _ensure_parent(path)
    schema = generate_json_schema()
    path.write_text(json.dumps(schema, indent=2) + "\n")


def _format_fields(fields: Iterable[str]) -> str:
    return ", ".join(fields)


def generate_schema_doc() -> str:
    schema = generate_json_schema()
    defs = schema.get("$defs", {})

    lines: list[str] = []
    lines.append("# propassert rules schema")
    lines.append("")
    lines.append("This doc is generated from the Pydantic models.")
    lines.append("")
    lines.append("## Top-level keys")
    lines.append("- `checks`: list of checks, each run against one class.")
    lines.append("")
    lines.append("## Check")
    lines.append("- `name`: string (required) - unique check name")
    lines.append("- `target`: string (required) - class reference as `module:ClassName`")
    select_fields = defs.get("SelectConfig", {}).get("properties", {}).keys()
    lines.append(f"- `select`: {{ {_format_fields(select_fields)} }} (optional)")
    lines.append("- `assertions`: array (required) - assertions to run")
    lines.append("")
    lines.append("## Assertions")
    for model_name, spec_name in _ASSERTION_MODELS.items():
        props = defs.get(model_name, {}).get("properties", {})
        if not props:
            continue
        top_key = next(iter(props))
        spec_fields = defs.get(spec_name, {}).get("properties", {}).keys()
        if spec_name == "MarkerSpec":
            lines.append(
                f"- `{top_key}`: marker reference string or {{ {_format_fields(spec_fields)} }}"
            )
        else:
            lines.append(
                f"- `{top_key}`: null, reason string or {{ {_format_fields(spec_fields)} }}"
            )

    lines.append("")
    return "\n".join(lines)


def write_schema_doc(path: Path) -> None:
    _ensure_parent(path)
    path.write_text(generate_schema_doc())
