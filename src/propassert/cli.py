from __future__ import annotations

from pathlib import Path

import typer

app = typer.Typer(name="propassert", help="Assert the structure of class properties")
schema_app = typer.Typer(name="schema", help="Generate schema tooling")
app.add_typer(schema_app, name="schema")

_EXAMPLE_RULES = """\
checks:
  - name: model-properties
    target: myapp.models:Customer
    select:
      public_only: true
    assertions:
      - be_virtual: "proxies override every accessor"
      - be_decorated_with:
          marker: myapp.markers:Persisted
          because: "{0} maps every public property"
          args: [the ORM]
"""


@app.command()
def check(
    config: str = typer.Argument(help="Path to rules YAML file"),
    check_name: str | None = typer.Option(
        None, "--check", help="Run only the check with this name"
    ),
    output_dir: str = typer.Option("runs", help="Output directory for run results"),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable debug output to terminal"
    ),
):
    """Run the checks of a rules file."""
    import yaml

    from propassert.config import load_config
    from propassert.runner import Runner

    config_path = Path(config)
    if not config_path.exists():
        typer.echo(f"Error: config file not found: {config}", err=True)
        raise typer.Exit(1)

    try:
        rules = load_config(config_path)
    except (ValueError, yaml.YAMLError) as e:
        typer.echo(f"Error: invalid config {config}: {e}", err=True)
        raise typer.Exit(1)

    runner = Runner(
        config=rules,
        output_dir=Path(output_dir),
        check_filter=check_name,
        verbose=verbose,
    )

    try:
        run_dir = runner.execute()
    except ValueError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    typer.echo(f"Run complete: {run_dir}")
    typer.echo(f"JUnit report: {run_dir / 'junit.xml'}")
    if not verbose:
        typer.echo(f"Debug log: {run_dir / 'debug.log'}")

    if not runner.all_passed:
        raise typer.Exit(1)


@app.command()
def report(
    run_dir: str = typer.Argument(help="Path to run output directory"),
):
    """Print the results of a previous run."""
    from propassert.reporting.junit import summarize

    run_path = Path(run_dir)
    if not run_path.exists() or not (run_path / "junit.xml").exists():
        typer.echo(f"Error: not a valid run directory: {run_dir}", err=True)
        raise typer.Exit(1)

    summary = summarize(run_path)
    for entry in summary:
        status = "PASS" if entry["passed"] else "FAIL"
        n_failed = len(entry["failures"])
        typer.echo(
            f"{status}  {entry['name']} ({entry['total'] - n_failed}/{entry['total']} assertions)"
        )
        for failure in entry["failures"]:
            typer.echo(f"  {failure['name']}:")
            for line in failure["message"].splitlines():
                typer.echo(f"    {line}")

    if not all(entry["passed"] for entry in summary):
        raise typer.Exit(1)


@app.command()
def init(
    dir: str = typer.Option(
        "propassert", "--dir", help="Directory to write the example rules file in"
    ),
):
    """Write an example rules file."""
    project_dir = Path(dir)
    project_dir.mkdir(parents=True, exist_ok=True)

    example = project_dir / "rules.yaml"
    if example.exists():
        typer.echo(f"rules.yaml already exists in {dir}, skipping.")
        return

    example.write_text(_EXAMPLE_RULES)
    typer.echo(f"Initialized rules in {dir}:")
    typer.echo("  rules.yaml       - example rules file")


@schema_app.command("generate")
def schema_generate(
    dir: str = typer.Option(
        "propassert", "--dir", help="Project directory for default schema/doc outputs"
    ),
    out: str | None = typer.Option(
        None,
        help="Output path for JSON Schema (defaults to <dir>/schemas/propassert.schema.json)",
    ),
    doc: str | None = typer.Option(
        None, help="Output path for schema docs (defaults to <dir>/docs/schema.md)"
    ),
):
    """Generate JSON Schema and docs for the rules YAML format."""
    from propassert.schema import write_json_schema, write_schema_doc

    project_dir = Path(dir)
    out_path = (
        Path(out)
        if out is not None
        else project_dir / "schemas" / "propassert.schema.json"
    )
    doc_path = Path(doc) if doc is not None else project_dir / "docs" / "schema.md"
    write_json_schema(out_path)
    write_schema_doc(doc_path)
    typer.echo(f"Wrote schema: {out_path}")
    typer.echo(f"Wrote docs: {doc_path}")
