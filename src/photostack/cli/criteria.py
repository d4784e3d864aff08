"""CLI commands for criteria management.

This module provides commands for working with stacking criteria:
- criteria check: Validate criteria and compile every regex pattern
- criteria show: Display the leaf criteria and split delimiters
- criteria key: Build group keys for values or for a file of value rows

Criteria are read from the given file, else from the CRITERIA environment
variable, else the built-in default criteria are used.
"""

import json
import logging
from pathlib import Path
from typing import TextIO

import click

from photostack.cli.exit_codes import ExitCode
from photostack.config.env import EnvReader
from photostack.criteria import (
    DEFAULT_BATCH_SIZE,
    CriteriaConfig,
    CriteriaValidationError,
    Criterion,
    RegexCompilationError,
    build_group_key,
    build_group_keys,
    find_split_delimiters,
    load_criteria,
    precompile_regexes,
    resolve_criteria,
)
from photostack.criteria.loader import CRITERIA_ENV_VAR

logger = logging.getLogger(__name__)

format_option = click.option(
    "--format",
    "output_format",
    type=click.Choice(["text", "json"], case_sensitive=False),
    default="text",
    help="Output format (default: text).",
)


@click.group("criteria")
def criteria_group() -> None:
    """Validate and inspect stacking criteria."""
    pass


def _load(criteria_file: Path | None) -> tuple[CriteriaConfig, str]:
    """Load criteria and describe where they came from."""
    if criteria_file is not None:
        return load_criteria(criteria_file), str(criteria_file)

    env_text = EnvReader().get_str(CRITERIA_ENV_VAR) or ""
    source = CRITERIA_ENV_VAR if env_text.strip() else "default"
    return resolve_criteria(), source


def _check_criteria(criteria_file: Path | None) -> dict:
    """Load criteria, warm the regex cache and return the result as a dict.

    Args:
        criteria_file: Criteria file, or None to resolve from the environment.

    Returns:
        Dict with keys: valid, source, mode, patterns, message, errors
    """
    result: dict = {
        "valid": False,
        "source": str(criteria_file) if criteria_file else None,
        "mode": None,
        "patterns": 0,
        "errors": [],
    }

    if criteria_file is not None and not criteria_file.is_file():
        message = f"File not found: {criteria_file}"
        result["errors"].append({"message": message, "code": "file_not_found"})
        result["message"] = message
        return result

    try:
        config, source = _load(criteria_file)
    except CriteriaValidationError as e:
        result["errors"].append({"message": e.message, "code": "validation_error"})
        result["message"] = e.message
        return result

    result["source"] = source
    result["mode"] = config.mode.value
    result["patterns"] = sum(
        1 for c in config.criteria() if c.regex is not None and c.regex.pattern
    )

    try:
        precompile_regexes(config.source)
    except RegexCompilationError as e:
        result["errors"].append(
            {
                "message": str(e),
                "code": "regex_error",
                "pattern": e.pattern,
            }
        )
        result["message"] = str(e)
        return result

    result["valid"] = True
    result["message"] = "Criteria are valid"
    return result


@criteria_group.command("check")
@click.argument(
    "criteria_file", required=False, type=click.Path(exists=False, path_type=Path)
)
@format_option
def check_criteria_cmd(criteria_file: Path | None, output_format: str) -> None:
    """Validate criteria and compile every regex pattern they contain.

    Exit codes:
        0: Criteria are valid
        10: Criteria validation or regex compilation failed

    Examples:

        # Check a criteria file
        photostack criteria check criteria.json

        # Check the CRITERIA environment variable, JSON output for CI
        photostack criteria check --format json
    """
    result = _check_criteria(criteria_file)

    if output_format == "json":
        click.echo(json.dumps(result, indent=2))
    else:
        _output_check_human(result)

    if not result["valid"]:
        raise SystemExit(ExitCode.CRITERIA_VALIDATION_ERROR)


def _output_check_human(result: dict) -> None:
    """Output check result in human-readable format."""
    source = result.get("source") or "criteria"
    if result["valid"]:
        click.echo(click.style("Valid", fg="green") + f": {source}")
        click.echo(f"  mode: {result['mode']}, regex patterns: {result['patterns']}")
    else:
        click.echo(click.style("Invalid", fg="red") + f": {source}")
        if result.get("message"):
            click.echo(f"  {result['message']}")


def _criterion_to_dict(criterion: Criterion) -> dict:
    """Convert a criterion to its JSON representation."""
    data: dict = {"key": criterion.key}
    if criterion.split is not None:
        data["split"] = {
            "delimiters": list(criterion.split.delimiters),
            "index": criterion.split.index,
        }
    if criterion.regex is not None:
        data["regex"] = {"key": criterion.regex.pattern, "index": criterion.regex.index}
        if criterion.regex.promote_index is not None:
            data["regex"]["promote_index"] = criterion.regex.promote_index
    if criterion.delta is not None:
        data["delta"] = {"milliseconds": criterion.delta.milliseconds}
    return data


@criteria_group.command("show")
@click.argument(
    "criteria_file", required=False, type=click.Path(exists=False, path_type=Path)
)
@format_option
def show_criteria_cmd(criteria_file: Path | None, output_format: str) -> None:
    """Show the leaf criteria and the file name split delimiters."""
    if criteria_file is not None and not criteria_file.is_file():
        click.echo(f"Error: File not found: {criteria_file}", err=True)
        raise SystemExit(ExitCode.TARGET_NOT_FOUND)

    try:
        config, source = _load(criteria_file)
    except CriteriaValidationError as e:
        click.echo(click.style("Invalid", fg="red") + f": {e.message}", err=True)
        raise SystemExit(ExitCode.CRITERIA_VALIDATION_ERROR) from e

    leaves = config.criteria()
    delimiters = find_split_delimiters(leaves)

    if output_format == "json":
        data = {
            "source": source,
            "mode": config.mode.value,
            "criteria": [_criterion_to_dict(c) for c in leaves],
            "split_delimiters": list(delimiters) if delimiters is not None else None,
        }
        click.echo(json.dumps(data, indent=2))
        return

    click.echo(f"Source: {source}")
    click.echo(f"Mode: {config.mode.value}")
    click.echo(f"Criteria ({len(leaves)}):")
    for criterion in leaves:
        click.echo(f"  - {json.dumps(_criterion_to_dict(criterion))}")
    if delimiters is None:
        click.echo("Split delimiters: (none)")
    else:
        click.echo(f"Split delimiters: {', '.join(repr(d) for d in delimiters)}")


@criteria_group.command("key")
@click.argument("values", nargs=-1)
@click.option(
    "--from-file",
    "rows_file",
    type=click.File("r", encoding="utf-8"),
    default=None,
    help="Read tab-separated value rows, one per line ('-' for stdin).",
)
@click.option(
    "--workers",
    type=click.IntRange(min=1),
    default=1,
    show_default=True,
    help="Worker threads used with --from-file.",
)
@click.option(
    "--batch-size",
    type=click.IntRange(min=1),
    default=DEFAULT_BATCH_SIZE,
    show_default=True,
    help="Rows per worker batch used with --from-file.",
)
def key_cmd(
    values: tuple[str, ...],
    rows_file: TextIO | None,
    workers: int,
    batch_size: int,
) -> None:
    """Print the group key built from VALUES, in order.

    With --from-file, print one key per input row instead.

    Examples:

        photostack criteria key IMG_1234 2024-01-01T12:00:00Z

        photostack criteria key --from-file rows.tsv --workers 4
    """
    if rows_file is None:
        click.echo(build_group_key(values))
        return

    if values:
        raise click.UsageError("VALUES cannot be combined with --from-file")

    rows = [line.rstrip("\r\n").split("\t") for line in rows_file]
    for key in build_group_keys(rows, workers=workers, batch_size=batch_size):
        click.echo(key)
