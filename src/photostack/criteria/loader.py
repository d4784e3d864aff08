"""Criteria configuration loading and validation.

This module parses criteria from JSON text, JSON or YAML files, or the
CRITERIA environment variable, and validates them using Pydantic models.

Two formats are accepted:
    legacy: a JSON array of criteria objects
    advanced: an object with a non-empty "mode" and "groups" and/or
        an "expression" tree

Loading validates structure only. Regex patterns are compiled afterwards by
precompile_regexes() so that every representation is checked the same way.
"""

import json
import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    TypeAdapter,
    ValidationError,
    model_validator,
)

from photostack.config.env import EnvReader
from photostack.criteria.exceptions import CriteriaValidationError
from photostack.criteria.models import (
    DEFAULT_CRITERIA,
    CriteriaConfig,
    CriteriaExpression,
    CriteriaGroup,
    CriteriaMode,
    Criterion,
    Delta,
    ExpressionOperator,
    GroupOperator,
    Regex,
    Split,
)

logger = logging.getLogger(__name__)

# Environment variable consulted when no criteria text is given
CRITERIA_ENV_VAR = "CRITERIA"

_YAML_SUFFIXES = frozenset({".yaml", ".yml"})


class SplitModel(BaseModel):
    """Pydantic model for a split operation."""

    model_config = ConfigDict(extra="forbid")

    delimiters: list[str] = Field(default_factory=list)
    index: int = Field(default=0, ge=0)


class RegexModel(BaseModel):
    """Pydantic model for a regex operation.

    The pattern is stored under "key", as in existing criteria files.
    """

    model_config = ConfigDict(extra="forbid")

    key: str = ""
    index: int = Field(default=0, ge=0)
    promote_index: int | None = Field(default=None, ge=0)


class DeltaModel(BaseModel):
    """Pydantic model for a time tolerance."""

    model_config = ConfigDict(extra="forbid")

    milliseconds: int = Field(default=0, ge=0)


class CriterionModel(BaseModel):
    """Pydantic model for a single criterion."""

    model_config = ConfigDict(extra="forbid")

    key: str = Field(min_length=1)
    split: SplitModel | None = None
    regex: RegexModel | None = None
    delta: DeltaModel | None = None


class CriteriaGroupModel(BaseModel):
    """Pydantic model for a criteria group."""

    model_config = ConfigDict(extra="forbid")

    operator: Literal["AND", "OR"] = "AND"
    criteria: list[CriterionModel] = Field(default_factory=list)


class CriteriaExpressionModel(BaseModel):
    """Pydantic model for an expression tree node."""

    model_config = ConfigDict(extra="forbid")

    operator: Literal["AND", "OR", "NOT"] | None = None
    criteria: CriterionModel | None = None
    children: list["CriteriaExpressionModel"] = Field(default_factory=list)

    @model_validator(mode="after")
    def validate_leaf_or_branch(self) -> "CriteriaExpressionModel":
        """Validate that a node is either a leaf or has children, not both."""
        if self.criteria is not None and self.children:
            raise ValueError("Expression node cannot have both criteria and children")
        if self.criteria is None and not self.children:
            raise ValueError("Expression node must have either criteria or children")
        return self


class AdvancedCriteriaModel(BaseModel):
    """Pydantic model for the advanced criteria format."""

    model_config = ConfigDict(extra="forbid")

    mode: str = Field(min_length=1)
    groups: list[CriteriaGroupModel] | None = None
    expression: CriteriaExpressionModel | None = None

    @model_validator(mode="after")
    def validate_has_criteria(self) -> "AdvancedCriteriaModel":
        """Validate that groups or an expression is present."""
        if not self.groups and self.expression is None:
            raise ValueError("Advanced criteria must define 'groups' or 'expression'")
        return self


_LEGACY_ADAPTER = TypeAdapter(list[CriterionModel])


# =============================================================================
# Conversion Functions
# =============================================================================


def _convert_criterion(model: CriterionModel) -> Criterion:
    """Convert CriterionModel to Criterion dataclass."""
    split = None
    if model.split is not None:
        split = Split(delimiters=tuple(model.split.delimiters), index=model.split.index)

    regex = None
    if model.regex is not None:
        regex = Regex(
            pattern=model.regex.key,
            index=model.regex.index,
            promote_index=model.regex.promote_index,
        )

    delta = None
    if model.delta is not None:
        delta = Delta(milliseconds=model.delta.milliseconds)

    return Criterion(key=model.key, split=split, regex=regex, delta=delta)


def _convert_group(model: CriteriaGroupModel) -> CriteriaGroup:
    """Convert CriteriaGroupModel to CriteriaGroup dataclass."""
    return CriteriaGroup(
        criteria=tuple(_convert_criterion(c) for c in model.criteria),
        operator=GroupOperator(model.operator),
    )


def _convert_expression(model: CriteriaExpressionModel) -> CriteriaExpression:
    """Convert CriteriaExpressionModel to CriteriaExpression dataclass."""
    if model.criteria is not None:
        return CriteriaExpression(criteria=_convert_criterion(model.criteria))

    return CriteriaExpression(
        children=tuple(_convert_expression(c) for c in model.children),
        operator=ExpressionOperator(model.operator) if model.operator else None,
    )


def _resolve_mode(mode: str) -> CriteriaMode:
    """Map a non-empty advanced mode name to a CriteriaMode.

    Any object carrying a mode is advanced criteria; names other than
    "expression" are treated as "advanced".
    """
    if mode == CriteriaMode.EXPRESSION.value:
        return CriteriaMode.EXPRESSION
    if mode != CriteriaMode.ADVANCED.value:
        logger.warning("Unknown criteria mode %r, treating as advanced", mode)
    return CriteriaMode.ADVANCED


def _format_validation_error(error: Exception) -> str:
    """Format a Pydantic validation error into a user-friendly message."""
    if isinstance(error, ValidationError):
        errors = error.errors()
        if errors:
            first_error = errors[0]
            loc = ".".join(str(x) for x in first_error.get("loc", []))
            msg = first_error.get("msg", str(error))
            if loc:
                return f"Criteria validation failed: {loc}: {msg}"
            return f"Criteria validation failed: {msg}"

    return f"Criteria validation failed: {error}"


# =============================================================================
# Public API
# =============================================================================


def default_criteria_config() -> CriteriaConfig:
    """Return the built-in criteria: file name stem, then capture time."""
    return CriteriaConfig(mode=CriteriaMode.LEGACY, legacy=DEFAULT_CRITERIA)


def load_criteria_from_data(data: Any) -> CriteriaConfig:
    """Load and validate criteria from already-decoded data.

    Args:
        data: A list of criteria objects (legacy format) or a mapping with
            a non-empty "mode" (advanced format).

    Returns:
        Validated CriteriaConfig.

    Raises:
        CriteriaValidationError: If the data is invalid.
    """
    if isinstance(data, dict) and data.get("mode"):
        try:
            model = AdvancedCriteriaModel.model_validate(data)
        except ValidationError as e:
            raise CriteriaValidationError(_format_validation_error(e)) from e

        return CriteriaConfig(
            mode=_resolve_mode(model.mode),
            groups=tuple(_convert_group(g) for g in model.groups or ()),
            expression=(
                _convert_expression(model.expression)
                if model.expression is not None
                else None
            ),
        )

    if isinstance(data, list):
        try:
            models = _LEGACY_ADAPTER.validate_python(data)
        except ValidationError as e:
            raise CriteriaValidationError(_format_validation_error(e)) from e

        return CriteriaConfig(
            mode=CriteriaMode.LEGACY,
            legacy=tuple(_convert_criterion(m) for m in models),
        )

    raise CriteriaValidationError(
        "failed to parse criteria as either advanced or legacy format: "
        "expected a list of criteria or an object with a 'mode'"
    )


def parse_criteria(text: str) -> CriteriaConfig:
    """Parse criteria from a JSON string.

    Args:
        text: JSON text in the legacy or advanced format.

    Returns:
        Validated CriteriaConfig.

    Raises:
        CriteriaValidationError: If the text is not valid criteria JSON.
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise CriteriaValidationError(f"Invalid JSON syntax: {e}") from e

    return load_criteria_from_data(data)


def load_criteria(criteria_path: Path) -> CriteriaConfig:
    """Load and validate criteria from a JSON or YAML file.

    Files ending in .yaml or .yml are read as YAML, anything else as JSON.

    Args:
        criteria_path: Path to the criteria file.

    Returns:
        Validated CriteriaConfig.

    Raises:
        CriteriaValidationError: If the file content is invalid
            or cannot be read.
        FileNotFoundError: If the file does not exist.
    """
    if not criteria_path.exists():
        raise FileNotFoundError(f"Criteria file not found: {criteria_path}")

    try:
        text = criteria_path.read_text(encoding="utf-8")
    except (UnicodeDecodeError, OSError) as e:
        raise CriteriaValidationError(f"Cannot read criteria file: {e}") from e

    if criteria_path.suffix.lower() not in _YAML_SUFFIXES:
        return parse_criteria(text)

    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise CriteriaValidationError(f"Invalid YAML syntax: {e}") from e

    if data is None:
        raise CriteriaValidationError("Criteria file is empty")

    return load_criteria_from_data(data)


def resolve_criteria(
    text: str | None = None,
    env: Mapping[str, str] | None = None,
) -> CriteriaConfig:
    """Resolve the criteria to use for a run.

    Explicit text wins; otherwise the CRITERIA environment variable is used;
    otherwise the built-in default criteria.

    Args:
        text: Criteria JSON from a flag or other caller-provided source.
        env: Optional mapping to use instead of os.environ.

    Returns:
        Validated CriteriaConfig.

    Raises:
        CriteriaValidationError: If the selected criteria text is invalid.
    """
    if text and text.strip():
        return parse_criteria(text)

    env_text = EnvReader(env=env).get_str(CRITERIA_ENV_VAR)
    if env_text and env_text.strip():
        logger.debug("Using criteria from %s environment variable", CRITERIA_ENV_VAR)
        return parse_criteria(env_text)

    logger.debug("No criteria configured, using default criteria")
    return default_criteria_config()
