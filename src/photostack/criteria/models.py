"""Data models for stacking criteria.

Criteria are authored by users in one of several shapes: a flat legacy list,
a list of groups, or a boolean expression tree. All models are immutable and
are treated as read-only input by the traversal and warm-up functions.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

# Field name of the criterion whose split delimiters govern how an original
# file name is partitioned for comparison.
ORIGINAL_FILE_NAME = "originalFileName"

# Separator placed between per-criterion values in a group key.
KEY_SEPARATOR = "|"


class GroupOperator(Enum):
    """How the criteria inside a group are combined by the matching engine."""

    AND = "AND"
    OR = "OR"


class ExpressionOperator(Enum):
    """Boolean operator on an internal expression node."""

    AND = "AND"
    OR = "OR"
    NOT = "NOT"


class CriteriaMode(Enum):
    """Which representation a loaded criteria configuration uses."""

    LEGACY = "legacy"
    ADVANCED = "advanced"
    EXPRESSION = "expression"


@dataclass(frozen=True)
class Split:
    """Split a source string on every delimiter and select one part."""

    delimiters: tuple[str, ...]
    index: int = 0


@dataclass(frozen=True)
class Regex:
    """Apply a regex pattern and select one capture group.

    An empty pattern means no regex is configured.
    """

    pattern: str
    index: int = 0
    promote_index: int | None = None


@dataclass(frozen=True)
class Delta:
    """Time tolerance applied by date criteria."""

    milliseconds: int = 0


@dataclass(frozen=True)
class Criterion:
    """A single named matching rule.

    Split and regex are independent optional facets; a criterion may carry
    both, either or neither.
    """

    key: str
    split: Split | None = None
    regex: Regex | None = None
    delta: Delta | None = None


@dataclass(frozen=True)
class CriteriaGroup:
    """An ordered cluster of criteria treated as one unit by the caller."""

    criteria: tuple[Criterion, ...] = ()
    operator: GroupOperator = GroupOperator.AND


@dataclass(frozen=True)
class CriteriaExpression:
    """A node of a criteria expression tree.

    A leaf holds exactly one criterion; an internal node holds ordered
    children and usually an operator. The tree must be acyclic.
    """

    criteria: Criterion | None = None
    children: tuple[CriteriaExpression, ...] = ()
    operator: ExpressionOperator | None = None

    @property
    def is_leaf(self) -> bool:
        return self.criteria is not None


# =============================================================================
# Criteria sources
# =============================================================================


@dataclass(frozen=True)
class SingleCriterion:
    """A bare criterion."""

    criterion: Criterion


@dataclass(frozen=True)
class CriteriaList:
    """A flat sequence of criteria (legacy format)."""

    criteria: tuple[Criterion, ...] = ()


@dataclass(frozen=True)
class CriteriaGroupList:
    """A sequence of criteria groups (advanced format)."""

    groups: tuple[CriteriaGroup, ...] = ()


@dataclass(frozen=True)
class ExpressionTree:
    """An expression tree, possibly absent."""

    root: CriteriaExpression | None = None


# Type alias for union of all criteria source shapes
CriteriaSource = SingleCriterion | CriteriaList | CriteriaGroupList | ExpressionTree


DEFAULT_CRITERIA: tuple[Criterion, ...] = (
    # Only the part before the first dot, so img.edit.jpg groups with img.jpg
    Criterion(key=ORIGINAL_FILE_NAME, split=Split(delimiters=(".",), index=0)),
    Criterion(key="localDateTime"),
)


@dataclass(frozen=True)
class CriteriaConfig:
    """A loaded criteria configuration in one of the supported modes."""

    mode: CriteriaMode = CriteriaMode.LEGACY
    legacy: tuple[Criterion, ...] = field(default_factory=tuple)
    groups: tuple[CriteriaGroup, ...] = field(default_factory=tuple)
    expression: CriteriaExpression | None = None

    @property
    def source(self) -> CriteriaSource:
        """The criteria source this configuration is evaluated against.

        An expression takes precedence over groups, and groups over the
        legacy list, mirroring how the stacking engine picks its mode.
        """
        if self.expression is not None:
            return ExpressionTree(self.expression)
        if self.groups:
            return CriteriaGroupList(self.groups)
        return CriteriaList(self.legacy)

    def criteria(self) -> list[Criterion]:
        """Return every leaf criterion of the active source, in order."""
        from photostack.criteria.traversal import iter_source_criteria

        return list(iter_source_criteria(self.source))
