"""Read-only traversal of the criteria representations.

Key Functions:
    flatten_groups: Concatenate the criteria of every group
    flatten_expression: Collect the leaf criteria of an expression tree
    find_split_delimiters: Locate the file-name split delimiters
    criteria_source: Tag a raw criteria value with its source shape
    iter_source_criteria: Walk every leaf criterion of a source in order

Expression trees are walked recursively, depth-first and left to right.
Trees are configuration-sized and must be acyclic; cycles are not detected.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Sequence

from photostack.criteria.exceptions import UnsupportedCriteriaSourceError
from photostack.criteria.models import (
    ORIGINAL_FILE_NAME,
    CriteriaExpression,
    CriteriaGroup,
    CriteriaGroupList,
    CriteriaList,
    CriteriaSource,
    Criterion,
    ExpressionTree,
    SingleCriterion,
)


def flatten_groups(groups: Iterable[CriteriaGroup]) -> list[Criterion]:
    """Return the criteria of all groups, in group order then in-group order."""
    out: list[Criterion] = []
    for group in groups:
        out.extend(group.criteria)
    return out


def iter_expression_leaves(
    expr: CriteriaExpression | None,
) -> Iterator[Criterion]:
    """Yield the leaf criteria of an expression tree.

    A node with neither criteria nor children contributes nothing.
    """
    if expr is None:
        return
    if expr.criteria is not None:
        yield expr.criteria
        return
    for child in expr.children:
        yield from iter_expression_leaves(child)


def flatten_expression(expr: CriteriaExpression | None) -> list[Criterion]:
    """Return all leaf criteria contained within an expression."""
    return list(iter_expression_leaves(expr))


def find_split_delimiters(criteria: Iterable[Criterion]) -> tuple[str, ...] | None:
    """Find the delimiters of the first file-name split criterion.

    Args:
        criteria: Criteria to search, in declaration order.

    Returns:
        Delimiters of the first criterion keyed by the original file name
        with a non-empty split, or None when no such criterion exists.
    """
    for criterion in criteria:
        if (
            criterion.key == ORIGINAL_FILE_NAME
            and criterion.split is not None
            and len(criterion.split.delimiters) > 0
        ):
            return criterion.split.delimiters
    return None


def _is_sequence_of(value: Sequence[object], item_type: type) -> bool:
    return all(isinstance(item, item_type) for item in value)


def criteria_source(value: object) -> CriteriaSource:
    """Tag a raw criteria value with the source shape it has.

    Args:
        value: A criterion, a list or tuple of criteria, a list or tuple of
            criteria groups, an expression, None, or an already tagged source.

    Returns:
        The matching source variant. An empty sequence is an empty
        CriteriaList.

    Raises:
        UnsupportedCriteriaSourceError: If value has none of those shapes.
    """
    if isinstance(
        value, (SingleCriterion, CriteriaList, CriteriaGroupList, ExpressionTree)
    ):
        return value
    if isinstance(value, Criterion):
        return SingleCriterion(value)
    if value is None or isinstance(value, CriteriaExpression):
        return ExpressionTree(value)
    if isinstance(value, (list, tuple)):
        if _is_sequence_of(value, Criterion):
            return CriteriaList(tuple(value))
        if _is_sequence_of(value, CriteriaGroup):
            return CriteriaGroupList(tuple(value))
    raise UnsupportedCriteriaSourceError(value)


def iter_source_criteria(source: CriteriaSource) -> Iterator[Criterion]:
    """Yield every leaf criterion reachable from a source, in traversal order.

    Raises:
        UnsupportedCriteriaSourceError: If source is not a source variant.
    """
    if isinstance(source, SingleCriterion):
        yield source.criterion
        return

    if isinstance(source, CriteriaList):
        yield from source.criteria
        return

    if isinstance(source, CriteriaGroupList):
        for group in source.groups:
            yield from group.criteria
        return

    if isinstance(source, ExpressionTree):
        yield from iter_expression_leaves(source.root)
        return

    raise UnsupportedCriteriaSourceError(source)
