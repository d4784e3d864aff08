"""Tests for criteria flattening, delimiter discovery and source tagging."""

import pytest

from photostack.criteria.exceptions import UnsupportedCriteriaSourceError
from photostack.criteria.models import (
    CriteriaExpression,
    CriteriaGroup,
    CriteriaGroupList,
    CriteriaList,
    Criterion,
    ExpressionOperator,
    ExpressionTree,
    GroupOperator,
    Regex,
    SingleCriterion,
    Split,
)
from photostack.criteria.traversal import (
    criteria_source,
    find_split_delimiters,
    flatten_expression,
    flatten_groups,
    iter_source_criteria,
)

# =============================================================================
# Test Fixtures
# =============================================================================

NAME = Criterion(key="originalFileName", split=Split(delimiters=("~", ".")))
TIME = Criterion(key="localDateTime")
PATH = Criterion(key="originalPath", split=Split(delimiters=("/",)))
ARCHIVED = Criterion(key="isArchived")


@pytest.fixture
def group_a() -> CriteriaGroup:
    return CriteriaGroup(criteria=(NAME, TIME))


@pytest.fixture
def group_b() -> CriteriaGroup:
    return CriteriaGroup(criteria=(PATH, ARCHIVED), operator=GroupOperator.OR)


# =============================================================================
# flatten_groups
# =============================================================================


class TestFlattenGroups:
    """Tests for flatten_groups()."""

    def test_preserves_group_then_in_group_order(self, group_a, group_b) -> None:
        assert flatten_groups([group_a, group_b]) == [NAME, TIME, PATH, ARCHIVED]

    def test_is_concatenation_of_single_group_results(self, group_a, group_b) -> None:
        combined = flatten_groups([group_a, group_b])
        assert combined == flatten_groups([group_a]) + flatten_groups([group_b])

    def test_empty_input_yields_empty_list(self) -> None:
        result = flatten_groups([])
        assert result is not None
        assert result == []

    def test_empty_group_contributes_nothing(self, group_a) -> None:
        assert flatten_groups([CriteriaGroup(), group_a]) == [NAME, TIME]

    def test_does_not_alias_group_criteria(self, group_a) -> None:
        result = flatten_groups([group_a])
        result.append(PATH)
        assert group_a.criteria == (NAME, TIME)


# =============================================================================
# flatten_expression
# =============================================================================


class TestFlattenExpression:
    """Tests for flatten_expression()."""

    def test_none_yields_empty_list(self) -> None:
        assert flatten_expression(None) == []

    def test_leaf(self) -> None:
        assert flatten_expression(CriteriaExpression(criteria=NAME)) == [NAME]

    def test_nested_depth_first_left_to_right(self) -> None:
        expr = CriteriaExpression(
            operator=ExpressionOperator.AND,
            children=(
                CriteriaExpression(
                    operator=ExpressionOperator.OR,
                    children=(
                        CriteriaExpression(criteria=NAME),
                        CriteriaExpression(criteria=PATH),
                    ),
                ),
                CriteriaExpression(criteria=TIME),
            ),
        )
        assert flatten_expression(expr) == [NAME, PATH, TIME]

    def test_empty_node_contributes_nothing(self) -> None:
        expr = CriteriaExpression(
            children=(CriteriaExpression(), CriteriaExpression(criteria=TIME))
        )
        assert flatten_expression(expr) == [TIME]

    def test_node_with_neither_criteria_nor_children(self) -> None:
        assert flatten_expression(CriteriaExpression()) == []


# =============================================================================
# find_split_delimiters
# =============================================================================


class TestFindSplitDelimiters:
    """Tests for find_split_delimiters()."""

    def test_first_match_wins(self) -> None:
        criteria = [
            Criterion(key="originalFileName", split=Split(delimiters=("-",))),
            Criterion(key="originalFileName", split=Split(delimiters=("_",))),
        ]
        assert find_split_delimiters(criteria) == ("-",)

    def test_skips_other_keys(self) -> None:
        assert find_split_delimiters([PATH, TIME, NAME]) == ("~", ".")

    def test_absent_when_not_configured(self) -> None:
        assert find_split_delimiters([PATH, TIME]) is None

    def test_absent_for_empty_input(self) -> None:
        assert find_split_delimiters([]) is None

    def test_file_name_without_split_is_skipped(self) -> None:
        criteria = [
            Criterion(key="originalFileName", regex=Regex(pattern="^IMG")),
            Criterion(key="originalFileName", split=Split(delimiters=("_",))),
        ]
        assert find_split_delimiters(criteria) == ("_",)

    def test_empty_delimiters_are_skipped(self) -> None:
        criteria = [
            Criterion(key="originalFileName", split=Split(delimiters=())),
            Criterion(key="originalFileName", split=Split(delimiters=("_",))),
        ]
        assert find_split_delimiters(criteria) == ("_",)

    def test_only_empty_delimiters_is_absent(self) -> None:
        criteria = [Criterion(key="originalFileName", split=Split(delimiters=()))]
        assert find_split_delimiters(criteria) is None

    def test_key_match_is_exact(self) -> None:
        criteria = [Criterion(key="OriginalFileName", split=Split(delimiters=("-",)))]
        assert find_split_delimiters(criteria) is None

    def test_repeated_calls_agree(self) -> None:
        criteria = [NAME, Criterion(key="originalFileName", split=Split(("-",)))]
        assert find_split_delimiters(criteria) == find_split_delimiters(criteria)

    def test_works_on_flattened_groups(self, group_a, group_b) -> None:
        assert find_split_delimiters(flatten_groups([group_b, group_a])) == (
            "~",
            ".",
        )


# =============================================================================
# criteria_source / iter_source_criteria
# =============================================================================


class TestCriteriaSource:
    """Tests for criteria_source()."""

    def test_bare_criterion(self) -> None:
        assert criteria_source(NAME) == SingleCriterion(NAME)

    def test_list_of_criteria(self) -> None:
        assert criteria_source([NAME, TIME]) == CriteriaList((NAME, TIME))

    def test_tuple_of_criteria(self) -> None:
        assert criteria_source((NAME,)) == CriteriaList((NAME,))

    def test_list_of_groups(self, group_a) -> None:
        assert criteria_source([group_a]) == CriteriaGroupList((group_a,))

    def test_expression(self) -> None:
        expr = CriteriaExpression(criteria=NAME)
        assert criteria_source(expr) == ExpressionTree(expr)

    def test_none_is_absent_expression(self) -> None:
        assert criteria_source(None) == ExpressionTree(None)

    def test_empty_list_is_empty_criteria_list(self) -> None:
        assert criteria_source([]) == CriteriaList(())

    @pytest.mark.parametrize(
        "tagged",
        [
            SingleCriterion(NAME),
            CriteriaList((NAME,)),
            CriteriaGroupList((CriteriaGroup(criteria=(TIME,)),)),
            ExpressionTree(CriteriaExpression(criteria=NAME)),
            ExpressionTree(None),
        ],
    )
    def test_tagged_source_passes_through(self, tagged) -> None:
        assert criteria_source(tagged) is tagged

    @pytest.mark.parametrize(
        "value",
        ["originalFileName", 42, {"key": "originalFileName"}, [NAME, "x"]],
    )
    def test_unsupported_shapes(self, value) -> None:
        with pytest.raises(UnsupportedCriteriaSourceError) as exc_info:
            criteria_source(value)

        assert exc_info.value.source is value
        assert type(value).__name__ in str(exc_info.value)

    def test_mixed_criteria_and_groups_unsupported(self, group_a) -> None:
        with pytest.raises(UnsupportedCriteriaSourceError):
            criteria_source([NAME, group_a])


class TestIterSourceCriteria:
    """Tests for iter_source_criteria()."""

    def test_single(self) -> None:
        assert list(iter_source_criteria(SingleCriterion(NAME))) == [NAME]

    def test_list(self) -> None:
        assert list(iter_source_criteria(CriteriaList((TIME, NAME)))) == [TIME, NAME]

    def test_groups(self, group_a, group_b) -> None:
        source = CriteriaGroupList((group_b, group_a))
        assert list(iter_source_criteria(source)) == [PATH, ARCHIVED, NAME, TIME]

    def test_absent_expression(self) -> None:
        assert list(iter_source_criteria(ExpressionTree(None))) == []

    def test_unknown_source_raises(self) -> None:
        with pytest.raises(UnsupportedCriteriaSourceError):
            list(iter_source_criteria([NAME]))  # type: ignore[arg-type]
