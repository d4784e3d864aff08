"""Criteria evaluation support for the stacking engine.

This package provides:
- Criteria data models and the four criteria source shapes
- Group key construction, sequential or by a pool of workers
- Flattening and split delimiter discovery
- A shared regex cache and the fail-fast regex warm-up pass
- Loading criteria from JSON, YAML or the CRITERIA environment variable
"""

from photostack.criteria.batch import DEFAULT_BATCH_SIZE, build_group_keys
from photostack.criteria.exceptions import (
    CriteriaError,
    CriteriaValidationError,
    RegexCompilationError,
    UnsupportedCriteriaSourceError,
)
from photostack.criteria.keys import KeyBuilder, build_group_key
from photostack.criteria.loader import (
    default_criteria_config,
    load_criteria,
    load_criteria_from_data,
    parse_criteria,
    resolve_criteria,
)
from photostack.criteria.matchers import (
    RegexCache,
    RegexCompiler,
    compile_regex,
    get_regex_cache,
    reset_regex_cache,
)
from photostack.criteria.models import (
    DEFAULT_CRITERIA,
    KEY_SEPARATOR,
    ORIGINAL_FILE_NAME,
    CriteriaConfig,
    CriteriaExpression,
    CriteriaGroup,
    CriteriaGroupList,
    CriteriaList,
    CriteriaMode,
    CriteriaSource,
    Criterion,
    Delta,
    ExpressionOperator,
    ExpressionTree,
    GroupOperator,
    Regex,
    SingleCriterion,
    Split,
)
from photostack.criteria.precompile import precompile_regexes
from photostack.criteria.traversal import (
    criteria_source,
    find_split_delimiters,
    flatten_expression,
    flatten_groups,
    iter_source_criteria,
)

__all__ = [
    "DEFAULT_BATCH_SIZE",
    # Models
    "CriteriaConfig",
    "CriteriaExpression",
    "CriteriaGroup",
    "CriteriaGroupList",
    "CriteriaList",
    "CriteriaMode",
    "CriteriaSource",
    "Criterion",
    "DEFAULT_CRITERIA",
    "Delta",
    "ExpressionOperator",
    "ExpressionTree",
    "GroupOperator",
    "KEY_SEPARATOR",
    "ORIGINAL_FILE_NAME",
    "Regex",
    "SingleCriterion",
    "Split",
    # Exceptions
    "CriteriaError",
    "CriteriaValidationError",
    "RegexCompilationError",
    "UnsupportedCriteriaSourceError",
    # Keys
    "KeyBuilder",
    "build_group_key",
    "build_group_keys",
    # Traversal
    "criteria_source",
    "find_split_delimiters",
    "flatten_expression",
    "flatten_groups",
    "iter_source_criteria",
    # Regex
    "RegexCache",
    "RegexCompiler",
    "compile_regex",
    "get_regex_cache",
    "precompile_regexes",
    "reset_regex_cache",
    # Loading
    "default_criteria_config",
    "load_criteria",
    "load_criteria_from_data",
    "parse_criteria",
    "resolve_criteria",
]
