"""Response evaluation: expectation checks and custom field rules."""

from volley.evaluation.validator import ResponseValidator, check_rule, lookup_field, values_equal

__all__ = [
    "ResponseValidator",
    "check_rule",
    "lookup_field",
    "values_equal",
]
