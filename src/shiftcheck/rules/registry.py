from __future__ import annotations

from typing import Sequence, Tuple, Type

from shiftcheck.rules.base import Rule, RuleSpec
from shiftcheck.rules.coverage import CoverageRule
from shiftcheck.rules.daily_limit import DailyLimitRule
from shiftcheck.rules.rest import WeeklyRestRule

RuleTemplate = Tuple[Type[Rule], int, dict[str, object]]

DAILY_LIMIT_RULE_TEMPLATE: RuleTemplate = (DailyLimitRule, 20, {})
WEEKLY_REST_RULE_TEMPLATE: RuleTemplate = (WeeklyRestRule, 50, {})
COVERAGE_RULE_TEMPLATE: RuleTemplate = (CoverageRule, 60, {})

_DEFAULT_RULE_TEMPLATES: list[RuleTemplate] = [
    DAILY_LIMIT_RULE_TEMPLATE,
    WEEKLY_REST_RULE_TEMPLATE,
    COVERAGE_RULE_TEMPLATE,
]

# Per-employee rules only; coverage needs the whole roster
_CANDIDATE_RULE_TEMPLATES: list[RuleTemplate] = [
    DAILY_LIMIT_RULE_TEMPLATE,
    WEEKLY_REST_RULE_TEMPLATE,
]


def _specs(templates: list[RuleTemplate]) -> list[RuleSpec]:
    return [
        RuleSpec(cls=cls, order=order, settings=dict(settings))
        for cls, order, settings in templates
    ]


def default_rule_specs() -> list[RuleSpec]:
    """Return fresh copies of the full-week rule specifications."""
    return _specs(_DEFAULT_RULE_TEMPLATES)


def candidate_rule_specs() -> list[RuleSpec]:
    """Return fresh copies of the rules run for a single candidate shift."""
    return _specs(_CANDIDATE_RULE_TEMPLATES)


def normalize_rule_specs(
    rules: Sequence[RuleSpec | Type[Rule]] | None,
) -> list[RuleSpec]:
    """Turn user-provided rules into RuleSpec objects."""
    if rules is None:
        return default_rule_specs()

    normalized: list[RuleSpec] = []
    for item in rules:
        if isinstance(item, RuleSpec):
            normalized.append(item)
        elif isinstance(item, type) and issubclass(item, Rule):
            normalized.append(RuleSpec(cls=item))
        else:
            raise TypeError(
                "Rules must be RuleSpec instances or Rule subclasses; "
                f"got {type(item)!r}"
            )
    return normalized
