"""
Tier unlock resolution and progress aggregation.

Every place that shows card progress (the user's wallet, the dashboard and the
brand console) goes through aggregate_progress(), so all of them agree on
which tiers are unlocked.

Rules:
- Conditions fold left to right. The first condition's operator is ignored;
  each later condition combines with the running result using its own
  operator (AND, anything else is OR). There is no precedence or grouping.
- The tier the user currently holds is always unlocked. Cards are never
  downgraded automatically.
- Manual-only tiers (autoAssign false, or no conditions) report no progress
  and are unlocked only when they are the current tier.
"""
from typing import Any, Dict, Iterable, List, Mapping, Sequence, Tuple, Union

from .unlock_conditions import (
    ActivitySnapshot,
    Condition,
    ConditionResult,
    Operator,
    evaluate_condition,
    parse_condition,
    parse_operator,
    parse_unlock_config,
)

ConditionLike = Union[Condition, Mapping[str, Any]]


def fold_results(evaluated: Sequence[Tuple[Condition, ConditionResult]]) -> bool:
    """Fold evaluated conditions left to right with their operators."""
    if not evaluated:
        return False

    unlocked = evaluated[0][1].met
    for condition, result in evaluated[1:]:
        if parse_operator(condition.operator) == Operator.AND:
            unlocked = unlocked and result.met
        else:
            unlocked = unlocked or result.met
    return unlocked


def resolve_unlock(
    conditions: Sequence[ConditionLike],
    snapshot: ActivitySnapshot,
    current_tier: str,
    template_tier: str
) -> bool:
    """
    Decide whether a tier is unlocked for a user.

    Args:
        conditions: Ordered conditions (parsed or authored JSON)
        snapshot: The user's activity, shared by every condition
        current_tier: Tier of the user's wallet card
        template_tier: Tier being evaluated

    Returns:
        True when the conditions fold to true or the tier is already held
    """
    holds_tier = template_tier == current_tier
    if not conditions:
        return holds_tier

    parsed = [parse_condition(condition) for condition in conditions]
    evaluated = [(condition, evaluate_condition(condition, snapshot)) for condition in parsed]
    return fold_results(evaluated) or holds_tier


def _template_fields(template: Any) -> Dict[str, Any]:
    if isinstance(template, Mapping):
        return dict(template)
    return template.to_dict()


def evaluate_template(template: Any, snapshot: ActivitySnapshot, current_tier: str) -> Dict[str, Any]:
    """
    Compute progress for one tier template.

    Args:
        template: CardTemplate or its to_dict() form
        snapshot: The user's activity snapshot
        current_tier: Tier of the user's wallet card

    Returns:
        The template's fields plus 'progress' (list or None) and 'unlocked'
    """
    fields = _template_fields(template)
    config = parse_unlock_config(fields.get('unlock_conditions'))
    holds_tier = fields.get('tier') == current_tier

    if config.manual_only:
        return {**fields, 'progress': None, 'unlocked': holds_tier}

    evaluated = [
        (condition, evaluate_condition(condition, snapshot))
        for condition in config.conditions
    ]
    progress = [condition.to_progress(result) for condition, result in evaluated]

    return {
        **fields,
        'progress': progress,
        'unlocked': fold_results(evaluated) or holds_tier,
    }


def aggregate_progress(
    templates: Iterable[Any],
    snapshot: ActivitySnapshot,
    current_tier: str
) -> List[Dict[str, Any]]:
    """
    Compute progress for every tier of a brand.

    All templates are evaluated against the same snapshot and returned in the
    order given (the template store's display order).
    """
    return [evaluate_template(template, snapshot, current_tier) for template in templates]


def newly_unlocked(tier_progress: Iterable[Mapping[str, Any]], current_tier: str) -> List[Mapping[str, Any]]:
    """Unlocked tiers other than the one the user already holds."""
    return [
        entry for entry in tier_progress
        if entry.get('unlocked') and entry.get('tier') != current_tier
    ]
