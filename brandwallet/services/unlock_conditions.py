"""
Card unlock conditions.

Brand admins author each tier's unlock rules as JSON:

    {"conditions": [{"type": "activation", "operator": "AND",
                     "params": {"minQuantity": 1}}, ...],
     "autoAssign": true}

parse_condition() turns every entry into one of a closed set of condition
classes (one per known type plus UnknownCondition) and evaluate_condition()
dispatches on that class. Stored data is parsed leniently: an unknown type,
a non-object entry or an unusable threshold never raises, it just produces a
condition that is not met.

Nothing in this module touches the database.
"""
import json
import math
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

Number = Union[int, float]


class ConditionType(str, Enum):
    """Condition types brand admins can author."""
    ACTIVATION = 'activation'
    EVENT = 'event'
    PURCHASE = 'purchase'
    SPENDING = 'spending'
    MANUAL = 'manual'


class Operator(str, Enum):
    """How a condition combines with everything before it."""
    AND = 'AND'
    OR = 'OR'


# ==================== Activity Snapshot ====================

@dataclass(frozen=True)
class ActivitySnapshot:
    """
    A user's activity with one brand, read once per evaluation.

    events_attended counts every 'going' RSVP; events_by_type splits the same
    RSVPs by event type (RSVPs to untyped events only count in the total).
    """
    activations_count: int = 0
    events_attended: int = 0
    events_by_type: Mapping[str, int] = field(default_factory=dict)
    purchase_count: int = 0
    total_spend: Number = 0

    def __post_init__(self):
        # Freeze the mapping so one snapshot reads the same for every condition
        object.__setattr__(self, 'events_by_type', MappingProxyType(dict(self.events_by_type)))

    def events_of_type(self, event_type: Optional[str] = None) -> int:
        if not event_type:
            return self.events_attended
        return self.events_by_type.get(event_type, 0)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'activations': self.activations_count,
            'events': self.events_attended,
            'events_by_type': dict(self.events_by_type),
            'purchases': self.purchase_count,
            'total_spend': self.total_spend,
        }


# ==================== Condition Types ====================

@dataclass(frozen=True)
class ConditionResult:
    """Progress of a single condition."""
    current: Number
    required: Number
    met: bool

    def to_dict(self) -> Dict[str, Any]:
        return {'current': self.current, 'required': self.required, 'met': self.met}


@dataclass(frozen=True)
class Condition:
    """Base class; use parse_condition() to build one from authored JSON."""
    operator: Operator = Operator.OR
    raw: Mapping[str, Any] = field(default_factory=dict, compare=False, repr=False)

    type_name = ''

    def params(self) -> Dict[str, Any]:
        return {}

    def to_dict(self) -> Dict[str, Any]:
        """The authored JSON when there is one, otherwise a canonical form."""
        if self.raw:
            return dict(self.raw)
        return {
            'type': self.type_name,
            'operator': parse_operator(self.operator).value,
            'params': self.params(),
        }

    def to_progress(self, result: ConditionResult) -> Dict[str, Any]:
        """Authored fields plus current/required/met, for UI rendering."""
        return {**self.to_dict(), **result.to_dict()}


@dataclass(frozen=True)
class ActivationCondition(Condition):
    min_quantity: Number = 1

    type_name = ConditionType.ACTIVATION.value

    def params(self):
        return {'minQuantity': self.min_quantity}


@dataclass(frozen=True)
class EventCondition(Condition):
    min_events: Number = 1
    event_type: Optional[str] = None

    type_name = ConditionType.EVENT.value

    def params(self):
        params = {'minEvents': self.min_events}
        if self.event_type:
            params['eventType'] = self.event_type
        return params


@dataclass(frozen=True)
class PurchaseCondition(Condition):
    min_quantity: Number = 1
    product_category: Optional[str] = None

    type_name = ConditionType.PURCHASE.value

    def params(self):
        params = {'minQuantity': self.min_quantity}
        if self.product_category:
            params['productCategory'] = self.product_category
        return params


@dataclass(frozen=True)
class SpendingCondition(Condition):
    min_amount: Number = 0

    type_name = ConditionType.SPENDING.value

    def params(self):
        return {'minAmount': self.min_amount}


@dataclass(frozen=True)
class ManualCondition(Condition):
    """Only a brand admin can satisfy this, by assigning the tier."""

    type_name = ConditionType.MANUAL.value


@dataclass(frozen=True)
class UnknownCondition(Condition):
    """Any type string (or entry shape) the engine does not understand."""
    type_label: str = ''

    @property
    def type_name(self):
        return self.type_label


# ==================== Parsing ====================

def _number(value: Any) -> Optional[Number]:
    """Coerce an authored threshold to a non-negative number, or None."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        value = float(value)
    elif isinstance(value, str):
        try:
            value = float(value.strip())
        except ValueError:
            return None
    elif not isinstance(value, (int, float)):
        return None

    if isinstance(value, float):
        if math.isnan(value) or math.isinf(value):
            return None
        if value.is_integer():
            value = int(value)
    if value < 0:
        return None
    return value


def _threshold(params: Mapping[str, Any], key: str, default: Number) -> Number:
    value = _number(params.get(key))
    return default if value is None else value


def _text(params: Mapping[str, Any], key: str) -> Optional[str]:
    value = params.get(key)
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def parse_operator(value: Any) -> Operator:
    """Only the exact string 'AND' combines with AND; anything else is OR."""
    if isinstance(value, Operator):
        return value
    if value == Operator.AND.value:
        return Operator.AND
    return Operator.OR


def parse_condition(raw: Any) -> Condition:
    """
    Build a condition from one authored JSON entry.

    Args:
        raw: A dict like {"type": "event", "operator": "AND", "params": {...}}

    Returns:
        A Condition subclass; UnknownCondition when the entry is unusable
    """
    if isinstance(raw, Condition):
        return raw
    if not isinstance(raw, Mapping):
        return UnknownCondition(type_label=type(raw).__name__)

    raw = MappingProxyType(dict(raw))
    operator = parse_operator(raw.get('operator'))
    params = raw.get('params')
    if not isinstance(params, Mapping):
        params = {}

    type_value = raw.get('type')
    type_label = type_value if isinstance(type_value, str) else ''
    try:
        condition_type = ConditionType(type_label)
    except ValueError:
        return UnknownCondition(operator=operator, raw=raw, type_label=type_label)

    if condition_type == ConditionType.ACTIVATION:
        return ActivationCondition(
            operator=operator,
            raw=raw,
            min_quantity=_threshold(params, 'minQuantity', 1),
        )
    elif condition_type == ConditionType.EVENT:
        return EventCondition(
            operator=operator,
            raw=raw,
            min_events=_threshold(params, 'minEvents', 1),
            event_type=_text(params, 'eventType'),
        )
    elif condition_type == ConditionType.PURCHASE:
        return PurchaseCondition(
            operator=operator,
            raw=raw,
            min_quantity=_threshold(params, 'minQuantity', 1),
            product_category=_text(params, 'productCategory'),
        )
    elif condition_type == ConditionType.SPENDING:
        return SpendingCondition(
            operator=operator,
            raw=raw,
            min_amount=_threshold(params, 'minAmount', 0),
        )
    elif condition_type == ConditionType.MANUAL:
        return ManualCondition(operator=operator, raw=raw)

    return UnknownCondition(operator=operator, raw=raw, type_label=type_label)


@dataclass(frozen=True)
class UnlockConfig:
    """A tier's parsed unlock configuration."""
    conditions: Tuple[Condition, ...] = ()
    auto_assign: bool = True

    @property
    def manual_only(self) -> bool:
        """Manual-only tiers are unlocked only by admin assignment."""
        return not self.auto_assign or not self.conditions


def parse_unlock_config(raw: Any) -> UnlockConfig:
    """
    Parse a template's unlock_conditions column.

    Accepts the decoded JSON object or its string form. Anything that is not
    an object yields an empty (manual-only) config.
    """
    if isinstance(raw, UnlockConfig):
        return raw
    if isinstance(raw, (str, bytes)):
        try:
            raw = json.loads(raw)
        except ValueError:
            return UnlockConfig()
    if not isinstance(raw, Mapping):
        return UnlockConfig()

    entries = raw.get('conditions')
    if not isinstance(entries, (list, tuple)):
        entries = []

    return UnlockConfig(
        conditions=tuple(parse_condition(entry) for entry in entries),
        auto_assign=raw.get('autoAssign') is not False,
    )


# ==================== Evaluation ====================

def evaluate_condition(condition: Union[Condition, Mapping[str, Any]], snapshot: ActivitySnapshot) -> ConditionResult:
    """
    Evaluate one condition against an activity snapshot.

    Purchase and spending conditions stay unmet until purchases are tracked.
    Never raises.
    """
    condition = parse_condition(condition)

    if isinstance(condition, ActivationCondition):
        current = snapshot.activations_count
        return ConditionResult(current, condition.min_quantity, current >= condition.min_quantity)

    elif isinstance(condition, EventCondition):
        current = snapshot.events_of_type(condition.event_type)
        return ConditionResult(current, condition.min_events, current >= condition.min_events)

    elif isinstance(condition, PurchaseCondition):
        return ConditionResult(0, condition.min_quantity, False)

    elif isinstance(condition, SpendingCondition):
        return ConditionResult(0, condition.min_amount, False)

    elif isinstance(condition, ManualCondition):
        return ConditionResult(0, 1, False)

    # UnknownCondition, or a Condition subclass without an evaluator
    return ConditionResult(0, 1, False)


# ==================== Authoring Validation ====================

_THRESHOLD_PARAMS = {
    ConditionType.ACTIVATION: 'minQuantity',
    ConditionType.EVENT: 'minEvents',
    ConditionType.PURCHASE: 'minQuantity',
    ConditionType.SPENDING: 'minAmount',
}


def validate_unlock_config(raw: Any) -> List[str]:
    """
    Report problems in an unlock config submitted from the brand console.

    The engine tolerates all of these at evaluation time; this check exists so
    brand admins get feedback before saving.

    Returns:
        List of human-readable errors (empty when valid)
    """
    if raw is None:
        return []
    if not isinstance(raw, Mapping):
        return ['unlockConditions must be an object']

    errors = []
    if 'autoAssign' in raw and not isinstance(raw['autoAssign'], bool):
        errors.append('autoAssign must be true or false')

    entries = raw.get('conditions', [])
    if not isinstance(entries, list):
        errors.append('conditions must be a list')
        return errors

    for index, entry in enumerate(entries, start=1):
        label = f'Condition {index}'
        if not isinstance(entry, Mapping):
            errors.append(f'{label}: must be an object')
            continue

        try:
            condition_type = ConditionType(entry.get('type'))
        except ValueError:
            errors.append(f"{label}: unknown type '{entry.get('type')}'")
            continue

        operator = entry.get('operator')
        if index > 1 and operator not in (Operator.AND.value, Operator.OR.value):
            errors.append(f'{label}: operator must be AND or OR')

        params = entry.get('params', {})
        if not isinstance(params, Mapping):
            errors.append(f'{label}: params must be an object')
            continue

        key = _THRESHOLD_PARAMS.get(condition_type)
        if key and key in params and _number(params[key]) is None:
            errors.append(f'{label}: {key} must be a non-negative number')

        for text_key in ('eventType', 'productCategory'):
            if text_key in params and params[text_key] is not None and not isinstance(params[text_key], str):
                errors.append(f'{label}: {text_key} must be a string')

    return errors
