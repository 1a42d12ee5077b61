from __future__ import annotations

import operator
from decimal import Decimal
from enum import Enum
from typing import Any, Callable, Dict

from .fields import get_field_value
from .models import CompareMode, LineItem, RuleOperator, UserRule
from .numeric import is_blank, to_decimal

_NUMERIC_OPERATORS: Dict[RuleOperator, Callable[[Decimal, Decimal], bool]] = {
    RuleOperator.GT: operator.gt,
    RuleOperator.GTE: operator.ge,
    RuleOperator.LT: operator.lt,
    RuleOperator.LTE: operator.le,
    RuleOperator.EQ: operator.eq,
    RuleOperator.NEQ: operator.ne,
}


def _as_text(value: Any) -> str:
    if is_blank(value):
        return ""
    if isinstance(value, Enum):
        value = value.value
    return str(value).strip().lower()


def resolve_compare_value(rule: UserRule, item: LineItem) -> Any:
    if rule.compare_mode == CompareMode.FIELD:
        return get_field_value(item, rule.compare_value)
    return rule.compare_value


def evaluate_user_rule(rule: UserRule, item: LineItem) -> bool:
    """Return True when `item` matches the rule's condition.

    Both operands are coerced to numbers first; when either side is not
    numeric, `eq`/`neq` compare case-insensitive text and ordering operators
    never match. Unknown operators never match.

    A rule that references a field outside `LineItemField` raises ValueError;
    callers isolate each rule so one bad rule cannot stop the rest.
    """
    try:
        op = RuleOperator(rule.operator)
    except ValueError:
        return False

    target = get_field_value(item, rule.target_field)

    if op == RuleOperator.EMPTY:
        return is_blank(target)
    if op == RuleOperator.NOT_EMPTY:
        return not is_blank(target)

    compare = resolve_compare_value(rule, item)

    if op in (RuleOperator.CONTAINS, RuleOperator.NOT_CONTAINS):
        found = _as_text(compare) in _as_text(target)
        return found if op == RuleOperator.CONTAINS else not found

    num_target = to_decimal(target)
    num_compare = to_decimal(compare)
    if num_target is not None and num_compare is not None:
        return _NUMERIC_OPERATORS[op](num_target, num_compare)

    if op == RuleOperator.EQ:
        return _as_text(target) == _as_text(compare)
    if op == RuleOperator.NEQ:
        return _as_text(target) != _as_text(compare)
    return False
