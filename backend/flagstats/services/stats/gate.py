"""Rule-set checks applied when a new event is logged.

Only event creation is gated. Logs that already hold a PAT_RET_2 under a
rule set without PAT returns (imported files, older data) still aggregate.
"""
from .events import EventType
from .exceptions import EventNotAllowed
from .rules import RuleSet


def ensure_event_allowed(rule_set: RuleSet, event_type: EventType) -> None:
    if event_type is EventType.PAT_RET_2 and not rule_set.allow_pat_return:
        raise EventNotAllowed(event_type.value, rule_set.value)
