"""Workflow transition rules and their evaluation.

A policy table is a list of ``WorkflowPolicy`` records, each binding one rule
to a (tracker, role) pair. Three rule shapes exist:

* ``AllPairs`` - every ordered pair of distinct statuses;
* ``CrossProduct`` - every (source, target) pair with source != target;
* ``SingleEdge`` - one explicit transition.

Rules are evaluated over status handles (symbolic keys in the seed tables,
but any hashable works). Self transitions are never generated. Two rules for
the same (tracker, role) may not emit the same edge; such a table is rejected
as ``InvalidConfiguration`` before anything is written.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Hashable, Iterable, List, Sequence, Set, Tuple, Union

from jsonschema import Draft202012Validator

from .errors import InvalidConfiguration

Edge = Tuple[Hashable, Hashable]

RULE_ALL_PAIRS = "all_pairs"
RULE_CROSS = "cross"
RULE_EDGE = "edge"

_KEY = {"type": "string", "minLength": 1}
_KEY_LIST = {"type": "array", "items": _KEY, "minItems": 1, "uniqueItems": True}

POLICY_SCHEMA: Dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "type": "array",
    "items": {
        "type": "object",
        "required": ["tracker", "role", "rule"],
        "additionalProperties": False,
        "properties": {
            "tracker": _KEY,
            "role": _KEY,
            "rule": {"enum": [RULE_ALL_PAIRS, RULE_CROSS, RULE_EDGE]},
            "from": _KEY_LIST,
            "to": _KEY_LIST,
            "old": _KEY,
            "new": _KEY,
        },
        "allOf": [
            {
                "if": {"properties": {"rule": {"const": RULE_CROSS}}, "required": ["rule"]},
                "then": {"required": ["from", "to"], "not": {"anyOf": [{"required": ["old"]}, {"required": ["new"]}]}},
            },
            {
                "if": {"properties": {"rule": {"const": RULE_EDGE}}, "required": ["rule"]},
                "then": {"required": ["old", "new"], "not": {"anyOf": [{"required": ["from"]}, {"required": ["to"]}]}},
            },
            {
                "if": {"properties": {"rule": {"const": RULE_ALL_PAIRS}}, "required": ["rule"]},
                "then": {
                    "not": {
                        "anyOf": [
                            {"required": ["from"]},
                            {"required": ["to"]},
                            {"required": ["old"]},
                            {"required": ["new"]},
                        ]
                    }
                },
            },
        ],
    },
}


@dataclass(frozen=True)
class AllPairs:
    def statuses(self) -> Tuple[Hashable, ...]:
        return ()


@dataclass(frozen=True)
class CrossProduct:
    sources: Tuple[Hashable, ...]
    targets: Tuple[Hashable, ...]

    def statuses(self) -> Tuple[Hashable, ...]:
        return tuple(self.sources) + tuple(self.targets)


@dataclass(frozen=True)
class SingleEdge:
    old: Hashable
    new: Hashable

    def statuses(self) -> Tuple[Hashable, ...]:
        return (self.old, self.new)


Rule = Union[AllPairs, CrossProduct, SingleEdge]


@dataclass(frozen=True)
class WorkflowPolicy:
    tracker: str
    role: str
    rule: Rule

    @property
    def scope(self) -> Tuple[str, str]:
        return (self.tracker, self.role)


def generate(rule: Rule, statuses: Sequence[Hashable]) -> Set[Edge]:
    """Return the (old, new) transitions a rule allows over ``statuses``."""
    if isinstance(rule, AllPairs):
        return {(old, new) for old in statuses for new in statuses if old != new}
    if isinstance(rule, CrossProduct):
        return {(old, new) for old in rule.sources for new in rule.targets if old != new}
    if isinstance(rule, SingleEdge):
        return {(rule.old, rule.new)} if rule.old != rule.new else set()
    raise InvalidConfiguration(f"Unsupported workflow rule {rule!r}")


def _rule_from_payload(item: Dict[str, Any]) -> Rule:
    kind = item["rule"]
    if kind == RULE_ALL_PAIRS:
        return AllPairs()
    if kind == RULE_CROSS:
        return CrossProduct(tuple(item["from"]), tuple(item["to"]))
    return SingleEdge(item["old"], item["new"])


def parse_policies(payload: Any) -> List[WorkflowPolicy]:
    """Build policy records from their JSON form, validating the shape first."""
    validator = Draft202012Validator(POLICY_SCHEMA)
    errors = []
    for error in sorted(validator.iter_errors(payload), key=lambda e: [str(p) for p in e.path]):
        path = ".".join(str(p) for p in error.path) if error.path else "root"
        errors.append(f"{path}: {error.message}")
    if errors:
        raise InvalidConfiguration("Invalid workflow policy table", errors)
    return [WorkflowPolicy(item["tracker"], item["role"], _rule_from_payload(item)) for item in payload]


def policies_to_payload(policies: Iterable[WorkflowPolicy]) -> List[Dict[str, Any]]:
    payload = []
    for policy in policies:
        item: Dict[str, Any] = {"tracker": policy.tracker, "role": policy.role}
        rule = policy.rule
        if isinstance(rule, AllPairs):
            item["rule"] = RULE_ALL_PAIRS
        elif isinstance(rule, CrossProduct):
            item.update({"rule": RULE_CROSS, "from": list(rule.sources), "to": list(rule.targets)})
        else:
            item.update({"rule": RULE_EDGE, "old": rule.old, "new": rule.new})
        payload.append(item)
    return payload


def check_policies(
    policies: Iterable[WorkflowPolicy],
    trackers: Iterable[Hashable],
    roles: Iterable[Hashable],
    statuses: Iterable[Hashable],
) -> None:
    trackers, roles, statuses = set(trackers), set(roles), set(statuses)
    errors = []
    for index, policy in enumerate(policies):
        if policy.tracker not in trackers:
            errors.append(f"{index}: unknown tracker {policy.tracker!r}")
        if policy.role not in roles:
            errors.append(f"{index}: unknown role {policy.role!r}")
        for status in policy.rule.statuses():
            if status not in statuses:
                errors.append(f"{index}: unknown status {status!r}")
        if isinstance(policy.rule, SingleEdge) and policy.rule.old == policy.rule.new:
            errors.append(f"{index}: self transition {policy.rule.old!r} is not allowed")
    if errors:
        raise InvalidConfiguration("Workflow policy references are invalid", errors)


def expand_policies(
    policies: Iterable[WorkflowPolicy], statuses: Sequence[Hashable]
) -> Dict[Tuple[str, str], Set[Edge]]:
    """Evaluate a policy table into the edge set of every (tracker, role) pair.

    Rules for the same pair must not overlap; every overlap found is reported
    in a single InvalidConfiguration.
    """
    expanded: Dict[Tuple[str, str], Set[Edge]] = {}
    errors = []
    for index, policy in enumerate(policies):
        edges = generate(policy.rule, statuses)
        existing = expanded.setdefault(policy.scope, set())
        overlap = existing & edges
        if overlap:
            pairs = ", ".join(f"{old}->{new}" for old, new in sorted(overlap, key=str))
            errors.append(f"{index}: {policy.tracker}/{policy.role} repeats {pairs}")
        existing |= edges
    if errors:
        raise InvalidConfiguration("Workflow policies overlap", errors)
    return expanded


def evaluate(
    policies: Sequence[WorkflowPolicy],
    trackers: Iterable[Hashable],
    roles: Iterable[Hashable],
    statuses: Sequence[Hashable],
) -> Dict[Tuple[str, str], Set[Edge]]:
    check_policies(policies, trackers, roles, statuses)
    return expand_policies(policies, statuses)
