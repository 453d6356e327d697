from django.test import SimpleTestCase

from issues.default_data import records
from issues.default_data.errors import InvalidConfiguration
from issues.default_data.workflow import (
    AllPairs,
    CrossProduct,
    SingleEdge,
    WorkflowPolicy,
    evaluate,
    expand_policies,
    generate,
    parse_policies,
    policies_to_payload,
)

STATUSES = ["new", "open", "done"]


def _default_plan():
    return evaluate(
        parse_policies(records.DEFAULT_WORKFLOW_POLICIES),
        trackers=[tracker.key for tracker in records.TRACKERS],
        roles=[role.key for role in records.ROLES],
        statuses=[status.key for status in records.STATUSES],
    )


class GenerateTests(SimpleTestCase):
    def test_all_pairs_covers_every_distinct_ordered_pair(self):
        edges = generate(AllPairs(), STATUSES)
        self.assertEqual(len(edges), 6)
        self.assertIn(("new", "done"), edges)
        self.assertIn(("done", "new"), edges)

    def test_cross_product_skips_self_transitions(self):
        edges = generate(CrossProduct(("new", "open"), ("open", "done")), STATUSES)
        self.assertEqual(edges, {("new", "open"), ("new", "done"), ("open", "done")})

    def test_single_edge(self):
        self.assertEqual(generate(SingleEdge("done", "open"), STATUSES), {("done", "open")})

    def test_single_self_edge_generates_nothing(self):
        self.assertEqual(generate(SingleEdge("open", "open"), STATUSES), set())

    def test_no_rule_generates_self_transitions(self):
        for rule in (AllPairs(), CrossProduct(tuple(STATUSES), tuple(STATUSES))):
            self.assertFalse([edge for edge in generate(rule, STATUSES) if edge[0] == edge[1]])

    def test_unknown_rule_is_rejected(self):
        with self.assertRaises(InvalidConfiguration):
            generate("everything", STATUSES)


class ParsePoliciesTests(SimpleTestCase):
    def test_parses_each_rule_shape(self):
        policies = parse_policies(
            [
                {"tracker": "ticket", "role": "admin", "rule": "all_pairs"},
                {"tracker": "ticket", "role": "moderator", "rule": "cross", "from": ["new"], "to": ["open"]},
                {"tracker": "ticket", "role": "trainee", "rule": "edge", "old": "open", "new": "done"},
            ]
        )
        self.assertEqual(
            [policy.rule for policy in policies],
            [AllPairs(), CrossProduct(("new",), ("open",)), SingleEdge("open", "done")],
        )
        self.assertEqual(policies[1].scope, ("ticket", "moderator"))

    def test_payload_survives_a_trip_through_records(self):
        payload = records.DEFAULT_WORKFLOW_POLICIES
        self.assertEqual(policies_to_payload(parse_policies(payload)), payload)

    def test_rejects_cross_rule_without_targets(self):
        with self.assertRaises(InvalidConfiguration) as ctx:
            parse_policies([{"tracker": "ticket", "role": "moderator", "rule": "cross", "from": ["new"]}])
        self.assertTrue(ctx.exception.errors)
        self.assertTrue(ctx.exception.errors[0].startswith("0:"))

    def test_rejects_edge_rule_with_cross_fields(self):
        with self.assertRaises(InvalidConfiguration):
            parse_policies(
                [{"tracker": "ticket", "role": "moderator", "rule": "edge", "old": "new", "new": "open", "to": ["done"]}]
            )

    def test_rejects_unknown_rule_and_extra_keys(self):
        with self.assertRaises(InvalidConfiguration) as ctx:
            parse_policies([{"tracker": "ticket", "role": "admin", "rule": "some", "colour": "red"}])
        self.assertGreaterEqual(len(ctx.exception.errors), 2)

    def test_rejects_non_list_payload(self):
        with self.assertRaises(InvalidConfiguration):
            parse_policies({"tracker": "ticket"})


class EvaluateTests(SimpleTestCase):
    def test_overlapping_rules_for_the_same_pair_are_rejected(self):
        policies = [
            WorkflowPolicy("ticket", "moderator", CrossProduct(("new",), ("open", "done"))),
            WorkflowPolicy("ticket", "moderator", SingleEdge("new", "open")),
        ]
        with self.assertRaises(InvalidConfiguration) as ctx:
            expand_policies(policies, STATUSES)
        self.assertEqual(ctx.exception.errors, ["1: ticket/moderator repeats new->open"])

    def test_same_edges_for_different_roles_do_not_overlap(self):
        policies = [
            WorkflowPolicy("ticket", "moderator", SingleEdge("new", "open")),
            WorkflowPolicy("ticket", "trainee", SingleEdge("new", "open")),
        ]
        expanded = expand_policies(policies, STATUSES)
        self.assertEqual(expanded[("ticket", "moderator")], {("new", "open")})
        self.assertEqual(expanded[("ticket", "trainee")], {("new", "open")})

    def test_unknown_references_are_reported_together(self):
        policies = [
            WorkflowPolicy("bug", "moderator", SingleEdge("new", "open")),
            WorkflowPolicy("ticket", "boss", SingleEdge("new", "missing")),
        ]
        with self.assertRaises(InvalidConfiguration) as ctx:
            evaluate(policies, trackers=["ticket"], roles=["moderator"], statuses=STATUSES)
        self.assertEqual(
            ctx.exception.errors,
            ["0: unknown tracker 'bug'", "1: unknown role 'boss'", "1: unknown status 'missing'"],
        )

    def test_explicit_self_edge_is_rejected(self):
        policies = [WorkflowPolicy("ticket", "moderator", SingleEdge("open", "open"))]
        with self.assertRaises(InvalidConfiguration):
            evaluate(policies, trackers=["ticket"], roles=["moderator"], statuses=STATUSES)


class DefaultPolicyTableTests(SimpleTestCase):
    def test_admin_gets_every_transition_on_every_tracker(self):
        plan = _default_plan()
        for tracker in records.TRACKERS:
            self.assertEqual(len(plan[(tracker.key, "admin")]), 9 * 8)

    def test_ticket_roles(self):
        plan = _default_plan()
        self.assertEqual(len(plan[("ticket", "moderator")]), 14)
        self.assertIn(("applied", "in_progress"), plan[("ticket", "moderator")])
        self.assertNotIn(("in_progress", "in_progress"), plan[("ticket", "moderator")])
        self.assertEqual(plan[("ticket", "trainee")], {("new", "in_progress")})
        self.assertEqual(plan[("ticket", "automation")], {("closed", "applied"), ("closed", "in_progress")})

    def test_incident_and_appeal_moderators(self):
        plan = _default_plan()
        self.assertEqual(
            plan[("incident", "moderator")],
            {("new", "in_progress"), ("in_progress", "new"), ("in_progress", "closed"), ("closed", "in_progress")},
        )
        self.assertEqual(len(plan[("appeal", "moderator")]), 8)
        self.assertIn(("denied", "in_progress"), plan[("appeal", "moderator")])

    def test_total_transition_count(self):
        plan = _default_plan()
        self.assertEqual(sum(len(edges) for edges in plan.values()), 245)
