"""Unit tests for FastBlockGivenRule (W9501), driven through the checker like the host does."""

import gc
import unittest

from block_given_linter.domain.syntax import SyntaxNode, SyntaxTree
from block_given_linter.infrastructure.di.container import BlockGivenContainer
from tests.ruby_fixtures import (
    MethodFixture,
    RubySource,
    apply_corrections,
    check_source,
)

BLOCK_GIVEN = "check_if_block_given"
DEFINED_YIELD = "check_if_defined_yield"
BLOCK_TRUTHY = "check_if_block_truthy"
STYLES = (BLOCK_GIVEN, DEFINED_YIELD, BLOCK_TRUTHY)


def _reassigns_block(src: RubySource) -> list[SyntaxNode]:
    # block ||= -> { do_something }
    return [
        src.node(
            "or_asgn",
            src.node("lvasgn", "block", at="block", occurrence=2),
            src.node("block", src.node("lambda"), src.node("args"),
                     src.node("send", None, "do_something")),
        )
    ]


class TestBlockGivenCall(unittest.TestCase):
    """A block is checked via block_given?."""

    def test_no_offense_when_style_is_check_if_block_given(self) -> None:
        fixture = MethodFixture("block_given?")
        self.assertEqual(check_source(fixture.tree, BLOCK_GIVEN), [])

    def test_offense_and_correction_when_style_is_check_if_defined_yield(self) -> None:
        fixture = MethodFixture("block_given?")
        violations = check_source(fixture.tree, DEFINED_YIELD)

        self.assertEqual(len(violations), 1)
        v = violations[0]
        self.assertEqual(v.code, "W9501")
        self.assertEqual(v.message, "Check `defined?(yield)` instead of using `block_given?`.")
        self.assertIs(v.node, fixture.condition)
        self.assertEqual(v.location, "example.rb:2:18")
        self.assertEqual(
            apply_corrections(fixture.text, violations),
            "def method(x, &block)\n  do_something if defined?(yield)\nend\n",
        )

    def test_offense_and_correction_when_style_is_check_if_block_truthy(self) -> None:
        fixture = MethodFixture("block_given?")
        violations = check_source(fixture.tree, BLOCK_TRUTHY)

        self.assertEqual(len(violations), 1)
        self.assertEqual(
            violations[0].message, "Check `block`'s truthiness instead of using `block_given?`.")
        self.assertEqual(
            apply_corrections(fixture.text, violations),
            "def method(x, &block)\n  do_something if block\nend\n",
        )

    def test_truthy_correction_uses_declared_parameter_name(self) -> None:
        fixture = MethodFixture("block_given?", params="&callback")
        violations = check_source(fixture.tree, BLOCK_TRUTHY)

        self.assertEqual(len(violations), 1)
        self.assertEqual(
            violations[0].message,
            "Check `callback`'s truthiness instead of using `block_given?`.")
        self.assertEqual(violations[0].correction.replacement, "callback")

    def test_ignores_block_given_with_receiver_or_arguments(self) -> None:
        src = RubySource("def method(&block)\n  obj.block_given? || block_given?(1)\nend\n")
        receiver_call = src.node(
            "send", src.node("send", None, "obj", at="obj"), "block_given?",
            at="obj.block_given?")
        argument_call = src.node(
            "send", None, "block_given?", src.node("int", "1", at="1"),
            at="block_given?(1)")
        root = src.node(
            "def", "method", src.parameters("&block"),
            src.node("or", receiver_call, argument_call))
        self.assertEqual(check_source(SyntaxTree(root), DEFINED_YIELD), [])


class TestDefinedYieldProbe(unittest.TestCase):
    """A block is checked via defined?(yield)."""

    def test_offense_and_correction_when_style_is_check_if_block_given(self) -> None:
        fixture = MethodFixture("defined?(yield)")
        violations = check_source(fixture.tree, BLOCK_GIVEN)

        self.assertEqual(len(violations), 1)
        self.assertEqual(
            violations[0].message, "Check `block_given?` instead of using `defined?(yield)`.")
        self.assertEqual(
            apply_corrections(fixture.text, violations),
            "def method(x, &block)\n  do_something if block_given?\nend\n",
        )

    def test_no_offense_when_style_is_check_if_defined_yield(self) -> None:
        fixture = MethodFixture("defined?(yield)")
        self.assertEqual(check_source(fixture.tree, DEFINED_YIELD), [])

    def test_offense_and_correction_when_style_is_check_if_block_truthy(self) -> None:
        fixture = MethodFixture("defined?(yield)")
        violations = check_source(fixture.tree, BLOCK_TRUTHY)

        self.assertEqual(len(violations), 1)
        self.assertEqual(
            violations[0].message,
            "Check `block`'s truthiness instead of using `defined?(yield)`.")
        self.assertEqual(
            apply_corrections(fixture.text, violations),
            "def method(x, &block)\n  do_something if block\nend\n",
        )

    def test_ignores_defined_on_other_expressions(self) -> None:
        src = RubySource("def method(&block)\n  do_something if defined?(foo)\nend\n")
        probe = src.node("defined?", src.node("send", None, "foo", at="foo"), at="defined?(foo)")
        root = src.node(
            "def", "method", src.parameters("&block"),
            src.node("if", probe, src.node("send", None, "do_something"), None))
        self.assertEqual(check_source(SyntaxTree(root), BLOCK_GIVEN), [])


class TestBlockTruthyRef(unittest.TestCase):
    """A block is checked via its truthiness."""

    def test_offense_and_correction_when_style_is_check_if_block_given(self) -> None:
        fixture = MethodFixture("block")
        violations = check_source(fixture.tree, BLOCK_GIVEN)

        self.assertEqual(len(violations), 1)
        self.assertEqual(
            violations[0].message,
            "Check `block_given?` instead of checking the `block`'s truthiness.")
        self.assertEqual(
            apply_corrections(fixture.text, violations),
            "def method(x, &block)\n  do_something if block_given?\nend\n",
        )

    def test_offense_and_correction_when_style_is_check_if_defined_yield(self) -> None:
        fixture = MethodFixture("block")
        violations = check_source(fixture.tree, DEFINED_YIELD)

        self.assertEqual(len(violations), 1)
        self.assertEqual(
            violations[0].message,
            "Check `defined?(yield)` instead of checking the `block`'s truthiness.")
        self.assertEqual(
            apply_corrections(fixture.text, violations),
            "def method(x, &block)\n  do_something if defined?(yield)\nend\n",
        )

    def test_no_offense_when_style_is_check_if_block_truthy(self) -> None:
        fixture = MethodFixture("block")
        self.assertEqual(check_source(fixture.tree, BLOCK_TRUTHY), [])

    def test_value_uses_of_the_block_are_not_truthiness_checks(self) -> None:
        src = RubySource("def method(&block)\n  block.call\nend\n")
        call = src.node("send", src.node("lvar", "block", at="block", occurrence=2), "call",
                        at="block.call")
        root = src.node("def", "method", src.parameters("&block"), call)
        self.assertEqual(check_source(SyntaxTree(root), BLOCK_GIVEN), [])


class TestApplicabilityGates(unittest.TestCase):
    """Scope and block-parameter gating."""

    def test_truthy_style_without_block_parameter_never_flags(self) -> None:
        for condition in ("block_given?", "defined?(yield)"):
            with self.subTest(condition=condition):
                fixture = MethodFixture(condition, params="x")
                self.assertEqual(check_source(fixture.tree, BLOCK_TRUTHY), [])

    def test_truthy_style_with_anonymous_block_parameter_never_flags(self) -> None:
        fixture = MethodFixture("block_given?", params="&")
        self.assertEqual(check_source(fixture.tree, BLOCK_TRUTHY), [])

    def test_other_styles_still_apply_without_block_parameter(self) -> None:
        fixture = MethodFixture("block_given?", params="x")
        violations = check_source(fixture.tree, DEFINED_YIELD)
        self.assertEqual(len(violations), 1)

    def test_reassigned_block_parameter_is_never_suggested(self) -> None:
        for condition in ("block_given?", "defined?(yield)"):
            with self.subTest(condition=condition):
                fixture = MethodFixture(
                    condition,
                    params="&block",
                    prelude="  block ||= -> { do_something }\n",
                    prelude_nodes=_reassigns_block,
                )
                self.assertEqual(check_source(fixture.tree, BLOCK_TRUTHY), [])

    def test_reassigned_block_parameter_is_never_flagged(self) -> None:
        fixture = MethodFixture(
            "block",
            params="&block",
            prelude="  block ||= -> { do_something }\n",
            prelude_nodes=_reassigns_block,
        )
        for style in (BLOCK_GIVEN, DEFINED_YIELD):
            with self.subTest(style=style):
                self.assertEqual(check_source(fixture.tree, style), [])

    def test_no_offense_outside_any_method(self) -> None:
        for condition in ("block_given?", "defined?(yield)"):
            src = RubySource(f"do_something if {condition}\n")
            root = src.node(
                "if", src.condition(condition), src.node("send", None, "do_something"), None)
            for style in STYLES:
                with self.subTest(condition=condition, style=style):
                    self.assertEqual(check_source(SyntaxTree(root), style), [])

    def test_singleton_methods_behave_like_instance_methods(self) -> None:
        fixture = MethodFixture("block_given?", singleton=True)
        violations = check_source(fixture.tree, BLOCK_TRUTHY)
        self.assertEqual(
            apply_corrections(fixture.text, violations),
            "def self.method(x, &block)\n  do_something if block\nend\n",
        )

    def test_nested_method_uses_innermost_block_parameter(self) -> None:
        src = RubySource(
            "def outer(&outer_block)\n"
            "  def inner(&inner_block)\n"
            "    do_something if block_given?\n"
            "  end\n"
            "end\n"
        )
        condition = src.condition("block_given?")
        inner = src.node(
            "def", "inner", src.parameters("&inner_block"),
            src.node("if", condition, src.node("send", None, "do_something"), None))
        root = src.node("def", "outer", src.parameters("&outer_block"), inner)
        violations = check_source(SyntaxTree(root), BLOCK_TRUTHY)

        self.assertEqual(len(violations), 1)
        self.assertEqual(violations[0].correction.replacement, "inner_block")

    def test_truthiness_is_not_suggested_where_a_ruby_block_shadows_the_parameter(self) -> None:
        for condition in ("block_given?", "defined?(yield)"):
            for block_var, expected in (("block", 0), ("item", 1)):
                with self.subTest(condition=condition, block_var=block_var):
                    src = RubySource(
                        "def method(&block)\n"
                        f"  items.each {{ |{block_var}| do_something if {condition} }}\n"
                        "end\n"
                    )
                    statement = src.node(
                        "if", src.condition(condition),
                        src.node("send", None, "do_something", at="do_something"), None)
                    each = src.node(
                        "block",
                        src.node("send", src.node("send", None, "items", at="items"),
                                 "each", at="items.each"),
                        src.node("args", src.node("arg", block_var, at=f"|{block_var}|")),
                        statement,
                    )
                    root = src.node("def", "method", src.parameters("&block"), each)

                    violations = check_source(SyntaxTree(root, path="example.rb"), BLOCK_TRUTHY)

                    self.assertEqual(len(violations), expected)

    def test_autocorrect_disabled_reports_without_correction(self) -> None:
        fixture = MethodFixture("block_given?")
        violations = check_source(fixture.tree, DEFINED_YIELD, AutoCorrect=False)

        self.assertEqual(len(violations), 1)
        self.assertIsNone(violations[0].correction)
        self.assertFalse(violations[0].fixable)


class TestRuleCalledDirectly(unittest.TestCase):
    """FastBlockGivenRule used through its Checkable/Fixable API, without the checker."""

    def setUp(self) -> None:
        self.rule = BlockGivenContainer({"EnforcedStyle": BLOCK_TRUTHY}).get_rule()

    def test_reassignment_results_do_not_leak_between_trees(self) -> None:
        # No reset() between trees; freed trees must not answer for new ones.
        for i in range(60):
            reassigned = i % 2 == 0
            if reassigned:
                fixture = MethodFixture(
                    "block_given?",
                    params="&block",
                    prelude="  block ||= -> { do_something }\n",
                    prelude_nodes=_reassigns_block,
                )
            else:
                fixture = MethodFixture("block_given?", params="&block")
            with self.subTest(tree=i, reassigned=reassigned):
                violations = self.rule.check(fixture.condition, fixture.tree)
                self.assertEqual(len(violations), 0 if reassigned else 1)
            del fixture
            gc.collect()

    def test_fix_returns_the_computed_correction(self) -> None:
        fixture = MethodFixture("block_given?")
        [violation] = self.rule.check(fixture.condition, fixture.tree)
        self.assertIs(self.rule.fix(violation), violation.correction)
        self.assertEqual(violation.correction.replacement, "block")

    def test_fix_instructions_append_registry_guidance(self) -> None:
        fixture = MethodFixture("defined?(yield)")
        [violation] = self.rule.check(fixture.condition, fixture.tree)
        instructions = self.rule.get_fix_instructions(violation)
        self.assertTrue(instructions.startswith(violation.message))
        self.assertIn("&block", instructions)

    def test_description_comes_from_registry(self) -> None:
        self.assertIn("block was passed", self.rule.description)


class TestIdempotence(unittest.TestCase):
    """Applying a correction and re-running with the same style finds nothing."""

    CONDITIONS = ("block_given?", "defined?(yield)", "block")

    def test_corrected_code_is_clean(self) -> None:
        for style in STYLES:
            for condition in self.CONDITIONS:
                with self.subTest(style=style, condition=condition):
                    fixture = MethodFixture(condition)
                    violations = check_source(fixture.tree, style)
                    if not violations:
                        continue
                    replacement = violations[0].correction.replacement
                    corrected = MethodFixture(replacement)

                    self.assertEqual(apply_corrections(fixture.text, violations), corrected.text)
                    self.assertEqual(check_source(corrected.tree, style), [])
