"""
Tests for the card text expression evaluator.

Tests:
- Arithmetic, precedence and comparisons
- Division semantics and errors
- 32-bit overflow and the step limit
- Variable lookup
- Placeholder rendering and text sections
"""

import pytest

from ..engine_core.errors import (
    ExpressionDivisionByZeroError,
    ExpressionOverflowError,
    ExpressionSyntaxError,
    StepLimitExceededError,
    UndefinedVariableError,
)
from ..engine_core.expression import (
    ExpressionContext,
    ExpressionEvaluator,
    SectionKind,
    TextSection,
    evaluate_expression,
    parse_text,
    render,
)


class TestArithmetic:
    """Tests for integer arithmetic."""

    def test_precedence(self):
        """Multiplication binds tighter than addition."""
        assert evaluate_expression("2 + 3 * 4") == 14
        assert evaluate_expression("(2 + 3) * 4") == 20

    def test_unary_minus(self):
        """Unary minus negates."""
        assert evaluate_expression("-5 + 2") == -3
        assert evaluate_expression("--5") == 5

    def test_division_truncates_toward_zero(self):
        """Integer division drops the fraction."""
        assert evaluate_expression("7 / 2") == 3
        assert evaluate_expression("-7 / 2") == -3
        assert evaluate_expression("7 / -2") == -3

    def test_division_by_zero(self):
        """Dividing by zero raises."""
        with pytest.raises(ExpressionDivisionByZeroError):
            evaluate_expression("1 / (2 - 2)")

    def test_overflow(self):
        """Results outside 32-bit signed range raise."""
        assert evaluate_expression("2147483647") == 2147483647
        with pytest.raises(ExpressionOverflowError):
            evaluate_expression("2147483647 + 1")
        with pytest.raises(ExpressionOverflowError):
            evaluate_expression("65536 * 65536")

    def test_comparisons(self):
        """Comparisons return booleans."""
        assert evaluate_expression("3 > 2") is True
        assert evaluate_expression("3 <= 2") is False
        assert evaluate_expression("true == true") is True

    def test_syntax_errors(self):
        """Malformed expressions raise ExpressionSyntaxError."""
        for expr in ("", "1 +", "(1", "1 2", "3 $ 4"):
            with pytest.raises(ExpressionSyntaxError):
                evaluate_expression(expr)


class TestVariables:
    """Tests for variable lookup."""

    def test_names_and_paths(self):
        """Dotted paths read dicts and attributes."""
        context = ExpressionContext({"power": 300, "card": {"cost": 2}})
        evaluator = ExpressionEvaluator()
        assert evaluator.evaluate("power * 2", context) == 600
        assert evaluator.evaluate("card.cost + 1", context) == 3
        assert evaluator.evaluate_condition("power > card.cost", context)

    def test_undefined_variable(self):
        """Unknown names raise UndefinedVariableError."""
        with pytest.raises(UndefinedVariableError) as excinfo:
            evaluate_expression("life - 1", {"power": 1})
        assert excinfo.value.name == "life"

    def test_step_limit(self):
        """Evaluation stops once the step budget is spent."""
        evaluator = ExpressionEvaluator(max_steps=5)
        with pytest.raises(StepLimitExceededError):
            evaluator.evaluate("1 + 2 + 3 + 4", ExpressionContext())
        assert ExpressionEvaluator(max_steps=5).evaluate("1", ExpressionContext()) == 1


class TestRender:
    """Tests for card text rendering."""

    def test_placeholders(self):
        """Each {expr} is replaced by its value."""
        assert render("Deal {power * 2} for {cost}.", {"power": 100, "cost": 2}) == "Deal 200 for 2."

    def test_failed_placeholder_is_blank(self):
        """A placeholder that fails renders as empty text."""
        assert render("Gain {missing} shards, {1 / 0} more.") == "Gain  shards,  more."

    def test_text_without_placeholders(self):
        """Plain text is returned unchanged."""
        assert render("[[Toxic]]") == "[[Toxic]]"


class TestParseText:
    """Tests for splitting text into styled sections."""

    def test_sections(self):
        """Card names, keywords and numbers become their own sections."""
        sections = parse_text("[[Devour]] When destroyed, generate an <<Ant>> and deal 100.")
        assert sections == [
            TextSection(SectionKind.KEYWORD, "Devour"),
            TextSection(SectionKind.TEXT, " When destroyed, generate an "),
            TextSection(SectionKind.CARD, "Ant"),
            TextSection(SectionKind.TEXT, " and deal "),
            TextSection(SectionKind.NUMBER, 100),
            TextSection(SectionKind.TEXT, "."),
        ]

    def test_signed_numbers(self):
        """A leading sign is kept with the number."""
        assert parse_text("+100") == [TextSection(SectionKind.NUMBER, 100)]
        assert parse_text("-2")[0].value == -2
