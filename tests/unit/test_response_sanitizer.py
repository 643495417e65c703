"""
Unit tests for core/response_sanitizer.py

Tests:
- Code and LaTeX stripping
- Whitespace normalization
- Step-by-step formatting and single container
- Idempotence
"""

import pytest
from core.response_sanitizer import (
    SOLUTION_CONTAINER_CLOSE,
    SOLUTION_CONTAINER_OPEN,
    sanitize,
)


# =============================================================================
# Stripping
# =============================================================================

def test_none_is_empty():
    assert sanitize(None) == ""


def test_code_fences_and_backticks_removed():
    raw = "Use ```python\nprint(1)\n``` then `x`"
    assert sanitize(raw) == "Use then x"


def test_unterminated_fence_only_loses_backticks():
    assert sanitize("``` unterminated") == "unterminated"


def test_latex_delimiters():
    raw = r"$$x^2$$ and \(a+b\) and \[c\]"
    assert sanitize(raw) == "x^2 and (a+b) and [c]"


def test_repeated_backslashes_collapse():
    assert sanitize(r"\\(x\\)") == "(x)"


# =============================================================================
# Whitespace
# =============================================================================

@pytest.mark.parametrize("raw,expected", [
    ("a\n\n\n\nb", "a\n\nb"),
    ("a   b\t\tc", "a b c"),
    ("line one   \n   line two", "line one\nline two"),
    ("para one\n \n \npara two", "para one\n\npara two"),
    ("  padded  ", "padded"),
])
def test_whitespace(raw, expected):
    assert sanitize(raw) == expected


def test_paragraph_break_preserved():
    assert sanitize("First paragraph.\n\nSecond paragraph.") == "First paragraph.\n\nSecond paragraph."


# =============================================================================
# Step-by-step formatting
# =============================================================================

def test_step_solution_formatted_and_wrapped():
    raw = "Problem: 2x=4\nStep 1: divide by 2\nStep 2: x=2\nFinal Answer: 2"
    expected_body = (
        "Problem: 2x=4\n"
        "<b>Step 1:</b> divide by 2\n"
        "<b>Step 2:</b> x=2\n"
        "<br><br><b>Final Answer:</b> 2"
    )
    assert sanitize(raw) == SOLUTION_CONTAINER_OPEN + expected_body + SOLUTION_CONTAINER_CLOSE


def test_lowercase_step_labels():
    result = sanitize("step 1 add\nStep 2 done\nFinal Answer: 3")
    assert "<b>Step 1:</b> add" in result
    assert "<b>Step 2:</b> done" in result


def test_no_final_answer_means_no_markup():
    assert sanitize("Step 1: think hard") == "Step 1: think hard"


def test_no_step_means_no_markup():
    assert sanitize("Final Answer: 42") == "Final Answer: 42"


def test_existing_container_not_wrapped_again():
    result = sanitize("<div>Step 1: x Final Answer: y</div>")
    assert result.count("<div") == 1
    assert "<b>Step 1:</b>" in result


def test_already_bold_labels_untouched():
    raw = "<b>Step 1:</b> a <br><br><b>Final Answer:</b> b"
    result = sanitize(raw)
    assert result == SOLUTION_CONTAINER_OPEN + raw + SOLUTION_CONTAINER_CLOSE


# =============================================================================
# Idempotence
# =============================================================================

SAMPLES = [
    "",
    "plain answer",
    "This question is outside my defined knowledge scope.",
    "Use ```js\ncode\n``` and `inline`",
    r"$x$ \(y\) \[z\] \\(w\\)",
    "a\n\n\n\n\nb   c\t\td",
    "Problem: 2x=4\nStep 1: divide\nStep 2: x=2\nFinal Answer: 2",
    "step 3 foo\nFinal Answer: 9 Step",
    "Step1 Final Answer:5",
    "<b>Step 1:</b> a Final Answer: b",
    "<div>Step 1: x</div> Final Answer: y",
    "Step 1 : spaced colon\nfinal answer : lower Final Answer",
    "  \n\n  Step 2:\n\n\n\nFinal Answer:   $$7$$  ",
    "``` unterminated ` Step 1 Final Answer:",
]


@pytest.mark.parametrize("raw", SAMPLES)
def test_sanitize_is_idempotent(raw):
    once = sanitize(raw)
    assert sanitize(once) == once


def test_refusal_passes_through_unchanged():
    refusal = "This question is outside my defined knowledge scope."
    assert sanitize(refusal) == refusal
