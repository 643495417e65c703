"""
Unit tests for core/prompt_builder.py

Tests:
- Math purpose classification
- Template selection and refusal contract
- Determinism
"""

import pytest
from core.prompt_builder import (
    SCOPE_REFUSAL,
    MATH_KEYWORDS,
    build_system_prompt,
    is_math_purpose,
    system_prompt_for,
)
from storage.schema import AssistantProfile


# =============================================================================
# is_math_purpose Tests
# =============================================================================

@pytest.mark.parametrize("keyword", MATH_KEYWORDS)
def test_every_keyword_classifies_as_math(keyword):
    """Each keyword alone marks a purpose as math-oriented"""
    assert is_math_purpose(f"Help with {keyword} homework")


def test_classification_is_case_insensitive():
    assert is_math_purpose("ALGEBRA tutor for grade nine")


def test_substring_match():
    """Keywords match inside longer words (e.g. 'problems')"""
    assert is_math_purpose("Troubleshoot printer problems")


@pytest.mark.parametrize("purpose", [
    "Answer only Java programming questions",
    "Recommend vegetarian recipes",
    "",
    None,
])
def test_non_math_purposes(purpose):
    assert not is_math_purpose(purpose)


# =============================================================================
# build_system_prompt Tests
# =============================================================================

def test_generic_prompt_contains_purpose_and_refusal():
    prompt = build_system_prompt("Answer only Java programming questions", False)

    assert '"Answer only Java programming questions"' in prompt
    assert f'"{SCOPE_REFUSAL}"' in prompt
    assert "Never apologize" in prompt
    assert "general world knowledge" in prompt
    assert "Final Answer:" not in prompt


def test_math_prompt_mandates_structure():
    prompt = build_system_prompt("Solve algebra equations", True)

    assert '"Solve algebra equations"' in prompt
    assert f'"{SCOPE_REFUSAL}"' in prompt
    assert "Problem:" in prompt
    assert "Step 1:" in prompt
    assert "Step 2:" in prompt
    assert "Final Answer:" in prompt


def test_refusal_literal():
    assert SCOPE_REFUSAL == "This question is outside my defined knowledge scope."


def test_flag_selects_template_not_purpose():
    """The caller's flag wins even when the purpose reads as math"""
    assert "Final Answer:" not in build_system_prompt("Solve algebra equations", False)
    assert "Final Answer:" in build_system_prompt("Recommend recipes please", True)


@pytest.mark.parametrize("is_math", [True, False])
def test_prompt_is_deterministic(is_math):
    purpose = "Explain the rules of chess openings"
    outputs = {build_system_prompt(purpose, is_math) for _ in range(5)}
    assert len(outputs) == 1


def test_none_purpose_is_empty_description():
    assert build_system_prompt(None, False) == build_system_prompt("", False)
    assert '""' in build_system_prompt(None, False)


def test_braces_in_purpose_are_literal():
    prompt = build_system_prompt("Explain {placeholders} in Python format strings", False)
    assert "{placeholders}" in prompt


def test_system_prompt_for_profile_classifies():
    math_profile = AssistantProfile(name="Calc", purpose="Calculus derivatives only", creator="A")
    java_profile = AssistantProfile(name="Java", purpose="Answer only Java programming questions", creator="A")

    assert system_prompt_for(math_profile) == build_system_prompt(math_profile.purpose, True)
    assert system_prompt_for(java_profile) == build_system_prompt(java_profile.purpose, False)
