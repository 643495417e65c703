"""
# core/prompt_builder.py

Module Contract
- Purpose: Derive the scope-enforcing system prompt for an assistant from its purpose statement.
- Inputs:
  - is_math_purpose(purpose: str) → bool
  - build_system_prompt(purpose: str, is_math_purpose: bool) → str
  - system_prompt_for(profile: AssistantProfile) → str
- Outputs:
  - System prompt text. Generic template or math template; both carry the exact SCOPE_REFUSAL contract.
- Behavior:
  - Pure derivation: identical (purpose, is_math_purpose) always yields byte-identical text.
  - The math template mandates "Problem:", numbered "Step N:" lines and a "Final Answer:" marker so the sanitizer can structure the answer.
- Side effects:
  - None.
"""

from typing import Optional

SCOPE_REFUSAL = "This question is outside my defined knowledge scope."

MATH_KEYWORDS = (
    "math",
    "algebra",
    "calculus",
    "geometry",
    "trigonometry",
    "equation",
    "solve",
    "problem",
    "mathematics",
    "arithmetic",
    "statistics",
)

GENERIC_TEMPLATE = """You are a specialized AI created by a user.
Your entire knowledge, purpose, and reasoning are strictly limited to the following description:
"{purpose}"

Behavior Rules:
1. You must ONLY answer questions that have a direct, clear, or logical connection to the description.
2. If a question is not related, partially related, vague, or outside the description, reply EXACTLY with:
   "{refusal}"
3. Do NOT use general world knowledge, imagination, or assumptions.
4. Do NOT provide opinions, examples, or advice unrelated to the given description.
5. Always remain focused on the meaning and purpose of the description.
6. Your behavior must be deterministic. If unsure about relevance, refuse with the above message.

Answer Format:
- If related: provide helpful, focused answers.
- If unrelated: reply exactly "{refusal}"
- Never apologize or justify refusals.
"""

MATH_TEMPLATE = """You are a specialized Math AI assistant. Your purpose is strictly limited to: "{purpose}"

MATH-SPECIFIC INSTRUCTIONS:
- You MUST solve math problems with clear, step-by-step explanations.
- For each math problem, follow this exact structure in plain text:

Problem: [Briefly restate and interpret the problem]
Step 1: [First step with explanation]
Step 2: [Second step with explanation]
[Continue steps as needed...]
Final Answer: [Clear final answer]

- Use simple, clean mathematical notation. Do not use LaTeX, Markdown, or code blocks.
- Explain each step clearly and concisely.
- For multiple problems, label them clearly: Problem 1, Problem 2, etc.
- If a question is not math-related, reply exactly: "{refusal}"

BEHAVIOR RULES:
1. Only answer math-related questions within your defined purpose.
2. Be deterministic. If unsure about relevance, refuse the question.
3. Never use general knowledge or assumptions outside your purpose.
4. Always provide step-by-step solutions for math problems.
5. Never apologize for refusing unrelated questions.
"""


def is_math_purpose(purpose: Optional[str]) -> bool:
    """True when the purpose statement mentions any math keyword."""
    if not purpose:
        return False
    lowered = purpose.lower()
    return any(keyword in lowered for keyword in MATH_KEYWORDS)


def build_system_prompt(purpose: Optional[str], is_math_purpose: bool) -> str:
    template = MATH_TEMPLATE if is_math_purpose else GENERIC_TEMPLATE
    return template.format(purpose=purpose or "", refusal=SCOPE_REFUSAL)


def system_prompt_for(profile) -> str:
    """Build the prompt for an AssistantProfile, classifying its purpose."""
    return build_system_prompt(profile.purpose, is_math_purpose(profile.purpose))
