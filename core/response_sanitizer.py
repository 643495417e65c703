"""
# core/response_sanitizer.py

Module Contract
- Purpose: Turn raw model text into clean, display-ready text.
- Inputs:
  - sanitize(raw_text: Optional[str]) → str
- Behavior (in order):
  1. Drop fenced code blocks, then stray backticks.
  2. Drop `$` runs; `\\(` `\\)` `\\[` `\\]` become plain brackets.
  3. Normalize whitespace: single spaces within lines, no spaces around line breaks, at most one blank line between paragraphs.
  4. Step-by-step answers (text has both "Step" and "Final Answer") get bold step/answer labels and a single styled <div> container.
- Invariants:
  - Deterministic and idempotent: sanitize(sanitize(x)) == sanitize(x).
  - Labels already emphasized are left alone; an existing <div> is never wrapped again.
- Side effects:
  - None.
"""

import re
from typing import Optional

SOLUTION_CONTAINER_OPEN = (
    "<div style='background-color: #f8f9fa; border-left: 4px solid #4285f4; "
    "padding: 12px; margin: 8px 0; border-radius: 4px;'>"
)
SOLUTION_CONTAINER_CLOSE = "</div>"

_CODE_FENCE = re.compile(r"```.*?```", re.DOTALL)
_DOLLARS = re.compile(r"\$+")
# Any number of backslashes before a bracket collapses to the bare bracket
_LATEX_BRACKET = re.compile(r"\\+([()\[\]])")
_INLINE_WS = re.compile(r"[^\S\n]+")
_WS_AROUND_NEWLINE = re.compile(r" *\n *")
_EXCESS_NEWLINES = re.compile(r"\n{3,}")

_STEP_LABEL = re.compile(r"(?<!<b>)\bStep\s*(\d+)(?:\s*:)?", re.IGNORECASE)
_FINAL_ANSWER_LABEL = re.compile(r"(?<!<b>)Final Answer\s*:", re.IGNORECASE)


def strip_code(text: str) -> str:
    text = _CODE_FENCE.sub("", text)
    return text.replace("`", "")


def strip_latex(text: str) -> str:
    text = _DOLLARS.sub("", text)
    return _LATEX_BRACKET.sub(r"\1", text)


def normalize_whitespace(text: str) -> str:
    text = _INLINE_WS.sub(" ", text)
    text = _WS_AROUND_NEWLINE.sub("\n", text)
    text = _EXCESS_NEWLINES.sub("\n\n", text)
    return text.strip()


def is_step_solution(text: str) -> bool:
    return "Step" in text and "Final Answer" in text


def format_step_solution(text: str) -> str:
    """Bold the step and final-answer labels, then wrap once in the container."""
    text = _STEP_LABEL.sub(lambda m: f"<b>Step {m.group(1)}:</b>", text)
    text = _FINAL_ANSWER_LABEL.sub("<br><br><b>Final Answer:</b>", text)
    if "<div" not in text and "<b>Step" in text:
        text = f"{SOLUTION_CONTAINER_OPEN}{text}{SOLUTION_CONTAINER_CLOSE}"
    return text


def sanitize(raw_text: Optional[str]) -> str:
    if raw_text is None:
        return ""
    text = strip_code(raw_text)
    text = strip_latex(text)
    text = normalize_whitespace(text)
    if is_step_solution(text):
        text = format_step_solution(text)
    return text.strip()
