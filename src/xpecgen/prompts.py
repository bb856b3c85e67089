"""Prompt templates for the three pipeline roles.

Inputs are inserted verbatim. Nothing is escaped, so a spec or a piece of code
can steer the model; callers own their inputs.
"""
from __future__ import annotations

import re

ARCHITECT_TEMPLATE = """\
CONTEXT / SPECIFICATION:
{spec}
TASK: Implement the user request: "{prompt}".
OUTPUT: Return ONLY the code/text content.
"""

AUDITOR_TEMPLATE = """\
SPECIFICATION:
{spec}
TASK: Fix any violations of the SPEC in the provided CODE.
OUTPUT: Return the FIXED code ONLY.
CODE:
{code}
"""

REVIEWER_TEMPLATE = """\
CODE REVIEW RULES (STYLE GUIDE):
{rules}

ROLE: You are a Senior Code Reviewer.
TASK: Refactor the provided CODE to strictly follow the REVIEW RULES.

ACTIONS:
- Fix naming conventions.
- Optimize imports.
- Improve comments/docs if requested.
- Do NOT change the business logic, only the style/structure.

OUTPUT: Return the REFACTORED code ONLY.
CODE:
{code}
"""

# One pass over the template only: braces or placeholders inside the inserted
# text are left alone.
_PLACEHOLDER = re.compile(r"\{(spec|prompt|code|rules)\}")

def _render(template: str, **values: str) -> str:
    return _PLACEHOLDER.sub(lambda m: values[m.group(1)], template)

def render_architect(prompt: str, spec: str) -> str:
    return _render(ARCHITECT_TEMPLATE, spec=spec, prompt=prompt)

def render_auditor(code: str, spec: str) -> str:
    return _render(AUDITOR_TEMPLATE, spec=spec, code=code)

def render_reviewer(code: str, rules: str) -> str:
    return _render(REVIEWER_TEMPLATE, rules=rules, code=code)
