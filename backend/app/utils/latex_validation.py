# File: backend/app/utils/latex_validation.py
from typing import List, NamedTuple

MIN_OUTPUT_LENGTH = 200
REQUIRED_SECTIONS = {
    "Projects": "\\section{Projects}",
    "Technical Skills": "\\section{Technical Skills}",
}


class ValidationResult(NamedTuple):
    valid: bool
    errors: List[str]


def validate_latex_output(content: str) -> ValidationResult:
    """Minimal structural checks on LaTeX returned by the model."""
    content = content or ""
    errors = []

    if len(content.strip()) < MIN_OUTPUT_LENGTH:
        errors.append("Output is too short or empty.")

    for label, marker in REQUIRED_SECTIONS.items():
        if marker not in content:
            errors.append(f"Missing {label} section.")

    return ValidationResult(valid=not errors, errors=errors)
