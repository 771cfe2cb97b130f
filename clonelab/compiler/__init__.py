from clonelab.compiler.mermaid import generate_mermaid
from clonelab.compiler.parser import parse_question_bank_yaml
from clonelab.compiler.validator import format_errors, validate_questions, validate_status_graph

__all__ = [
    "format_errors",
    "generate_mermaid",
    "parse_question_bank_yaml",
    "validate_questions",
    "validate_status_graph",
]
