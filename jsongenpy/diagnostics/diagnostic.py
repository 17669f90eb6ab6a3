"""Diagnostics core types."""

from dataclasses import dataclass

from jsongenpy.diagnostics.codes import DiagnosticSpec, Severity
from jsongenpy.text import Position, TextRange


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """Structured diagnostic emitted by the lexer/parser."""

    code: str
    message: str
    range: TextRange
    position: Position
    severity: Severity = "error"
    hint: str | None = None
    category: str | None = None
    source_path: str = "<memory>"

    @staticmethod
    def from_spec(
        spec: DiagnosticSpec,
        *,
        range: TextRange,
        position: Position,
        detail: str | None = None,
        source_path: str = "<memory>",
    ) -> "Diagnostic":
        message = spec.message if detail is None else f"{spec.message}: {detail}"
        return Diagnostic(
            code=spec.code,
            message=message,
            range=range,
            position=position,
            severity=spec.severity,
            hint=spec.hint,
            category=spec.category,
            source_path=source_path,
        )

    @property
    def line(self) -> int:
        return self.position.line

    @property
    def column(self) -> int:
        return self.position.column

    def render(self) -> str:
        text = f"{self.source_path}:{self.position}: {self.severity}[{self.code}]: {self.message}"
        if self.hint:
            text += f"\n  hint: {self.hint}"
        return text
