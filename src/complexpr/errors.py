"""
Error types for complexpr compilation and configuration.
"""

from dataclasses import dataclass


class ComplexprError(Exception):
    """Base exception for all complexpr errors."""

    def __init__(self, message: str, context: "SourceContext | None" = None):
        self.message = message
        self.context = context
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format error message with context if available."""
        if self.context:
            return f"{self.message}\n{self.context.format()}"
        return self.message


class CompileError(ComplexprError):
    """
    Raised when an expression cannot be compiled.

    Compilation is all or nothing: no partially compiled tree is ever
    returned alongside this error.
    """

    pass


class ExpressionSyntaxError(CompileError):
    """
    Raised when the expression text is not valid.

    Examples:
    - Unknown character or identifier
    - Unexpected token
    - Missing closing parenthesis
    - Wrong argument count for a call
    - Trailing input after a complete expression

    ``offset`` is the cursor position just past the offending token and is
    never less than 1.
    """

    def __init__(self, message: str, offset: int, source: str | None = None):
        self.offset = max(offset, 1)
        context = SourceContext(source, self.offset) if source is not None else None
        super().__init__(message, context)


class ExpressionDepthError(ExpressionSyntaxError):
    """Raised when nesting exceeds the configured maximum depth."""

    pass


class AllocationFailure(CompileError):
    """Raised when memory runs out while building the expression tree."""

    pass


class ConfigError(ComplexprError):
    """Raised when a configuration file holds invalid values."""

    pass


@dataclass
class SourceContext:
    """
    Location of a syntax error inside the expression text.

    Attributes:
        source: The full expression text
        offset: 1-based cursor position reported by the compiler
    """

    source: str
    offset: int

    def format(self) -> str:
        """
        Format the source with a caret under the failing position.

        Returns:
            Two lines: the expression and a marker line
        """
        column = min(self.offset, len(self.source)) - 1
        marker = " " * max(column, 0) + "^"
        return f"  {self.source}\n  {marker}"
