"""Errors raised while decoding or validating TOON."""


class ToonifyError(ValueError):
    """Base class for TOON decode/validate errors.

    Attributes:
        message: Human-readable description without location info.
        line_number: 1-based line of the offending content, if known.
        path: Dotted key path involved in the error, if any.
    """

    fatal = True
    """Whether the error stops a validation pass."""

    def __init__(
        self,
        message: str,
        *,
        line_number: int | None = None,
        path: str | None = None,
    ) -> None:
        self.message = message
        self.line_number = line_number
        self.path = path
        super().__init__(self._render())

    def _render(self) -> str:
        text = self.message
        if self.line_number is not None:
            text = f"Line {self.line_number}: {text}"
        if self.path:
            text = f"{text} (path: {self.path})"
        return text


class InvalidIndentationError(ToonifyError):
    """Indentation is not a multiple of the indent size or skips a level."""

    fatal = False


class ArrayCountMismatchError(ToonifyError):
    """Declared array length disagrees with the rows/items present."""

    fatal = False

    def __init__(self, message: str, *, expected: int, actual: int, **kwargs) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(message, **kwargs)


class PathExpansionConflictError(ToonifyError):
    """A dotted key collides with an existing key or non-object value."""

    fatal = False


class RowArityError(ToonifyError):
    """A tabular row has a different number of cells than declared fields."""

    def __init__(self, message: str, *, expected: int, actual: int, **kwargs) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(message, **kwargs)


class ScalarParseError(ToonifyError):
    """Malformed quoting or escaping in a literal."""


class StructuralParseError(ToonifyError):
    """A line does not have any recognized TOON shape."""


class UnexpectedEndOfInputError(ToonifyError):
    """The document ended while an array still expected content."""


class NestingDepthError(ToonifyError):
    """Nesting exceeds the configured maximum depth."""
