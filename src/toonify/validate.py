"""Conformance checking for TOON documents."""

import logging
from collections.abc import Iterable

from .decode import decode_with_reporter
from .errors import ToonifyError
from .types import DecodeOptions

logger = logging.getLogger(__name__)


def validate(text: str, options: DecodeOptions | None = None) -> list[ToonifyError]:
    """
    Check a TOON document and collect every violation found.

    Non-fatal violations (indentation, array counts, path expansion
    conflicts) are accumulated and checking continues. The first fatal
    error ends the pass and is the last entry of the result.

    Args:
        text: The TOON-formatted string.
        options: Decoding options; ``strict`` controls which checks apply.

    Returns:
        The violations in document order. Empty when the document is valid.
    """
    return validate_lines(text.split("\n"), options)


def validate_lines(
    lines: Iterable[str], options: DecodeOptions | None = None
) -> list[ToonifyError]:
    """Validate pre-split lines. See ``validate``."""
    opts = options or DecodeOptions()
    errors: list[ToonifyError] = []

    def collect(error: ToonifyError) -> None:
        logger.debug("Collected violation: %s", error)
        errors.append(error)

    fatal = None
    try:
        decode_with_reporter(lines, opts, collect)
    except ToonifyError as exc:
        logger.debug("Validation stopped: %s", exc)
        fatal = exc

    # Indentation is checked before the structural pass; restore document order
    errors.sort(key=lambda error: error.line_number or 0)
    if fatal is not None:
        errors.append(fatal)
    return errors


def is_valid(text: str, options: DecodeOptions | None = None) -> bool:
    """Return True if ``text`` has no violations."""
    return not validate(text, options)
