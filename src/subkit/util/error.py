"""Error formatting utilities."""

import json
import traceback
from typing import Any


def format_unknown_error(error: Any) -> str:
    """Format any error into a string representation.

    Exceptions carrying a traceback are rendered in full; dicts and lists
    as indented JSON; anything else through ``str``.
    """
    if isinstance(error, BaseException):
        if error.__traceback__:
            return ''.join(traceback.format_exception(type(error), error, error.__traceback__))
        return f"{error.__class__.__name__}: {error}"

    if isinstance(error, (dict, list)):
        try:
            return json.dumps(error, indent=2)
        except (TypeError, ValueError):
            return "Unexpected error (unserializable)"

    return str(error)
