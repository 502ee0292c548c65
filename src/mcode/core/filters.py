"""Extension allow-list parsing and matching."""

from __future__ import annotations

from collections.abc import Iterable


def parse_extensions(allow_list: str | Iterable[str]) -> tuple[str, ...]:
    """
    Parse an allow-list into normalized extension tokens.

    Accepts the comma separated form used on the command line ("avi, mpg")
    or an iterable of tokens. Surrounding whitespace and one leading dot are
    dropped, empty tokens are ignored. Case is preserved.
    """
    tokens = allow_list.split(",") if isinstance(allow_list, str) else allow_list

    parsed = []
    for token in tokens:
        token = str(token).strip()  # noqa: PLW2901
        if token.startswith("."):
            token = token[1:]  # noqa: PLW2901
        if token:
            parsed.append(token)
    return tuple(parsed)


def is_eligible(extension: str, allow_list: str | Iterable[str]) -> bool:
    """Check whether ``extension`` is in the allow-list, ignoring case."""
    wanted = extension.casefold()
    return any(token.casefold() == wanted for token in parse_extensions(allow_list))
