"""Quoting for text that crosses into AppleScript and shell contexts.

Text sent to a terminal pane crosses two quoting contexts: first the shell
line is built (paths single-quoted for the shell), then that whole line is
embedded in an AppleScript string literal. Each pass has its own function.
"""


def escape_for_applescript(text: str) -> str:
    """Escape text for the inside of an AppleScript ``"..."`` literal.

    Backslashes are doubled first, then double quotes are backslash-escaped:
    ``say "hi" \\o/`` -> ``say \\"hi\\" \\\\o/``. The caller adds the
    surrounding double quotes.
    """
    return text.replace("\\", "\\\\").replace('"', '\\"')


def escape_for_shell(text: str) -> str:
    """Escape text for the inside of a single-quoted shell word.

    Each ``'`` becomes ``'\\''`` (close quote, escaped quote, reopen):
    ``it's`` -> ``it'\\''s``. The caller adds the surrounding single quotes.
    """
    return text.replace("'", "'\\''")


def shell_quote(text: str) -> str:
    """Return text as one single-quoted shell word: ``it's`` -> ``'it'\\''s'``."""
    return f"'{escape_for_shell(text)}'"
