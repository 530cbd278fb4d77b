"""
Opener - Argument escaping.
Quotes arguments for a POSIX sh command line.
"""
import re
from typing import Iterable

# ECMAScript \s, pinned so quoting does not depend on Python's Unicode whitespace table
WHITESPACE = "\t\n\v\f\r \u00a0\u1680\u2000-\u200a\u2028\u2029\u202f\u205f\u3000\ufeff"
SHELL_SPECIAL = re.compile("[" + WHITESPACE + r"""\"'$`\\!*?(){}\[\]<>|&;]""")


def escape_shell_arg(arg: str) -> str:
    """
    Wrap `arg` in double quotes if it holds whitespace or a shell
    metacharacter, escaping backslashes and then double quotes inside it.
    Anything else (including "") is returned as is.
    """
    if not SHELL_SPECIAL.search(arg):
        return arg
    inner = arg.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{inner}"'


def build_command_line(command: str, args: Iterable[str]) -> str:
    # command itself is never quoted
    return " ".join([command, *(escape_shell_arg(a) for a in args)])
