"""Text helpers shared by the harness, the CLI and the scenarios."""

import json
import random
import re

# Matches ANSI escape sequences as emitted by chalk and friends
_ANSI_PATTERN = re.compile(
    r"[\u001b\u009b][\[()#;?]*(?:[0-9]{1,4}(?:;[0-9]{0,4})*)?[0-9A-ORZcf-nqry=><]"
)

# chalk's bold open/close codes
BOLD_OPEN = "\u001b[1m"
BOLD_CLOSE = "\u001b[22m"


def uniq(prefix: str) -> str:
    """Return `prefix` followed by a random 7-digit number."""
    return f"{prefix}{random.randint(1000000, 9999999)}"


def bold(text: str) -> str:
    """Render text bold the way the tool's own terminal output does."""
    return f"{BOLD_OPEN}{text}{BOLD_CLOSE}"


def strip_console_colors(text: str) -> str:
    return _ANSI_PATTERN.sub("", text)


def section_between(lines: list[str], start: str, end: str) -> list[str]:
    """Lines strictly between the first line containing `start` and the
    first line after it containing `end`.

    Returns an empty list when either delimiter is missing.
    """
    start_index = next((i for i, line in enumerate(lines) if start in line), None)
    if start_index is None:
        return []
    for end_index in range(start_index + 1, len(lines)):
        if end in lines[end_index]:
            return lines[start_index + 1 : end_index]
    return []


def contains_emphasized(lines: list[str], text: str) -> bool:
    """Whether any line shows `text`, bold when colors are enabled.

    Output captured with colors disabled carries no escape codes, so the
    plain name is accepted once escapes are stripped.
    """
    for line in lines:
        if bold(text) in line:
            return True
        if text in strip_console_colors(line).split():
            return True
    return False


def parse_env_overrides(pairs: tuple[str, ...]) -> dict[str, str]:
    """Parse KEY=VALUE strings into an environment mapping.

    Args:
        pairs: Tuple of KEY=VALUE strings

    Returns:
        Dictionary of environment overrides
    """
    env: dict[str, str] = {}
    for pair in pairs:
        if "=" not in pair:
            raise ValueError(f"Invalid env format: {pair}. Expected KEY=VALUE")
        key, value = pair.split("=", 1)
        if not key:
            raise ValueError(f"Invalid env format: {pair}. Empty key")
        env[key] = value
    return env


def to_json(data: object) -> str:
    """Serialize a document the way fixture files are written."""
    return json.dumps(data, indent=2)
