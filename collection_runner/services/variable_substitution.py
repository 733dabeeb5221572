"""
Variable substitution service for replacing {{variable}} placeholders.

Placeholders are replaced in the raw collection text before it is parsed,
using the environment snapshot taken at startup.
"""

import logging
import re
from typing import Tuple, List


logger = logging.getLogger(__name__)

# Pattern to match {{variable_name}} placeholders (non-greedy)
VARIABLE_PATTERN = re.compile(r'\{\{(.*?)\}\}')


def substitute(template: str, variables: dict[str, str]) -> Tuple[str, List[str]]:
    """
    Replace variable placeholders in a template with their values.

    A variable that is undefined or set to an empty string keeps its
    placeholder and is reported as unmatched.

    Args:
        template: String containing {{variable}} placeholders
        variables: Dictionary mapping variable names to their values

    Returns:
        Tuple of (substituted string, list of unmatched variable names)

    Example:
        >>> substitute("Hello {{name}}", {"name": "World"})
        ('Hello World', [])
        >>> substitute("Hello {{name}}", {"name": ""})
        ('Hello {{name}}', ['name'])
    """
    if not template:
        return template, []

    unmatched: List[str] = []

    def replace_match(match: re.Match) -> str:
        var_name = match.group(1)
        value = variables.get(var_name)
        if value:
            return value
        logger.warning("Environment variable not found: %s", var_name)
        unmatched.append(var_name)
        return match.group(0)  # Keep original placeholder

    result = VARIABLE_PATTERN.sub(replace_match, template)
    return result, unmatched
