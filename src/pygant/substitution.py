"""Property substitution for task attributes.

Task attribute values may reference engine properties as ``${name}``. Names may
contain dots (``${env.HOME}``). References to undefined properties are left in
place, as are values that are not strings.
"""

import re
from typing import Any, Mapping


# Pattern matches: ${name} where name is a dotted identifier
# Groups: (1) name
PLACEHOLDER_PATTERN = re.compile(r"\$\{\s*([A-Za-z_][A-Za-z0-9_.\-]*)\s*\}")


def substitute_properties(text: str, properties: Mapping[str, str]) -> str:
    """Substitute ${name} placeholders with property values.

    Args:
        text: Text containing ${name} placeholders
        properties: Property names and their string values

    Returns:
        Text with every defined placeholder replaced

    Example:
        >>> substitute_properties("${src}/main.c", {"src": "source"})
        'source/main.c'
    """
    def replace_match(match: re.Match) -> str:
        name = match.group(1)
        if name not in properties:
            return match.group(0)  # Ant leaves unknown references untouched
        return str(properties[name])

    return PLACEHOLDER_PATTERN.sub(replace_match, text)


def substitute_attributes(attributes: Mapping[str, Any], properties: Mapping[str, str]) -> dict[str, Any]:
    """Expand placeholders in every string value of a task's attribute map.

    Key order is preserved.
    """
    return {
        key: substitute_properties(value, properties) if isinstance(value, str) else value
        for key, value in attributes.items()
    }
