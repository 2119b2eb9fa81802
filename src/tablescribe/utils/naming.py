"""
Name casing utilities.

Column and table names are stored snake_cased in the store while result
aliases and entity attributes are camelCased. These helpers convert between
the two forms.
"""

import re

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])([A-Z])")


def camel_to_snake(name: str) -> str:
    """
    Convert a camelCased name to snake_case.

    Names that are already snake_cased are returned unchanged.

    Examples:
        >>> camel_to_snake("userId")
        'user_id'
        >>> camel_to_snake("created_at")
        'created_at'
        >>> camel_to_snake("UserRoles")
        'user_roles'
    """
    return _CAMEL_BOUNDARY.sub(r"_\1", name).lower()


def snake_to_camel(name: str) -> str:
    """
    Convert a snake_cased name to camelCase.

    Examples:
        >>> snake_to_camel("user_id")
        'userId'
        >>> snake_to_camel("name")
        'name'
        >>> snake_to_camel("app_user_roles")
        'appUserRoles'
    """
    head, *rest = name.split("_")
    return head + "".join(part[:1].upper() + part[1:] for part in rest)
