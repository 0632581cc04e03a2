# Environment variable expansion utilities
import os
import re
import warnings
from collections.abc import Mapping

from mcpallete.errors import InvalidReferenceError

# ABOUTME: Matches ${NAME} (anything up to the first closing brace) or $IDENT
# ABOUTME: $ followed by a digit, an unterminated ${ or any other char is not a token
ENV_VAR_PATTERN = re.compile(r"\$(?:\{(?P<braced>[^}]*)\}|(?P<bare>[A-Za-z_][A-Za-z0-9_]*))")


def find_env_refs(value: str) -> list[str]:
    """Return variable names referenced in value, in order of appearance.

    Examples:
        >>> find_env_refs("$HOME/${PROJECT}/$HOME")
        ['HOME', 'PROJECT']
    """
    names: list[str] = []
    for match in ENV_VAR_PATTERN.finditer(value):
        name = match.group("bare") or match.group("braced")
        if name and name not in names:
            names.append(name)
    return names


def expand_env_vars(
    value: str,
    env: Mapping[str, str] | None = None,
    missing: list[str] | None = None,
) -> str:
    """Expand $VAR and ${VAR} references in value.

    ABOUTME: Single pass, substituted values are never rescanned
    ABOUTME: Unknown variables are kept verbatim and reported, never dropped
    ABOUTME: Reports go to the missing list when given, otherwise to warnings

    Args:
        value: String potentially containing variable references
        env: Variable lookup (defaults to os.environ)
        missing: Optional list collecting names of unset variables

    Returns:
        String with known variables expanded

    Raises:
        InvalidReferenceError: If value contains an empty ${} reference

    Examples:
        >>> expand_env_vars("$A-${B}", {"A": "x", "B": "y"})
        'x-y'
        >>> expand_env_vars("price: $5", {})
        'price: $5'
    """
    lookup = os.environ if env is None else env

    def replace_var(match: re.Match[str]) -> str:
        var_name = match.group("bare")
        if var_name is None:
            var_name = match.group("braced")
            if not var_name:
                raise InvalidReferenceError(f"Empty variable reference '${{}}' in {value!r}")

        if var_name in lookup:
            return lookup[var_name]

        if missing is not None:
            missing.append(var_name)
        else:
            warnings.warn(
                f"Environment variable '{var_name}' not found, keeping original",
                UserWarning,
                stacklevel=3,
            )
        return match.group(0)

    return ENV_VAR_PATTERN.sub(replace_var, value)
