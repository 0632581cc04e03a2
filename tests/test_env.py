# Tests for environment variable expansion
import warnings

import pytest

from mcpallete.errors import InvalidReferenceError
from mcpallete.utils.env import ENV_VAR_PATTERN, expand_env_vars, find_env_refs


def test_expand_bare_and_braced():
    """Test both $VAR and ${VAR} forms in one string."""
    assert expand_env_vars("$A-${B}", {"A": "x", "B": "y"}) == "x-y"


def test_expand_uses_os_environ_by_default(monkeypatch):
    """Test that the process environment is the default lookup."""
    monkeypatch.setenv("MCPALLETE_TEST_HOME", "/home/user")

    result = expand_env_vars("${MCPALLETE_TEST_HOME}/projects")
    assert result == "/home/user/projects"


def test_bare_name_is_longest_identifier_run():
    """Test that $IDENT stops at the first non-identifier character."""
    variables = {"USER": "alice", "USER_DIR": "/u"}

    assert expand_env_vars("$USER_DIR/x", variables) == "/u/x"
    assert expand_env_vars("$USER.txt", variables) == "alice.txt"
    assert expand_env_vars("/path/$USER/files", variables) == "/path/alice/files"


def test_braced_name_allows_any_characters():
    """Test that ${...} takes everything up to the closing brace."""
    assert expand_env_vars("${WITH-DASH}", {"WITH-DASH": "ok"}) == "ok"


def test_missing_var_kept_and_collected():
    """Test that unset variables stay verbatim and are reported."""
    missing: list[str] = []

    result = expand_env_vars("$UNSET and ${ALSO_UNSET}", {}, missing)

    assert result == "$UNSET and ${ALSO_UNSET}"
    assert missing == ["UNSET", "ALSO_UNSET"]


def test_missing_var_warns_without_collector():
    """Test that a warning is issued when no missing list is passed."""
    with warnings.catch_warnings(record=True) as w:
        warnings.simplefilter("always")
        result = expand_env_vars("command ${MISSING_VAR} arg", {})

    assert result == "command ${MISSING_VAR} arg"
    assert len(w) == 1
    assert "MISSING_VAR" in str(w[0].message)
    assert "not found" in str(w[0].message)


def test_dollar_digit_is_literal():
    """Test that $ followed by a digit is not a variable."""
    missing: list[str] = []

    assert expand_env_vars("price: $5", {}, missing) == "price: $5"
    assert missing == []


@pytest.mark.parametrize("value", ["$", "cost $", "a $ b", "$-x", "${UNTERMINATED", "$$"])
def test_literal_dollar_passes_through(value):
    """Test that a $ not starting a token is kept unchanged."""
    missing: list[str] = []

    assert expand_env_vars(value, {}, missing) == value
    assert missing == []


def test_empty_braced_name_is_error():
    """Test that ${} is rejected."""
    with pytest.raises(InvalidReferenceError):
        expand_env_vars("x${}y", {})


def test_single_pass_no_recursive_expansion():
    """Test that substituted values are not scanned again."""
    variables = {"A": "$B", "B": "boom", "SELF": "$SELF"}

    assert expand_env_vars("$A", variables) == "$B"
    assert expand_env_vars("${SELF}", variables) == "$SELF"


def test_expansion_idempotent_on_token_free_output():
    """Test that expanding an already-expanded string changes nothing."""
    variables = {"HOME": "/home/user", "TOKEN": "t0k"}
    once = expand_env_vars("$HOME/bin --token=${TOKEN}", variables)

    assert once == "/home/user/bin --token=t0k"
    assert expand_env_vars(once, variables) == once


def test_value_with_regex_specials_inserted_verbatim():
    """Test that backslashes and group refs in values are not interpreted."""
    variables = {"P": r"C:\new\1"}

    assert expand_env_vars("$P", variables) == r"C:\new\1"


def test_empty_string():
    """Test empty string handling."""
    assert expand_env_vars("", {}) == ""


def test_find_env_refs_order_and_dedup():
    """Test listing referenced variables."""
    assert find_env_refs("$HOME/${PROJECT}/$HOME $5 ${}") == ["HOME", "PROJECT"]


def test_pattern_rejects_digit_start():
    """Test regex pattern doesn't match $ followed by a digit."""
    assert ENV_VAR_PATTERN.search("$1abc") is None
