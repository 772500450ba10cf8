"""
Property-based tests for gitprovision logging.

Feature: gitprovision-logging
"""

import io
import logging

from hypothesis import assume, given, settings
from hypothesis import strategies as st

from gitprovision.logging import (
    configure_logging,
    get_logger,
    log_http_request,
    log_http_response,
    log_resolution_stage,
    mask_sensitive_data,
    mask_token,
    safe_log_dict,
)

# Strategies for generating test data
token_body_strategy = st.text(
    alphabet=st.sampled_from("ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789"),
    min_size=16,
    max_size=40,
)

username_strategy = st.text(
    alphabet=st.characters(whitelist_categories=("Lu", "Ll", "Nd"), whitelist_characters="-_"),
    min_size=1,
    max_size=30,
)


def capture(logger_name: str) -> io.StringIO:
    """Route DEBUG output of logger_name into a buffer."""
    log_buffer = io.StringIO()
    handler = logging.StreamHandler(log_buffer)
    handler.setLevel(logging.DEBUG)
    logger = logging.getLogger(logger_name)
    logger.setLevel(logging.DEBUG)
    logger.handlers = [handler]
    return log_buffer


@given(body=token_body_strategy, prefix=st.sampled_from(["ghp", "github_pat", "glpat"]))
@settings(max_examples=100)
def test_property_personal_access_tokens_masked(body: str, prefix: str) -> None:
    """Personal access tokens never survive mask_sensitive_data."""
    token = f"{prefix}_{body}"

    masked = mask_sensitive_data(f"cloning with {token} now")

    assert token not in masked
    assert "[TOKEN_REDACTED]" in masked


@given(token=token_body_strategy, scheme=st.sampled_from(["Bearer", "token", "Basic"]))
@settings(max_examples=100)
def test_property_authorization_values_masked(token: str, scheme: str) -> None:
    masked = mask_sensitive_data(f"Authorization: {scheme} {token}")

    assert token not in masked
    assert f"{scheme} [REDACTED]" in masked


@given(token=st.text(min_size=9, max_size=80))
@settings(max_examples=100)
def test_property_mask_token_keeps_only_suffix(token: str) -> None:
    """mask_token shows at most the last four characters."""
    masked = mask_token(token)

    assert masked == f"****{token[-4:]}"
    assert token not in masked


def test_mask_token_short_and_empty() -> None:
    assert mask_token("") == "[EMPTY]"
    assert mask_token(None) == "[EMPTY]"
    assert mask_token("abcd1234") == "[REDACTED]"


@given(username=username_strategy, token=token_body_strategy)
@settings(max_examples=100)
def test_property_safe_log_dict_masks_credentials(username: str, token: str) -> None:
    """Credential payloads keep the username but never the token."""
    assume(token not in username)
    data = {
        "username": username,
        "apiToken": token,
        "servers": [{"users": [{"username": username, "api_token": token}]}],
    }

    result = safe_log_dict(data)

    assert result["username"] == username
    assert result["apiToken"] == "[REDACTED]"
    assert result["servers"][0]["users"][0]["api_token"] == "[REDACTED]"
    assert token not in str(result)


@given(token=token_body_strategy)
@settings(max_examples=100)
def test_property_log_http_request_no_token(token: str) -> None:
    """Request logs never contain the access token from the headers."""
    log_buffer = capture("gitprovision.http")

    log_http_request(
        "POST",
        "https://api.github.com/user/repos",
        headers={"Authorization": f"Bearer {token}", "PRIVATE-TOKEN": token},
        body={"name": "myapp", "private": True},
    )

    log_output = log_buffer.getvalue()
    assert "POST https://api.github.com/user/repos" in log_output
    assert "'name': 'myapp'" in log_output
    assert token not in log_output


@given(status_code=st.integers(min_value=200, max_value=599), token=token_body_strategy)
@settings(max_examples=100)
def test_property_log_http_response_no_token(status_code: int, token: str) -> None:
    log_buffer = capture("gitprovision.http")

    log_http_response(status_code, "https://api.github.com/user", body={"token": token}, elapsed_ms=12.5)

    log_output = log_buffer.getvalue()
    assert f"Response {status_code} from https://api.github.com/user" in log_output
    assert "elapsed=12.50ms" in log_output
    assert token not in log_output


def test_log_http_response_lists_show_item_count() -> None:
    log_buffer = capture("gitprovision.http")

    log_http_response(200, "https://api.github.com/user/orgs", body=[{"login": "acme"}, {"login": "globex"}])

    log_output = log_buffer.getvalue()
    assert "items=2" in log_output
    assert "acme" not in log_output


def test_log_resolution_stage() -> None:
    log_buffer = capture("gitprovision.resolver")

    log_resolution_stage("CredentialResolved", username="alice", api_token="ghp_secretsecretsecret")

    log_output = log_buffer.getvalue()
    assert log_output.startswith("CredentialResolved | username=alice")
    assert "ghp_secretsecretsecret" not in log_output


def test_configure_logging_sets_levels() -> None:
    """configure_logging sets package, HTTP and resolver levels."""
    configure_logging(
        level=logging.WARNING,
        http_level=logging.DEBUG,
        resolver_level=logging.ERROR,
        handler=logging.NullHandler(),
    )

    assert get_logger().level == logging.WARNING
    assert get_logger("http").level == logging.DEBUG
    assert get_logger("resolver").level == logging.ERROR


def test_get_logger_returns_correct_loggers() -> None:
    assert get_logger().name == "gitprovision"
    assert get_logger("http").name == "gitprovision.http"
    assert get_logger("auth").name == "gitprovision.auth"


def test_mask_sensitive_data_preserves_non_sensitive() -> None:
    text = "Resolved repository acme/myapp on https://github.com"
    assert mask_sensitive_data(text) == text
