"""gitprovision exception classes."""


class GitProvisionError(Exception):
    """Base exception for all gitprovision errors."""

    def __init__(
        self, code: str, message: str, request_id: str | None = None
    ) -> None:
        self.code = code
        self.message = message
        self.request_id = request_id
        super().__init__(f"[{code}] {message}")


class ConfigurationError(GitProvisionError):
    """Raised when settings are invalid or missing."""

    def __init__(self, message: str) -> None:
        super().__init__("CONFIGURATION_ERROR", message)


# ============================================================================
# Resolution errors
# ============================================================================


class NoServersConfiguredError(GitProvisionError):
    """Raised in batch mode when the credential store has no servers."""

    def __init__(self, message: str = "No Git servers are configured!") -> None:
        super().__init__("NO_SERVERS_CONFIGURED", message)


class NoCredentialsConfiguredError(GitProvisionError):
    """Raised in batch mode when the chosen server has no user credentials."""

    def __init__(self, server_url: str) -> None:
        super().__init__(
            "NO_CREDENTIALS_CONFIGURED",
            f"Server {server_url} has no user auths defined",
        )
        self.server_url = server_url


class IncompleteAuthenticationError(GitProvisionError):
    """Raised when a credential is still invalid after the edit flow."""

    def __init__(
        self, message: str = "You did not properly define the user authentication"
    ) -> None:
        super().__init__("INCOMPLETE_AUTHENTICATION", message)


class ProviderConstructionError(GitProvisionError):
    """Raised when no hosting provider client can be built for a server."""

    def __init__(self, message: str) -> None:
        super().__init__("PROVIDER_CONSTRUCTION_ERROR", message)


class RepositoryNameRequiredError(GitProvisionError):
    """Raised when the resolved repository name is blank."""

    def __init__(self, message: str = "Repository name is required") -> None:
        super().__init__("REPOSITORY_NAME_REQUIRED", message)


class ValidationRejectedError(GitProvisionError):
    """Raised when the hosting provider rejects a repository name."""

    def __init__(self, message: str) -> None:
        super().__init__("VALIDATION_REJECTED", message)


class PromptCancelledError(GitProvisionError):
    """Raised when the user aborts an interactive prompt."""

    def __init__(self, message: str = "Prompt cancelled by user") -> None:
        super().__init__("PROMPT_CANCELLED", message)


class CredentialStoreError(GitProvisionError):
    """Raised when the credential store cannot be read or written."""

    def __init__(self, message: str) -> None:
        super().__init__("CREDENTIAL_STORE_ERROR", message)


# ============================================================================
# Hosting provider API errors
# ============================================================================


class AuthenticationError(GitProvisionError):
    """Raised when the hosting provider rejects the access token."""

    pass


class AuthorizationError(GitProvisionError):
    """Raised when access is denied."""

    pass


class NotFoundError(GitProvisionError):
    """Raised when a resource is not found."""

    pass


class ConflictError(GitProvisionError):
    """Raised on conflicts (repository already exists, etc.)."""

    pass


class RateLimitedError(GitProvisionError):
    """Raised when rate limited."""

    def __init__(
        self,
        code: str,
        message: str,
        retry_after: int,
        request_id: str | None = None,
    ) -> None:
        super().__init__(code, message, request_id)
        self.retry_after = retry_after


class ValidationError(GitProvisionError):
    """Raised when the hosting provider rejects request parameters."""

    pass


class ServerError(GitProvisionError):
    """Raised on server errors (5xx) and connection failures."""

    pass
