"""Exception classes for Bicep type resolution."""


class BicepSchemaError(Exception):
    """Base exception for Bicep schema resolution errors."""

    code = "OPERATION_FAILED"


class RemoteFetchError(BicepSchemaError):
    """Raised when the type store answers with a non-success status."""

    code = "REMOTE_FETCH_FAILED"

    def __init__(self, url: str, status_code: int | None = None, reason: str | None = None):
        self.url = url
        self.status_code = status_code
        if status_code is not None:
            message = f"Failed to fetch {url}. Status code: {status_code}"
        else:
            message = f"Failed to fetch {url}: {reason or 'transport error'}"
        super().__init__(message)


class TypeParseError(BicepSchemaError):
    """Raised when a fetched document does not have the expected shape."""

    code = "PARSE_ERROR"

    def __init__(self, message: str, url: str | None = None):
        self.url = url
        super().__init__(message)


class InvalidReferenceError(BicepSchemaError):
    """Raised when a reference points past the end of its type file."""

    code = "INVALID_REFERENCE"

    def __init__(self, reference, type_count: int):
        self.reference = reference
        self.type_count = type_count
        super().__init__(
            f"Unable to locate type at index {reference.index} in \"{reference.relative_path}\" "
            f"({type_count} types available)"
        )


class TypeMismatchError(BicepSchemaError):
    """Raised when a resolved type is not of the kind the caller asked for."""

    code = "TYPE_MISMATCH"

    def __init__(self, reference, expected: str, actual: str):
        self.reference = reference
        self.expected = expected
        self.actual = actual
        super().__init__(f"Type found at reference {reference} is not a {expected} (found {actual})")


class UnknownResourceTypeError(BicepSchemaError):
    """Raised when a resource type is not listed in the type index."""

    code = "NOT_FOUND"

    def __init__(self, resource_type: str):
        self.resource_type = resource_type
        super().__init__(f"Resource type '{resource_type}' not found in the type index")


class UnknownApiVersionError(BicepSchemaError):
    """Raised when a resource type has no entry for the requested API version."""

    code = "NOT_FOUND"

    def __init__(self, resource_type: str, api_version: str, available: list[str] | None = None):
        self.resource_type = resource_type
        self.api_version = api_version
        self.available = available or []
        message = f"API version '{api_version}' not found for resource type '{resource_type}'"
        if self.available:
            message += f". Available versions: {', '.join(self.available)}"
        super().__init__(message)


class NoVersionsAvailableError(BicepSchemaError):
    """Raised when version selection is asked to choose from nothing."""

    code = "NO_VERSIONS"

    def __init__(self, message: str = "No API versions available to select from"):
        super().__init__(message)


class InvalidApiVersionError(BicepSchemaError):
    """Raised when an API version string is not in YYYY-MM-DD[-suffix] form."""

    code = "INVALID_INPUT"

    def __init__(self, api_version: str):
        self.api_version = api_version
        super().__init__(f"Invalid API version '{api_version}'. Expected format YYYY-MM-DD or YYYY-MM-DD-preview")
