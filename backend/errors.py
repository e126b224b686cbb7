"""
PDSCC Error Types
Shared exception hierarchy used by flows, services and routes.
"""

from pydantic import ValidationError


class PDSCCError(Exception):
    """Base class for application errors"""


# ----- Configuration errors -----

class ConfigurationError(PDSCCError):
    """A required credential or setting is missing"""


class AINotConfiguredError(ConfigurationError):
    pass


class EmailNotConfiguredError(ConfigurationError):
    pass


# ----- External provider errors -----

class ExternalProviderError(PDSCCError):
    """An outbound call to the AI or email provider failed"""


class AIProviderError(ExternalProviderError):
    pass


class FlowValidationError(ExternalProviderError):
    """The model answered, but the answer did not match the flow's schema"""

    def __init__(self, flow_name: str, message: str):
        self.flow_name = flow_name
        super().__init__(f"{flow_name}: {message}")


class EmailSendError(ExternalProviderError):
    pass


# ----- Lookup errors -----

class NotFoundError(PDSCCError):
    """Requested record does not exist"""

    def __init__(self, kind: str, identifier):
        self.kind = kind
        self.identifier = identifier
        super().__init__(f"{kind} not found: {identifier}")


def field_errors(exc: ValidationError) -> dict:
    """
    Flatten a pydantic ValidationError into {field: [messages]}.

    Errors without a location are reported under '_form'.
    """
    errors = {}
    for err in exc.errors():
        loc = err.get('loc') or ()
        field = str(loc[0]) if loc else '_form'
        message = err.get('msg', 'Invalid value')
        # pydantic prefixes custom validator messages
        if message.startswith('Value error, '):
            message = message[len('Value error, '):]
        errors.setdefault(field, []).append(message)
    return errors


def status_for(exc: Exception) -> int:
    """HTTP status the API answers with for an application error"""
    if isinstance(exc, NotFoundError):
        return 404
    if isinstance(exc, ConfigurationError):
        return 503
    if isinstance(exc, ExternalProviderError):
        return 502
    return 500
