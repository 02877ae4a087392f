"""
Errors collected by the request agent.

Configuration errors are never raised out of the builder methods. They are
appended to the pending request and handed back by ``Agent.end()``.
"""


class AgentError(Exception):
    """Base exception for request agent errors."""
    pass


class ContentTypeError(AgentError):
    """Unknown content type alias passed to ``set_type``."""
    pass


class QueryError(AgentError):
    """Query content could not be turned into query parameters."""
    pass


class MarshalError(AgentError):
    """Body content could not be serialized to JSON."""
    pass


class UnsupportedContentError(AgentError):
    """Body content of a type ``send`` does not understand."""
    pass


class ProxyError(AgentError):
    """Proxy URL could not be parsed."""
    pass


class TimeoutConfigError(AgentError):
    """Invalid timeout value."""
    pass


class TLSConfigError(AgentError):
    """Invalid TLS configuration."""
    pass


class NoMethodError(AgentError):
    """Dispatch attempted before any verb was set."""
    pass


class RedirectError(AgentError):
    """Raised by redirect policies to stop following a redirect."""
    pass
