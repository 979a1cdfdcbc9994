"""Exceptions raised across the package.

Data-quality problems in model output never raise; only the upstream
boundary and invalid session transitions do.
"""


class SmartActionError(Exception):
    """Base class for all package errors."""


class UpstreamError(SmartActionError):
    """The language model could not produce a reply for this call."""


class LLMUnavailableError(UpstreamError):
    """No model backend is configured or reachable."""


class LLMRequestError(UpstreamError):
    """The model backend was reached but the request failed."""


class RefinementSessionError(SmartActionError):
    """Invalid transition of a refinement session."""
