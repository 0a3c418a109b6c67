"""
StarAPI Request Repeater

Sends ad-hoc HTTP requests and runs saved endpoints.
"""

from .editor import EndpointFormatter, EndpointParser
from .executor import RequestExecutor
from .session import RepeaterSession

__all__ = [
    "EndpointFormatter",
    "EndpointParser",
    "RequestExecutor",
    "RepeaterSession",
]
