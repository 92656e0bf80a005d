"""peyflex-python.

client for the Peyflex bills-payment API: airtime, data, cable TV and electricity.
"""

from __future__ import annotations

from .client import AsyncPeyflexClient, PeyflexClient
from .shared.exceptions import PeyflexException
from .shared.retry import ExponentialBackoff, NoRetry, RetryPolicy
from .types import ApiRequest, ClientConfig
from .version import __version__

__all__ = [
    "ApiRequest",
    "AsyncPeyflexClient",
    "ClientConfig",
    "ExponentialBackoff",
    "NoRetry",
    "PeyflexClient",
    "PeyflexException",
    "RetryPolicy",
    "__version__",
]
