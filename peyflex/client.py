"""
Peyflex API clients.

``PeyflexClient`` and ``AsyncPeyflexClient`` expose the same endpoint methods.
The endpoint table lives once in ``_PeyflexEndpoints``; each front-end only
decides how an ``ApiRequest`` is sent.

Example:
    with PeyflexClient("my-token") as client:
        plans = client.get_data_plans("mtn_sme_data")
        client.purchase_data("mtn_sme_data", "08012345678", plans["plans"][0]["id"])
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Awaitable
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from peyflex.shared.requests import (
    create_async_client,
    create_sync_client,
    make_request,
    make_request_sync,
)
from peyflex.types import ApiRequest, ClientConfig, MeterType

if TYPE_CHECKING:
    from typing import Self

    import httpx

    from peyflex.shared.retry import RetryPolicy

logger = logging.getLogger("peyflex.client")

ResultT = TypeVar("ResultT")

ELECTRICITY_IDENTIFIER = "electricity"


class _PeyflexEndpoints(ABC, Generic[ResultT]):
    """Maps each API operation to its verb, path and payload."""

    config: ClientConfig

    @abstractmethod
    def _send(self, request: ApiRequest) -> ResultT:
        """Send a request and return the decoded body (or an awaitable of it)."""

    # User

    def get_profile(self) -> ResultT:
        """Get the authenticated user's profile."""
        return self._send(ApiRequest("GET", "user/profile"))

    def get_balance(self) -> ResultT:
        """Get the wallet balance."""
        return self._send(ApiRequest("GET", "user/balance"))

    # Airtime

    def get_airtime_networks(self) -> ResultT:
        return self._send(ApiRequest("GET", "airtime/networks"))

    def purchase_airtime(self, network: str, phone: str, amount: float) -> ResultT:
        """Top up a phone number.

        Args:
            network: Network ID (e.g. ``"mtn"``, ``"glo"``).
            phone: Recipient phone number.
            amount: Amount to top up.
        """
        return self._send(
            ApiRequest(
                "POST",
                "airtime/purchase",
                json={"network": network, "phone": phone, "amount": amount},
            )
        )

    # Data

    def get_data_networks(self) -> ResultT:
        return self._send(ApiRequest("GET", "data/networks"))

    def get_data_plans(self, network_id: str) -> ResultT:
        """List data plans for a network (e.g. ``"mtn_sme_data"``)."""
        return self._send(ApiRequest("GET", "data/plans", params={"network": network_id}))

    def purchase_data(self, network_id: str, phone: str, plan_id: str) -> ResultT:
        """Buy a data plan.

        Args:
            network_id: Network identifier.
            phone: Recipient phone number.
            plan_id: Plan identifier from :meth:`get_data_plans`.
        """
        return self._send(
            ApiRequest(
                "POST",
                "data/purchase",
                json={"network": network_id, "phone": phone, "plan": plan_id},
            )
        )

    # Cable TV

    def get_cable_providers(self) -> ResultT:
        return self._send(ApiRequest("GET", "cable/providers"))

    def verify_cable(self, provider_id: str, iuc_number: str) -> ResultT:
        """Verify an IUC/smartcard number with a provider (e.g. ``"dstv"``)."""
        return self._send(
            ApiRequest(
                "POST",
                "cable/verify",
                json={"provider": provider_id, "iuc_number": iuc_number},
            )
        )

    def purchase_cable(self, provider_id: str, iuc_number: str, plan_id: str) -> ResultT:
        """Pay for a cable subscription."""
        return self._send(
            ApiRequest(
                "POST",
                "cable/purchase",
                json={"provider": provider_id, "iuc_number": iuc_number, "plan": plan_id},
            )
        )

    # Electricity

    def get_electricity_plans(self) -> ResultT:
        """List electricity providers and plans."""
        return self._send(
            ApiRequest("GET", "electricity/plans", params={"identifier": ELECTRICITY_IDENTIFIER})
        )

    def verify_meter(
        self, provider_id: str, meter_number: str, type: MeterType = "prepaid"
    ) -> ResultT:
        """Verify a meter number.

        Args:
            provider_id: Provider ID (e.g. ``"ikeja_electric"``).
            meter_number: The meter number.
            type: ``"prepaid"`` or ``"postpaid"``.
        """
        return self._send(
            ApiRequest(
                "POST",
                "electricity/verify",
                json={
                    "identifier": ELECTRICITY_IDENTIFIER,
                    "provider": provider_id,
                    "meter_number": meter_number,
                    "type": type,
                },
            )
        )

    def purchase_electricity(
        self,
        provider_id: str,
        meter_number: str,
        amount: float,
        type: MeterType = "prepaid",
    ) -> ResultT:
        """Buy an electricity token.

        Args:
            provider_id: Provider ID.
            meter_number: The meter number.
            amount: Amount to purchase.
            type: ``"prepaid"`` or ``"postpaid"``.
        """
        return self._send(
            ApiRequest(
                "POST",
                "electricity/purchase",
                json={
                    "provider": provider_id,
                    "meter_number": meter_number,
                    "amount": amount,
                    "type": type,
                },
            )
        )


class PeyflexClient(_PeyflexEndpoints[Any]):
    """Synchronous Peyflex API client.

    Args:
        token: API token. Falls back to ``PEYFLEX_API_TOKEN``.
        base_url: API root; a trailing slash is added when missing.
        timeout: Request timeout in seconds.
        retries: Maximum retries on 5xx responses.
        transport: Replaces the network transport, e.g. ``httpx.MockTransport``.
            Retries still apply on top of it.
        retry_policy: Replaces the default exponential backoff policy.

    Raises:
        PeyflexException: If no token is available.
    """

    def __init__(
        self,
        token: str | None = None,
        *,
        base_url: str | None = None,
        timeout: float | None = None,
        retries: int | None = None,
        transport: httpx.BaseTransport | None = None,
        retry_policy: RetryPolicy | None = None,
    ) -> None:
        self.config = ClientConfig.resolve(
            token, base_url=base_url, timeout=timeout, retries=retries
        )
        self._client = create_sync_client(
            self.config, transport=transport, retry_policy=retry_policy
        )
        logger.debug("Created Peyflex client for %s", self.config.base_url)

    def _send(self, request: ApiRequest) -> Any:
        return make_request_sync(self._client, request)

    def close(self) -> None:
        """Close the underlying HTTP client."""
        self._client.close()

    def __enter__(self) -> Self:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()


class AsyncPeyflexClient(_PeyflexEndpoints[Awaitable[Any]]):
    """Asynchronous Peyflex API client.

    Takes the same arguments as :class:`PeyflexClient`; ``transport`` must be
    an ``httpx.AsyncBaseTransport``. Every endpoint method returns a coroutine.
    """

    def __init__(
        self,
        token: str | None = None,
        *,
        base_url: str | None = None,
        timeout: float | None = None,
        retries: int | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        retry_policy: RetryPolicy | None = None,
    ) -> None:
        self.config = ClientConfig.resolve(
            token, base_url=base_url, timeout=timeout, retries=retries
        )
        self._client = create_async_client(
            self.config, transport=transport, retry_policy=retry_policy
        )
        logger.debug("Created async Peyflex client for %s", self.config.base_url)

    def _send(self, request: ApiRequest) -> Awaitable[Any]:
        return make_request(self._client, request)

    async def aclose(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.aclose()
