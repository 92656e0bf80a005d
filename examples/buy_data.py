"""Buy the cheapest data plan for a phone number.

Reads the token from PEYFLEX_API_TOKEN (or ~/.peyflex/.env).

Run `python examples/buy_data.py mtn_sme_data 08012345678`.
"""

from __future__ import annotations

import asyncio
import logging
import sys

from peyflex import AsyncPeyflexClient, PeyflexException


async def main(network: str, phone: str) -> None:
    async with AsyncPeyflexClient() as client:
        balance = await client.get_balance()
        print(f"Balance: {balance}")

        plans = await client.get_data_plans(network)
        cheapest = min(
            plans.get("plans", []), key=lambda p: float(p.get("amount", 0)), default=None
        )
        if cheapest is None:
            print(f"No data plans available for {network}")
            return
        print(f"Buying {cheapest.get('name', cheapest['id'])}")

        try:
            receipt = await client.purchase_data(network, phone, cheapest["id"])
        except PeyflexException as e:
            print(e.describe())
            return
        print(receipt)


if __name__ == "__main__":
    logging.basicConfig(level=logging.DEBUG)
    asyncio.run(main(sys.argv[1], sys.argv[2]))
