#!/usr/bin/env python3
"""
Example: Using the PMS Gateway router

This script demonstrates how to:
1. Browse the provider catalogue
2. Test a provider connection before saving it
3. Register hotel connections with the router
4. Read canonical data through the unified API
"""

import asyncio
import os
from datetime import date, timedelta

from pms_gateway import (
    AvailabilityParams,
    Connection,
    Environment,
    PMSError,
    ReservationParams,
    ReservationStatus,
    find_providers_with_capability,
    get_provider_metadata,
    get_router,
    get_total_market_coverage,
    list_providers,
)


async def main():
    """Walk through the gateway's main operations"""

    print("=== PMS Gateway Demo ===\n")

    # 1. Provider catalogue
    print("Supported providers:")
    for provider in list_providers():
        metadata = get_provider_metadata(provider)
        print(f"  - {provider}: {metadata.name} [{metadata.status.value}] {metadata.region}, {metadata.market_share}%")
    print(f"\nCombined market coverage: {get_total_market_coverage()}%")
    print(f"Providers without a rate catalogue: {sorted(set(list_providers()) - set(find_providers_with_capability('rates')))}")

    router = get_router()
    try:
        # 2. Test a connection; with no credentials this resolves to the stub
        print("\n=== Connection test ===")
        apaleo_credentials = {
            "client_id": os.getenv("APALEO_CLIENT_ID"),
            "client_secret": os.getenv("APALEO_CLIENT_SECRET"),
            "property_id": os.getenv("APALEO_PROPERTY_ID", "DEMO01"),
        }
        result = await router.test_connection("apaleo", apaleo_credentials, Environment.PRODUCTION)
        print(f"{'OK' if result.success else 'FAILED'}: {result.message}")

        # 3. Register connections
        router.register_connection(
            Connection(id="conn_demo_1", hotel_id="hotel_demo_1", provider_type="apaleo", credentials=apaleo_credentials)
        )
        router.register_connection(
            Connection(id="conn_demo_2", hotel_id="hotel_demo_2", provider_type="stub", credentials={"hotel_id": "hotel_demo_2"})
        )

        # 4. Unified reads
        for hotel_id in ("hotel_demo_1", "hotel_demo_2"):
            print(f"\n=== {hotel_id} ===")
            try:
                config = await router.get_configuration(hotel_id)
                print(f"{config.name} ({config.timezone}, {config.currency})")

                today = date.today()
                availability = await router.get_availability(
                    hotel_id, AvailabilityParams(start_date=today, end_date=today + timedelta(days=3))
                )
                for record in availability[:5]:
                    print(f"  {record.date} {record.room_type_id}: {record.available} left at {record.currency} {record.rate}")

                reservations = await router.get_reservations(
                    hotel_id, ReservationParams(start_date=today, status=ReservationStatus.CONFIRMED)
                )
                print(f"  Confirmed reservations from today: {len(reservations)}")
            except PMSError as e:
                print(f"  Error from {e.provider or 'gateway'}: {e.message}")

        # 5. Error handling
        print("\n=== Error handling ===")
        try:
            await router.get_rates("hotel_unknown")
        except PMSError as e:
            print(f"Expected error: {e}")
    finally:
        await router.close()

    print("\n=== Demo Complete ===")


if __name__ == "__main__":
    asyncio.run(main())
