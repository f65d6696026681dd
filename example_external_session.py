"""Example of using python-easee-http with an external aiohttp.ClientSession.

This demonstrates how to pass your own session to the library, which is useful when:
- You want to manage the session lifecycle yourself
- You need to share a session with other API clients
- You want to configure custom session settings (timeouts, connectors, etc.)
"""

import asyncio

import aiohttp

from easeehttp import EaseeCloud, load_config


async def example_with_external_session():
    """Example using an external session."""
    config = load_config("conf/config.json")

    # Create your own session with custom settings
    timeout = aiohttp.ClientTimeout(total=30)
    async with aiohttp.ClientSession(timeout=timeout) as session:
        account = EaseeCloud.from_config(config, session=session)

        chargers = await account.get_chargers()
        if not chargers:
            print("No chargers found")
            return

        for charger in chargers:
            state = await account.get_charger_state(charger["id"])
            usage = await account.get_charger_daily_usage(charger["id"])
            print(f"{charger['name']}: {state}")
            print(f"Sessions today: {usage}")


async def example_without_external_session():
    """Example without external session."""
    # The library will create a session for each request
    account = EaseeCloud.from_config(load_config("conf/config.json"))

    limits = await account.get_site_current_limits(1234, 5678)
    print(f"Circuit limits: {limits}")

    result = await account.request("get", "/api/sites/1234/circuits/5678/settings")
    if not result:
        print(f"Request failed with status {result.status}: {result.data}")


if __name__ == "__main__":
    # Run one of the examples
    asyncio.run(example_with_external_session())
