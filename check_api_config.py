#!/usr/bin/env python3
"""
School API Configuration Checker

Prints the School API settings the application will use and makes one
request to the school list endpoint to confirm the API is reachable.
"""

import sys

from config import Config
from school_directory.services.school_api import SchoolApiClient, FetchError


def check_api_config(config=Config, client=None):
    """Check if the School API configuration is usable"""
    print("🏫 School Directory API Configuration Checker")
    print("=" * 50)

    print(f"✅ SCHOOLS_API_URL: {config.SCHOOLS_API_URL}")
    print(f"✅ SCHOOLS_ASSET_URL: {config.SCHOOLS_ASSET_URL}")
    print(f"✅ SCHOOLS_API_TIMEOUT: {config.SCHOOLS_API_TIMEOUT}s")

    if not config.SCHOOLS_API_URL.startswith(('http://', 'https://')):
        print("\n❌ ERROR: SCHOOLS_API_URL must start with http:// or https://")
        return False

    if config.SCHOOLS_ASSET_URL != config.SCHOOLS_API_URL:
        print("\n⚠️  WARNING: Images are served from a different origin than the API")

    client = client or SchoolApiClient(base_url=config.SCHOOLS_API_URL,
                                       timeout=config.SCHOOLS_API_TIMEOUT)
    try:
        schools = client.fetch_schools()
    except FetchError as e:
        print(f"\n❌ Could not reach {client.schools_url}: {e.message}")
        return False

    print(f"\n✅ API reachable: {len(schools)} schools listed at {client.schools_url}")
    return True

if __name__ == "__main__":
    sys.exit(0 if check_api_config() else 1)
