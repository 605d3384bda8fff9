#!/usr/bin/env python3
"""
Basic usage examples for the tif gateway client library.

This script demonstrates how to sign requests for the tif gateway and how a
service verifies the signature headers the gateway relays to it.
"""

import logging
import sys

from tif_client import (
    TifClient,
    TifClientError,
    DomainError,
    AuthError,
    sign_outbound
)


def main():
    """Run basic usage examples."""
    logging.basicConfig(level=logging.DEBUG)

    # Gateway configuration
    hosts = ["http://localhost:8080", "http://localhost:8081"]
    paas_id = "demo-app"
    paas_token = "demo-paas-token"

    print("=== tif Client Basic Usage Examples ===\n")

    print("1. Creating tif client...")
    client = TifClient(hosts, paas_id, paas_token, timeout=5, max_retries=2)
    print(f"   Hosts: {', '.join(client.hosts)}")
    print(f"   Paas id: {paas_id}")
    print(f"   Signature window: {client.config['time_offset_limit']}s\n")

    try:
        print("2. Signing a fixed request...")
        signature = sign_outbound(1700000000, "deadbeefcafebabe0011", "abc123")
        print(f"   Signature: {signature}\n")

        print("3. Building authentication headers...")
        headers = client.sign_headers()
        for key, value in headers.items():
            print(f"   {key}: {value}")
        print()

        print("4. Verifying the headers as a receiving service would...")
        try:
            client.auth_sign(headers)
            print("   ✓ Valid\n")
        except AuthError as e:
            print(f"   ✗ Invalid: {e}\n")

        print("5. Calling the gateway...")
        try:
            profile = client.get("/api/profile")
            print(f"   ✓ Profile: {profile}")

            item = client.new().set_method("POST").set_header("X-Trace-Id", "demo").send(
                {"name": "widget"}
            ).do_api("/api/items")
            print(f"   ✓ Created: {item}")
        except DomainError as e:
            print(f"   ✗ Gateway refused: {e.errcode} {e.errmsg}")
        except TifClientError as e:
            print(f"   ✗ Request failed: {e}")
        print()

    finally:
        client.close()

    print("=== Examples completed ===")
    return 0


if __name__ == "__main__":
    sys.exit(main())
