#!/usr/bin/env python3
"""Generate JWT tokens for the demo users and seed them into the local store."""

import argparse
import asyncio

from ideahub.auth import create_access_token
from ideahub.backends import Backends
from ideahub.errors import RemoteStoreError
from ideahub.store import Select

# Sample users for demo
users = [
    {
        "id": "6f1c2f0e-8f0b-4a53-9a4e-0d9c6c1a0001",
        "email": "alice@techcorp.com",
        "full_name": "Alice Johnson",
        "department": "Operations",
        "role": "admin"
    },
    {
        "id": "6f1c2f0e-8f0b-4a53-9a4e-0d9c6c1a0002",
        "email": "bob@techcorp.com",
        "full_name": "Bob Smith",
        "department": "Engineering",
        "role": "user"
    },
    {
        "id": "6f1c2f0e-8f0b-4a53-9a4e-0d9c6c1a0003",
        "email": "carol@techcorp.com",
        "full_name": "Carol Davis",
        "department": "Customer Success",
        "role": "user"
    }
]


async def seed_users(backends: Backends):
    """Insert the demo users that are not in the local store yet."""
    store = backends.store_for(None)
    for user in users:
        existing = await store.select(Select(table="users", filters={"id": user["id"]}))
        if not existing:
            await store.insert("users", user)


def main():
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--expires", type=int, default=60, help="Token lifetime in minutes")
    parser.add_argument("--no-seed", action="store_true", help="Only print tokens")
    args = parser.parse_args()

    if not args.no_seed:
        backends = Backends(kind="local")
        backends.init()
        try:
            asyncio.run(seed_users(backends))
        except RemoteStoreError as e:
            print(f"Could not seed users: {e}")

    print("IdeaHub JWT Token Generator")
    print("=" * 50)

    for user in users:
        token = create_access_token(
            {"sub": user["id"], "email": user["email"], "name": user["full_name"], "roles": [user["role"]]},
            expires_in_minutes=args.expires
        )
        print(f"\n{user['full_name']} ({user['email']})")
        print(f"Role: {user['role']}")
        print(f"Token: {token}")
        print(f"Cookie: access_token={token}")
        print("-" * 50)


if __name__ == "__main__":
    main()
