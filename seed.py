"""
Seed script -- writes sample job requests into the configured store.

Run after migrations (SQL backend) or against an Appwrite project:
    python seed.py

Creates job requests the way the mobile app does, readable by any
signed-in user, so the event endpoints have something to tighten and
project.  Already-present documents are left untouched.
"""

import asyncio

from jobrules.api.dependencies import build_store
from jobrules.config import Settings
from jobrules.infrastructure.store import CreateStatus

# Permissions the app grants on create, before the access rule runs
OPEN_PERMISSIONS = ['read("users")', 'update("users")']

JOB_REQUESTS = [
    {"$id": "jr1", "clientId": "c1", "driverId": "d1", "status": "PENDING"},
    {
        "$id": "jr2",
        "clientId": "c2",
        "driverId": "d1",
        "status": "ACCEPTED",
        "estimatedPickupAt": "2026-10-19T10:00:00Z",
    },
    {"$id": "jr3", "clientId": "c3", "driverId": "d2", "status": "REJECTED"},
    {"$id": "jr4", "clientId": "c1", "driverId": "d3", "status": "IN_PROGRESS"},
]


async def seed(settings: Settings):
    store = build_store(settings)
    collections = settings.collections()
    created = 0
    try:
        for doc in JOB_REQUESTS:
            data = {k: v for k, v in doc.items() if k != "$id"}
            result = await store.create_document(
                collections.database_id,
                collections.job_requests_id,
                doc["$id"],
                data,
                OPEN_PERMISSIONS,
            )
            if result.status == CreateStatus.FAILED:
                raise result.error
            if result.status == CreateStatus.CREATED:
                created += 1
            else:
                print(f"  {doc['$id']} already exists. Skipping.")
    finally:
        await store.aclose()
    print(f"  Created {created} job requests")


async def main():
    print("Seeding job requests...")
    await seed(Settings())
    print("\nSeed complete!")


if __name__ == "__main__":
    asyncio.run(main())
