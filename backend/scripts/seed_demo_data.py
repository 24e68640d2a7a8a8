#!/usr/bin/env python3
"""
Demo Data Seeding Script for Chama Tracker.

Creates a handful of members and records monthly contributions for the
current year and the year before it, then prints the year's ranking.

Usage:
    python scripts/seed_demo_data.py [--base-url http://localhost:5000]

Requires:
    - Backend running at the given base URL
"""
import argparse
import asyncio
import sys
from datetime import date

import httpx

from chama.client import ContributionBoard, ContributionsClient
from chama.core.periods import MONTHS
from chama.services.reports import calculate_total

DEMO_MEMBERS = [
    {"name": "Jane Wanjiku", "phone": "0712000001", "email": "jane@example.com"},
    {"name": "Mary Atieno", "phone": "0712000002", "email": None},
    {"name": "Grace Njeri", "phone": "0712000003", "email": "grace@example.com"},
    {"name": "Ruth Chebet", "phone": None, "email": None},
]

# Monthly amount per member; months after the current one are left empty
DEMO_AMOUNTS = [500, 750, 300, 1000]


async def seed(base_url: str) -> None:
    today = date.today()

    async with ContributionsClient(base_url) as client:
        print("Creating members...")
        members = []
        for data in DEMO_MEMBERS:
            member = await client.create_member(**data)
            print(f"  {member['name']} ({member['id']})")
            members.append(member)

        print("\nRecording contributions...")
        for member, amount in zip(members, DEMO_AMOUNTS):
            for month in MONTHS[:today.month]:
                await client.update_month(member["id"], month, amount, today.year)
            await client.update_month(member["id"], "december", amount, today.year - 1)

        board = ContributionBoard(client, today.year)
        if not await board.refresh():
            print(board.error)
            sys.exit(1)

        print(f"\n{today.year} ranking:")
        for rank, record in enumerate(board.records, start=1):
            print(f"  {rank}. {record['member']['name']}: {calculate_total(record)}")


def main() -> None:
    parser = argparse.ArgumentParser(description="Seed Chama Tracker with demo data")
    parser.add_argument("--base-url", default="http://localhost:5000")
    args = parser.parse_args()

    try:
        asyncio.run(seed(args.base_url))
    except httpx.HTTPError as exc:
        print(f"Seeding failed: {exc}")
        sys.exit(1)


if __name__ == "__main__":
    main()
