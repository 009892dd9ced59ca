#!/usr/bin/env python3
"""Seed the catalog with random products.

Replaces every existing product with 200 generated ones, inserted in
batches of 50. Uses DATABASE_URL like the application does.

Usage:
    python scripts/seed_products.py
    python scripts/seed_products.py --count 500 --keep-existing
"""

import argparse
import asyncio
import random
import sys
from pathlib import Path

# Add backend to path
backend_path = Path(__file__).parent.parent / "backend"
sys.path.insert(0, str(backend_path))

from sqlalchemy import delete, insert  # noqa: E402

from app.core import async_session_maker, engine  # noqa: E402
from app.models import Product  # noqa: E402

CATEGORIES = [
    "Electronics",
    "Clothing",
    "Home & Kitchen",
    "Sports & Outdoors",
    "Books",
    "Toys & Games",
    "Health & Beauty",
    "Automotive",
]

ADJECTIVES = [
    "Premium",
    "Professional",
    "Deluxe",
    "Essential",
    "Advanced",
    "Classic",
    "Modern",
    "Compact",
    "Ultra",
    "Smart",
    "Eco-Friendly",
    "Portable",
]

NOUNS = ["Device", "Kit", "Set", "Bundle", "Collection", "System", "Tool", "Accessory", "Solution", "Package"]

DESCRIPTIONS = [
    "High-quality product designed for everyday use.",
    "Perfect for both professionals and enthusiasts.",
    "Innovative design meets exceptional functionality.",
    "Built to last with premium materials.",
    "Experience the difference with this outstanding product.",
    "Carefully crafted to meet your needs.",
    "The perfect addition to your collection.",
    "Engineered for performance and reliability.",
    "Exceptional value for money.",
    "Trusted by thousands of satisfied customers.",
]


def generate_product(rng: random.Random) -> dict:
    """One random product row."""
    return {
        "name": f"{rng.choice(ADJECTIVES)} {rng.choice(CATEGORIES)} {rng.choice(NOUNS)}",
        "description": rng.choice(DESCRIPTIONS),
        # Between $10.00 and $1008.99
        "price": rng.randrange(0, 99900) / 100 + 10,
    }


async def seed(count: int, batch_size: int, keep_existing: bool, seed_value: int | None) -> int:
    """Insert ``count`` products. Returns the number created."""
    rng = random.Random(seed_value)
    products = [generate_product(rng) for _ in range(count)]
    created = 0

    async with async_session_maker() as db:
        if not keep_existing:
            await db.execute(delete(Product))
            print("Cleared existing products")

        for start in range(0, len(products), batch_size):
            batch = products[start : start + batch_size]
            await db.execute(insert(Product), batch)
            created += len(batch)
            print(f"Created {created} products...")

        await db.commit()

    await engine.dispose()
    return created


def main() -> None:
    parser = argparse.ArgumentParser(description="Seed the product catalog")
    parser.add_argument("--count", type=int, default=200, help="Number of products (default: 200)")
    parser.add_argument("--batch-size", type=int, default=50, help="Rows per insert (default: 50)")
    parser.add_argument(
        "--keep-existing",
        action="store_true",
        help="Do not delete existing products first",
    )
    parser.add_argument("--seed", type=int, default=None, help="Random seed for repeatable data")
    args = parser.parse_args()

    if args.count < 1 or args.batch_size < 1:
        print("ERROR: --count and --batch-size must be positive.")
        sys.exit(1)

    print("Starting seed...")
    created = asyncio.run(seed(args.count, args.batch_size, args.keep_existing, args.seed))
    print(f"Successfully seeded {created} products!")


if __name__ == "__main__":
    main()
