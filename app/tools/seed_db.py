"""Seed the database with currencies and exchange offices from a CSV listing.

Usage:
    python -m app.tools.seed_db
    python -m app.tools.seed_db --data-dir data
    python -m app.tools.seed_db --drop  # drop existing data first
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import random
import sys
from decimal import Decimal
from pathlib import Path

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.adapters.csv_loader.loader import load_offices
from app.adapters.csv_loader.normalizer import slugify
from app.adapters.persistence.database import async_session_factory
from app.adapters.persistence.models import (
    CityModel,
    CountryModel,
    CurrencyModel,
    OfficeModel,
    OfficeRateModel,
    WorkingHourModel,
)
from app.config import settings

logging.basicConfig(level=logging.INFO, format="%(levelname)s | %(message)s")
logger = logging.getLogger(__name__)

COUNTRY_NAME = "Morocco"
COUNTRY_CODE = "MAR"

CURRENCIES: list[tuple[str, str, str]] = [
    ("MAD", "Moroccan Dirham", "DH"),
    ("USD", "US Dollar", "$"),
    ("EUR", "Euro", "€"),
    ("GBP", "British Pound", "£"),
    ("CAD", "Canadian Dollar", "CA$"),
    ("CHF", "Swiss Franc", "CHF"),
    ("SAR", "Saudi Riyal", "SR"),
    ("AED", "UAE Dirham", "AED"),
]

# Mid-market MAD price and (min, max) spread per starter currency
STARTER_RATES: dict[str, tuple[tuple[float, float], tuple[float, float]]] = {
    "USD": ((9.95, 10.15), (0.15, 0.35)),
    "EUR": ((10.85, 11.15), (0.20, 0.40)),
}


def starter_rate(rng: random.Random, mid_range, spread_range) -> tuple[Decimal, Decimal]:
    """Return (buy, sell) around a random mid price; the office buys below it."""
    mid = rng.uniform(*mid_range)
    spread = rng.uniform(*spread_range)
    buy = Decimal(str(round(mid - spread / 2, 2)))
    sell = Decimal(str(round(mid + spread / 2, 2)))
    return buy, sell


async def _drop_data(session: AsyncSession) -> None:
    """Delete all data in correct order (respecting FK constraints)."""
    for model in [
        WorkingHourModel,
        OfficeRateModel,
        OfficeModel,
        CityModel,
        CountryModel,
        CurrencyModel,
    ]:
        await session.execute(delete(model))
    await session.commit()
    logger.info("Dropped all existing data")


async def _seed_currencies(session: AsyncSession) -> dict[str, CurrencyModel]:
    existing = {
        c.code: c for c in (await session.execute(select(CurrencyModel))).scalars().all()
    }
    for code, name, symbol in CURRENCIES:
        if code not in existing:
            currency = CurrencyModel(code=code, name=name, symbol=symbol)
            session.add(currency)
            existing[code] = currency
    await session.flush()

    if settings.reference_currency_code.upper() not in existing:
        logger.warning(
            "Reference currency %s is not seeded; nearby searches will fail",
            settings.reference_currency_code,
        )
    return existing


async def _get_or_create_country(session: AsyncSession) -> CountryModel:
    country = (
        await session.execute(select(CountryModel).where(CountryModel.name == COUNTRY_NAME))
    ).scalar_one_or_none()
    if country is None:
        country = CountryModel(name=COUNTRY_NAME, code=COUNTRY_CODE)
        session.add(country)
        await session.flush()
    return country


async def _get_or_create_city(
    session: AsyncSession, name: str, country: CountryModel, cache: dict[str, CityModel]
) -> CityModel:
    key = name.strip().lower()
    if key in cache:
        return cache[key]
    city = (
        await session.execute(select(CityModel).where(func.lower(CityModel.name) == key))
    ).scalar_one_or_none()
    if city is None:
        city = CityModel(name=name.strip().title(), country_id=country.id)
        session.add(city)
        await session.flush()
    cache[key] = city
    return city


def _unique_slug(name: str, taken: set[str]) -> str:
    base = slugify(name) or "office"
    slug, counter = base, 1
    while slug in taken:
        counter += 1
        slug = f"{base}-{counter}"
    taken.add(slug)
    return slug


async def seed(data_dir: Path, drop: bool = False, rate_seed: int | None = None) -> dict[str, int]:
    """Main seed function. Returns counts of seeded records."""
    counts = {"currencies": 0, "offices": 0, "rates": 0, "skipped": 0}

    office_csv = _find_csv(data_dir, ["bureaux", "bureau", "offices", "office", "before_trip"])
    if not office_csv:
        raise FileNotFoundError(
            f"No offices CSV found in {data_dir}. Expected something like offices.csv"
        )

    rng = random.Random(rate_seed)

    async with async_session_factory() as session:
        if drop:
            await _drop_data(session)

        currencies = await _seed_currencies(session)
        counts["currencies"] = len(currencies)
        reference = currencies.get(settings.reference_currency_code.upper())

        country = await _get_or_create_country(session)
        city_cache: dict[str, CityModel] = {}
        taken_slugs = set(
            (await session.execute(select(OfficeModel.slug).where(OfficeModel.slug.is_not(None))))
            .scalars()
            .all()
        )

        for od in load_offices(office_csv):
            existing = await session.execute(
                select(OfficeModel).where(
                    OfficeModel.office_name == od["name"],
                    OfficeModel.address == od["address"],
                )
            )
            if existing.scalar_one_or_none():
                logger.debug("Office '%s' already exists, skipping", od["name"])
                counts["skipped"] += 1
                continue

            if od["latitude"] is None or od["longitude"] is None:
                logger.warning(
                    "Office '%s' has no coordinates; it will never match a nearby search",
                    od["name"],
                )

            city = None
            if od["city"]:
                city = await _get_or_create_city(session, od["city"], country, city_cache)

            office = OfficeModel(
                office_name=od["name"],
                address=od["address"],
                latitude=od["latitude"],
                longitude=od["longitude"],
                city_id=city.id if city else None,
                country_id=country.id,
                slug=_unique_slug(od["name"], taken_slugs),
                email=od["email"],
                primary_phone_number=od["primary_phone_number"],
                secondary_phone_number=od["secondary_phone_number"],
                whatsapp_number=od["whatsapp_number"],
                is_active=True,
            )
            session.add(office)
            await session.flush()

            for day, hours in od["working_hours"].items():
                session.add(WorkingHourModel(
                    office_id=office.id,
                    day_of_week=day.value,
                    is_active=hours.is_active,
                    from_time=hours.from_time,
                    to_time=hours.to_time,
                    has_break=hours.has_break,
                    break_from_time=hours.break_from_time,
                    break_to_time=hours.break_to_time,
                ))

            if reference is not None:
                for code, (mid_range, spread_range) in STARTER_RATES.items():
                    buy, sell = starter_rate(rng, mid_range, spread_range)
                    session.add(OfficeRateModel(
                        office_id=office.id,
                        base_currency_id=reference.id,
                        target_currency_id=currencies[code].id,
                        buy_rate=buy,
                        sell_rate=sell,
                        is_active=True,
                    ))
                    counts["rates"] += 1

            counts["offices"] += 1

        await session.commit()

    logger.info(
        "Seed complete: %d currencies, %d offices (%d skipped), %d rates",
        counts["currencies"], counts["offices"], counts["skipped"], counts["rates"],
    )
    return counts


def _find_csv(data_dir: Path, name_hints: list[str]) -> Path | None:
    """Find a CSV file matching any of the name hints."""
    for f in sorted(data_dir.glob("*.csv")):
        fname_lower = f.stem.lower()
        for hint in name_hints:
            if hint in fname_lower:
                logger.info("Found CSV: %s (matched hint '%s')", f.name, hint)
                return f
    return None


async def _verify_data() -> None:
    """Print sanity checks after seeding."""
    async with async_session_factory() as session:
        offices = (await session.execute(select(OfficeModel))).scalars().all()
        currencies = (await session.execute(select(CurrencyModel))).scalars().all()
        rate_count = (await session.execute(select(func.count(OfficeRateModel.id)))).scalar() or 0

        print(f"\n{'='*50}")
        print("SEED VERIFICATION")
        print(f"{'='*50}")
        print(f"Currencies: {', '.join(sorted(c.code for c in currencies))}")
        print(f"Offices:    {len(offices)}")
        print(f"Rates:      {rate_count}")

        with_coords = sum(1 for o in offices if o.latitude is not None and o.longitude is not None)
        print(f"Offices with coordinates: {with_coords}/{len(offices)}")

        reference = settings.reference_currency_code.upper()
        print(f"Reference currency {reference} present: {any(c.code == reference for c in currencies)}")
        print(f"{'='*50}\n")


def main():
    parser = argparse.ArgumentParser(description="Seed ExchanGo database from a CSV listing")
    parser.add_argument(
        "--data-dir", type=str, default="data",
        help="Directory containing the offices CSV (default: data)",
    )
    parser.add_argument(
        "--drop", action="store_true",
        help="Drop existing data before seeding",
    )
    parser.add_argument(
        "--rate-seed", type=int, default=None,
        help="Random seed for starter rates (reproducible runs)",
    )
    parser.add_argument(
        "--verify-only", action="store_true",
        help="Only run verification, don't seed",
    )
    args = parser.parse_args()

    data_dir = Path(args.data_dir)
    if not args.verify_only and not data_dir.exists():
        logger.error("Data directory not found: %s", data_dir)
        sys.exit(1)

    if args.verify_only:
        asyncio.run(_verify_data())
    else:
        async def run_all():
            await seed(data_dir, drop=args.drop, rate_seed=args.rate_seed)
            await _verify_data()
        asyncio.run(run_all())


if __name__ == "__main__":
    main()
