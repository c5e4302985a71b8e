import argparse
import asyncio
import logging

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker

from car_api.core.db import Base, engine as default_engine
from car_api.models import Car, Colour

logger = logging.getLogger(__name__)

SEED_COLOURS = [
    (1, "red"),
    (2, "blue"),
    (3, "white"),
    (4, "black"),
]

SEED_CARS = [
    (1, "Mercedes", "A Class", "2022-04-04", 1),
]


def _colours():
    return [Colour(id=colour_id, name=name) for colour_id, name in SEED_COLOURS]


def _cars():
    return [
        Car(id=car_id, make=make, model=model, build_date=build_date, colour_id=colour_id)
        for car_id, make, model, build_date, colour_id in SEED_CARS
    ]


async def init_db(engine: AsyncEngine = default_engine) -> None:
    """Creates missing tables and seeds the colour catalog when it is empty."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(engine, expire_on_commit=False)
    async with session_factory() as db:
        count = (await db.execute(select(func.count(Colour.id)))).scalar()
        if count == 0:
            db.add_all(_colours())
            await db.commit()
            logger.info("Seeded colour catalog with %d colours", len(SEED_COLOURS))


async def reset_database(engine: AsyncEngine = default_engine) -> None:
    """Drops and recreates both tables, then loads the default colours and example car."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(engine, expire_on_commit=False)
    async with session_factory() as db:
        db.add_all(_colours())
        await db.flush()
        db.add_all(_cars())
        await db.commit()
    logger.info("Database reset successfully")


async def clear_database(engine: AsyncEngine = default_engine) -> None:
    """Deletes every car and colour, keeping the tables."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
        await conn.execute(delete(Car))
        await conn.execute(delete(Colour))
    logger.info("Database emptied successfully")


def main():
    parser = argparse.ArgumentParser(description="Car database maintenance")
    parser.add_argument("action", choices=["init", "reset", "clear"])
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO)
    actions = {"init": init_db, "reset": reset_database, "clear": clear_database}
    asyncio.run(actions[args.action]())


if __name__ == "__main__":
    main()
