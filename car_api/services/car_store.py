import logging
from typing import List, Optional

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import joinedload

from car_api.core.db import is_valid_row_id
from car_api.models.car import Car
from car_api.schemas.car import CarCreate
from car_api.services.exceptions import StoreError, StoreErrorKind

logger = logging.getLogger(__name__)


class CarStore:
    """
    Data access for the cars table.

    Reads always load the referenced colour alongside the car, so callers
    see the colour name rather than a bare id. The store owns id assignment
    (autoincrement) and durability; it makes no business decisions.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    def _select_with_colour(self):
        # refresh cars already in the session so colour is always loaded eagerly
        return (
            select(Car)
            .options(joinedload(Car.colour))
            .execution_options(populate_existing=True)
        )

    async def insert(self, candidate: CarCreate, commit: bool = True) -> int:
        """
        Persists a validated candidate and returns the assigned id.

        With ``commit=False`` the row is only flushed, leaving the
        transaction open for the caller to commit or roll back.
        """
        car = Car(
            make=candidate.make,
            model=candidate.model,
            build_date=candidate.build_date,
            colour_id=candidate.colour_id,
        )
        try:
            self.db.add(car)
            await self.db.flush()
            if commit:
                await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.warning("Car insert failed: %s", e)
            raise StoreError(StoreErrorKind.WRITE_FAILURE, str(e)) from e
        return car.id

    async def get_by_id(self, car_id: int) -> Optional[Car]:
        """Returns the car with its colour, or None when no row matches."""
        if not is_valid_row_id(car_id):
            return None
        try:
            result = await self.db.execute(self._select_with_colour().where(Car.id == car_id))
            return result.scalars().first()
        except SQLAlchemyError as e:
            raise StoreError(StoreErrorKind.READ_FAILURE, str(e)) from e

    async def list_all(self) -> List[Car]:
        try:
            result = await self.db.execute(self._select_with_colour().order_by(Car.id))
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            raise StoreError(StoreErrorKind.READ_FAILURE, str(e)) from e

    async def delete_by_id(self, car_id: int) -> int:
        """Deletes the row and returns the number of rows affected (0 when absent)."""
        if not is_valid_row_id(car_id):
            return 0
        try:
            result = await self.db.execute(delete(Car).where(Car.id == car_id))
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise StoreError(StoreErrorKind.WRITE_FAILURE, str(e)) from e
        return result.rowcount

    async def commit(self):
        try:
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise StoreError(StoreErrorKind.WRITE_FAILURE, str(e)) from e
