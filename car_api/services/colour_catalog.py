from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from car_api.core.db import is_valid_row_id
from car_api.models.colour import Colour
from car_api.services.exceptions import StoreError, StoreErrorKind


class ColourCatalog:
    """Read-only access to the colours reference table."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get(self, colour_id: int) -> Optional[Colour]:
        if not is_valid_row_id(colour_id):
            return None
        try:
            return await self.db.get(Colour, colour_id)
        except SQLAlchemyError as e:
            raise StoreError(StoreErrorKind.READ_FAILURE, str(e)) from e

    async def exists(self, colour_id: int) -> bool:
        return await self.get(colour_id) is not None

    async def list_all(self) -> List[Colour]:
        try:
            result = await self.db.execute(select(Colour).order_by(Colour.id))
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            raise StoreError(StoreErrorKind.READ_FAILURE, str(e)) from e
