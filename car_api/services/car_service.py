import logging
from typing import List, Optional, Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from car_api.core.environment import is_atomic_batch_insert
from car_api.core.metrics import track_performance
from car_api.core.prometheus_metrics import prometheus_collector
from car_api.models.car import Car
from car_api.models.colour import Colour
from car_api.schemas.car import CarCreate
from car_api.services.car_store import CarStore
from car_api.services.colour_catalog import ColourCatalog
from car_api.services.exceptions import CarNotFoundError, StoreError, ValidationError
from car_api.services.validators import CarValidator

logger = logging.getLogger(__name__)


class CarService:
    """
    Entry point for everything the HTTP layer does with cars.

    Creation validates the whole batch before writing anything. By default
    each validated car is then committed on its own, so a store failure
    part way through leaves the earlier rows of the batch in place. With
    ``atomic_batch`` the batch is written in one transaction and rolled
    back as a whole on failure.

    Lookups and deletes pass straight through to the store; a missing row
    is turned into CarNotFoundError here.
    """

    def __init__(
        self,
        db: AsyncSession,
        validator: Optional[CarValidator] = None,
        atomic_batch: Optional[bool] = None,
    ):
        self.db = db
        self.store = CarStore(db)
        self.catalog = ColourCatalog(db)
        self.validator = validator or CarValidator(self.catalog)
        self.atomic_batch = is_atomic_batch_insert() if atomic_batch is None else atomic_batch

    @track_performance(service_name="CarService")
    async def create_many(self, candidates: Sequence[CarCreate]) -> List[int]:
        """
        Validates and persists a batch of candidate cars.

        Returns the ids assigned to the new rows, in submission order.

        Raises:
            ValidationError: some candidate was rejected; nothing was written
            StoreError: the database refused a write
        """
        try:
            await self.validator.validate_batch(candidates)
        except ValidationError as e:
            prometheus_collector.record_validation_failure(e.reason.value)
            logger.warning("Car batch rejected: %s", e.message, extra={"reason": e.reason.value, "index": e.index})
            raise

        if self.atomic_batch:
            return await self._insert_atomic(candidates)
        return await self._insert_each(candidates)

    async def _insert_each(self, candidates: Sequence[CarCreate]) -> List[int]:
        ids = []
        for candidate in candidates:
            try:
                ids.append(await self.store.insert(candidate))
            except StoreError:
                logger.warning(
                    "Batch insert stopped after %d of %d cars; earlier rows are kept",
                    len(ids),
                    len(candidates),
                )
                raise
        return ids

    async def _insert_atomic(self, candidates: Sequence[CarCreate]) -> List[int]:
        ids = []
        for candidate in candidates:
            # a failed insert rolls back the whole open transaction
            ids.append(await self.store.insert(candidate, commit=False))
        await self.store.commit()
        return ids

    @track_performance(service_name="CarService")
    async def get_one(self, car_id: int) -> Car:
        car = await self.store.get_by_id(car_id)
        if car is None:
            raise CarNotFoundError(car_id)
        return car

    @track_performance(service_name="CarService")
    async def list_all(self) -> List[Car]:
        return await self.store.list_all()

    @track_performance(service_name="CarService")
    async def delete_one(self, car_id: int) -> None:
        if await self.store.delete_by_id(car_id) < 1:
            raise CarNotFoundError(car_id)
        logger.info("Deleted car %s", car_id)

    async def list_colours(self) -> List[Colour]:
        return await self.catalog.list_all()
