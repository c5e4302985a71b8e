"""
Validation rules for candidate cars.

Checks run in a fixed order and stop at the first failure:

1. required fields, in the order make, model, buildDate, colourId
2. colourId names an existing colour
3. buildDate parses as YYYY-MM-DD and is no older than the configured limit

A validator never writes to the database. It is constructed per request with
the colour catalog it should consult, so there is no shared validator state.
"""

import re
from datetime import date, datetime, time, timezone
from typing import Callable, Optional, Sequence, Tuple

from car_api.core.environment import get_build_age_days_per_year, get_build_date_max_years
from car_api.schemas.car import CarCreate
from car_api.services.colour_catalog import ColourCatalog
from car_api.services.exceptions import (
    BuildDateTooOldError,
    MalformedDateError,
    MissingFieldError,
    UnknownColourError,
)

DATE_FORMAT = "%Y-%m-%d"
DAYS_PER_YEAR = 365
SECONDS_PER_DAY = 24 * 60 * 60

_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")

# (field name as submitted, presence predicate); order decides which missing field is reported
REQUIRED_FIELDS: Tuple[Tuple[str, Callable[[CarCreate], bool]], ...] = (
    ("make", lambda c: bool(c.make)),
    ("model", lambda c: bool(c.model)),
    ("buildDate", lambda c: bool(c.build_date)),
    ("colourId", lambda c: bool(c.colour_id)),
)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def parse_build_date(value: str, index: Optional[int] = None) -> date:
    """Parses a strict YYYY-MM-DD string, raising MalformedDateError otherwise."""
    if not isinstance(value, str) or not _DATE_PATTERN.match(value):
        raise MalformedDateError(str(value), index=index)
    try:
        return datetime.strptime(value, DATE_FORMAT).date()
    except ValueError:
        raise MalformedDateError(value, index=index)


def build_age_years(build_date: date, now: datetime, days_per_year: float = DAYS_PER_YEAR) -> float:
    """
    Age of a build date in approximate years.

    Elapsed time since midnight UTC of the build date divided by
    fixed-length years (365 days unless told otherwise). Not calendar aware.
    """
    built_at = datetime.combine(build_date, time.min, tzinfo=timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    elapsed = (now - built_at).total_seconds()
    return elapsed / SECONDS_PER_DAY / days_per_year


def check_required_fields(candidate: CarCreate, index: Optional[int] = None) -> None:
    for field, is_present in REQUIRED_FIELDS:
        if not is_present(candidate):
            raise MissingFieldError(field, index=index)


class CarValidator:
    """Decides whether candidate cars may be persisted."""

    def __init__(
        self,
        catalog: ColourCatalog,
        max_age_years: Optional[int] = None,
        clock: Callable[[], datetime] = utc_now,
        days_per_year: Optional[float] = None,
    ):
        self.catalog = catalog
        self.max_age_years = get_build_date_max_years() if max_age_years is None else max_age_years
        self.days_per_year = get_build_age_days_per_year() if days_per_year is None else days_per_year
        self.clock = clock

    async def check_colour(self, candidate: CarCreate, index: Optional[int] = None) -> None:
        if not await self.catalog.exists(candidate.colour_id):
            raise UnknownColourError(candidate.colour_id, index=index)

    def check_build_date(self, value: str, index: Optional[int] = None) -> date:
        build_date = parse_build_date(value, index=index)
        # only ages strictly greater than the limit are rejected
        if build_age_years(build_date, self.clock(), self.days_per_year) > self.max_age_years:
            raise BuildDateTooOldError(build_date, self.max_age_years, index=index)
        return build_date

    async def validate(self, candidate: CarCreate, index: Optional[int] = None) -> None:
        check_required_fields(candidate, index=index)
        await self.check_colour(candidate, index=index)
        self.check_build_date(candidate.build_date, index=index)

    async def validate_batch(self, candidates: Sequence[CarCreate]) -> None:
        """Validates every candidate; the first failure is raised and rejects the whole batch."""
        for index, candidate in enumerate(candidates):
            await self.validate(candidate, index=index)
