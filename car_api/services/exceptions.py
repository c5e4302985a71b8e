from datetime import date
from enum import Enum
from typing import Optional


class ValidationReason(str, Enum):
    MISSING_FIELD = "missing_field"
    UNKNOWN_COLOUR = "unknown_colour"
    MALFORMED_DATE = "malformed_date"
    TOO_OLD = "too_old"


class StoreErrorKind(str, Enum):
    READ_FAILURE = "read_failure"
    WRITE_FAILURE = "write_failure"


class CarDomainError(Exception):
    """Base class for all car domain errors."""


class ValidationError(CarDomainError):
    """Raised when a candidate car may not be persisted. Recoverable; reported to the caller."""

    reason: ValidationReason

    def __init__(self, message: str, field: Optional[str] = None, index: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.field = field
        # position of the offending candidate within its batch
        self.index = index


class MissingFieldError(ValidationError):
    reason = ValidationReason.MISSING_FIELD

    def __init__(self, field: str, index: Optional[int] = None):
        super().__init__(f"Field '{field}' is required", field=field, index=index)


class UnknownColourError(ValidationError):
    reason = ValidationReason.UNKNOWN_COLOUR

    def __init__(self, colour_id: int, index: Optional[int] = None):
        super().__init__(
            f"Colour validation failed - no colour with id {colour_id}",
            field="colourId",
            index=index,
        )
        self.colour_id = colour_id


class MalformedDateError(ValidationError):
    reason = ValidationReason.MALFORMED_DATE

    def __init__(self, value: str, index: Optional[int] = None):
        super().__init__(
            f"Build date '{value}' is not a valid YYYY-MM-DD date",
            field="buildDate",
            index=index,
        )
        self.value = value


class BuildDateTooOldError(ValidationError):
    reason = ValidationReason.TOO_OLD

    def __init__(self, build_date: date, max_years: int, index: Optional[int] = None):
        super().__init__(
            f"Vehicle build date ({build_date.isoformat()}) is older than the maximum allowed ({max_years} years)",
            field="buildDate",
            index=index,
        )
        self.build_date = build_date
        self.max_years = max_years


class StoreError(CarDomainError):
    """Raised when the underlying database fails a read or a write."""

    def __init__(self, kind: StoreErrorKind, message: str):
        super().__init__(message)
        self.kind = kind
        self.message = message


class CarNotFoundError(CarDomainError):
    """Raised when no car exists with the requested id."""

    def __init__(self, car_id: int):
        super().__init__(f"Car not found with id {car_id}")
        self.car_id = car_id
