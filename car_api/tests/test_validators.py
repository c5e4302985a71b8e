import pytest
from datetime import date, datetime, time, timedelta, timezone
from unittest.mock import AsyncMock, MagicMock

from car_api.services.exceptions import (
    BuildDateTooOldError,
    MalformedDateError,
    MissingFieldError,
    UnknownColourError,
    ValidationReason,
)
from car_api.services.validators import (
    DAYS_PER_YEAR,
    CarValidator,
    build_age_years,
    check_required_fields,
    parse_build_date,
)
from car_api.tests.conftest import FIXED_NOW, make_candidate


def make_validator(known_colours=(1, 2, 3, 4), now=FIXED_NOW, max_age_years=4):
    catalog = MagicMock()
    catalog.exists = AsyncMock(side_effect=lambda colour_id: colour_id in known_colours)
    return CarValidator(catalog, max_age_years=max_age_years, clock=lambda: now)


def test_check_required_fields_accepts_complete_candidate():
    check_required_fields(make_candidate())


@pytest.mark.parametrize("missing,field", [
    ({"make": None}, "make"),
    ({"model": ""}, "model"),
    ({"buildDate": None}, "buildDate"),
    ({"colourId": None}, "colourId"),
    ({"colourId": 0}, "colourId"),
])
def test_check_required_fields_names_missing_field(missing, field):
    with pytest.raises(MissingFieldError) as exc:
        check_required_fields(make_candidate(**missing))

    assert exc.value.field == field
    assert exc.value.reason == ValidationReason.MISSING_FIELD


def test_first_missing_field_in_order_wins():
    with pytest.raises(MissingFieldError) as exc:
        check_required_fields(make_candidate(model=None, colourId=None, make=""))

    assert exc.value.field == "make"


@pytest.mark.parametrize("value", ["2022/01/01", "2022-13-01", "2022-02-30", "20220101", "2022-1-1", "yesterday"])
def test_parse_build_date_rejects_malformed(value):
    with pytest.raises(MalformedDateError):
        parse_build_date(value)


def test_parse_build_date_parses_iso_date():
    assert parse_build_date("2020-01-20") == date(2020, 1, 20)


def test_build_age_years_uses_365_day_years():
    assert DAYS_PER_YEAR == 365
    now = datetime(2020, 1, 1, tzinfo=timezone.utc) + timedelta(days=730)
    assert build_age_years(date(2020, 1, 1), now) == pytest.approx(2.0)


def test_build_age_years_treats_naive_now_as_utc():
    assert build_age_years(date(2024, 6, 1), datetime(2024, 6, 1, 0, 0)) == 0


@pytest.mark.asyncio
async def test_validate_accepts_recent_car():
    validator = make_validator(now=datetime(2024, 1, 1, tzinfo=timezone.utc))
    await validator.validate(make_candidate(buildDate="2020-01-20"))


@pytest.mark.asyncio
async def test_validate_rejects_car_older_than_limit():
    validator = make_validator(now=datetime(2024, 1, 1, tzinfo=timezone.utc))

    with pytest.raises(BuildDateTooOldError) as exc:
        await validator.validate(make_candidate(buildDate="2018-01-20"))

    assert exc.value.build_date == date(2018, 1, 20)
    assert exc.value.max_years == 4
    assert "older than the maximum allowed (4 years)" in exc.value.message


@pytest.mark.asyncio
async def test_build_date_exactly_at_limit_is_accepted():
    built_at = datetime.combine(date(2020, 3, 1), time.min, tzinfo=timezone.utc)
    at_limit = built_at + timedelta(days=4 * DAYS_PER_YEAR)

    validator = make_validator(now=at_limit)
    assert validator.check_build_date("2020-03-01") == date(2020, 3, 1)

    just_past = make_validator(now=at_limit + timedelta(seconds=1))
    with pytest.raises(BuildDateTooOldError):
        just_past.check_build_date("2020-03-01")


@pytest.mark.asyncio
async def test_future_build_date_is_accepted():
    validator = make_validator()
    await validator.validate(make_candidate(buildDate="2030-01-01"))


@pytest.mark.asyncio
async def test_validate_rejects_unknown_colour():
    validator = make_validator()

    with pytest.raises(UnknownColourError) as exc:
        await validator.validate(make_candidate(colourId=99))

    assert exc.value.colour_id == 99
    assert exc.value.reason == ValidationReason.UNKNOWN_COLOUR


@pytest.mark.asyncio
async def test_colour_check_runs_before_date_check():
    validator = make_validator()

    with pytest.raises(UnknownColourError):
        await validator.validate(make_candidate(colourId=99, buildDate="not-a-date"))


@pytest.mark.asyncio
async def test_required_check_runs_before_colour_lookup():
    validator = make_validator()

    with pytest.raises(MissingFieldError):
        await validator.validate(make_candidate(model=None, colourId=99))

    validator.catalog.exists.assert_not_awaited()


@pytest.mark.asyncio
async def test_validate_batch_reports_first_failing_record():
    validator = make_validator()
    batch = [
        make_candidate(),
        make_candidate(buildDate="2024/01/01"),
        make_candidate(make=None),
    ]

    with pytest.raises(MalformedDateError) as exc:
        await validator.validate_batch(batch)

    assert exc.value.index == 1


@pytest.mark.asyncio
async def test_validator_reads_max_age_from_environment(monkeypatch):
    monkeypatch.setenv("BUILD_DATE_MAX_YEARS", "10")
    validator = CarValidator(MagicMock())

    assert validator.max_age_years == 10


@pytest.mark.asyncio
async def test_age_limit_counts_365_day_years():
    # four 365-day years plus half a day is past the limit, though short of four 365.25-day years
    built_at = datetime.combine(date(2020, 3, 1), time.min, tzinfo=timezone.utc)
    now = built_at + timedelta(days=4 * 365, hours=12)

    with pytest.raises(BuildDateTooOldError):
        make_validator(now=now).check_build_date("2020-03-01")

    lenient = CarValidator(MagicMock(), max_age_years=4, clock=lambda: now, days_per_year=365.25)
    assert lenient.check_build_date("2020-03-01") == date(2020, 3, 1)


@pytest.mark.asyncio
async def test_validator_reads_year_length_from_environment(monkeypatch):
    monkeypatch.setenv("BUILD_AGE_DAYS_PER_YEAR", "365.25")

    assert CarValidator(MagicMock()).days_per_year == 365.25


@pytest.mark.asyncio
async def test_year_length_defaults_to_365(monkeypatch):
    monkeypatch.delenv("BUILD_AGE_DAYS_PER_YEAR", raising=False)

    assert CarValidator(MagicMock()).days_per_year == 365
