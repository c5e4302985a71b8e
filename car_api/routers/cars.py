import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from car_api.core.db import MAX_ROW_ID, get_db, is_valid_row_id
from car_api.schemas.car import CarCreate, CarOut, ColourOut
from car_api.services.car_service import CarService
from car_api.services.exceptions import CarNotFoundError

logger = logging.getLogger(__name__)

router = APIRouter(tags=["cars"])


def get_car_service(db: AsyncSession = Depends(get_db)) -> CarService:
    return CarService(db)


async def log_request(request: Request):
    logger.info(f"{request.method} - {request.url.path}")


def _parse_car_id(raw_id: str) -> int:
    if not raw_id.strip():
        logger.warning("Missing param id on /car/{id}")
        raise HTTPException(status_code=400, detail="Parameter 'id' cannot be empty")
    # only plain ASCII digits within the row id range can name a car
    if not (raw_id.isascii() and raw_id.isdigit()) or len(raw_id.lstrip("0")) > len(str(MAX_ROW_ID)):
        raise CarNotFoundError(raw_id)
    car_id = int(raw_id)
    if not is_valid_row_id(car_id):
        raise CarNotFoundError(raw_id)
    return car_id


@router.get("/cars", response_model=List[CarOut], dependencies=[Depends(log_request)])
async def list_cars(service: CarService = Depends(get_car_service)):
    cars = await service.list_all()
    if not cars:
        return JSONResponse(status_code=404, content={"error": "not_found", "message": "No cars found"})
    return cars


@router.post("/cars", status_code=status.HTTP_201_CREATED, dependencies=[Depends(log_request)])
async def create_cars(candidates: List[CarCreate], service: CarService = Depends(get_car_service)):
    await service.create_many(candidates)
    return Response(status_code=status.HTTP_201_CREATED)


@router.get("/car", dependencies=[Depends(log_request)])
@router.get("/car/", dependencies=[Depends(log_request)])
@router.delete("/car", dependencies=[Depends(log_request)])
@router.delete("/car/", dependencies=[Depends(log_request)])
async def car_without_id():
    logger.warning("Missing param id on /car/{id}")
    raise HTTPException(status_code=400, detail="Parameter 'id' cannot be empty")


@router.get("/car/{car_id}", response_model=CarOut, dependencies=[Depends(log_request)])
async def get_car(car_id: str, service: CarService = Depends(get_car_service)):
    return await service.get_one(_parse_car_id(car_id))


@router.delete("/car/{car_id}", dependencies=[Depends(log_request)])
async def delete_car(car_id: str, service: CarService = Depends(get_car_service)):
    await service.delete_one(_parse_car_id(car_id))
    return {"message": "Vehicle deleted successfully"}


@router.get("/colours", response_model=List[ColourOut], dependencies=[Depends(log_request)])
async def list_colours(service: CarService = Depends(get_car_service)):
    return await service.list_colours()
