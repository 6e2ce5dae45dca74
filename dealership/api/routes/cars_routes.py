import logging
from typing import Any, Iterable, Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError

from dealership import models
from dealership.api import dependencies
from dealership.db.session import get_db
from dealership.data_access import car_repo
from dealership.data_access.car_repository import parse_include
from dealership.schemas.car_schemas import (
    FORM_ERROR_KEY,
    CarValidationError,
    parse_car_payload,
    serialize_car,
)

logger = logging.getLogger(__name__)

router = APIRouter()

DUPLICATE_PLATES_MESSAGE = "A car with these plates already exists."
CONSTRAINT_MESSAGE = "Invalid data or constraint violation."


def _get_car_or_404(db: Session, car_id: int, include: Iterable[str] = ()) -> models.Car:
    if include:
        car = car_repo.get_with_relations(db, id=car_id, include=include)
    else:
        car = car_repo.get(db, id=car_id)
    if not car:
        raise HTTPException(status_code=404, detail="Car not found")
    return car


@router.post("", status_code=status.HTTP_201_CREATED, response_class=Response)
def create_car(
    *,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(dependencies.get_current_active_user),
    payload: Any = Body(...),
):
    """
    Create a new car. The caller is recorded as creator and last updater.
    """
    car_in = parse_car_payload(payload)
    if car_repo.get_by_plates(db, plates=car_in.plates):
        raise CarValidationError({"plates": DUPLICATE_PLATES_MESSAGE})
    try:
        car = car_repo.create_for_user(db, obj_in=car_in, user_id=current_user.id)
    except IntegrityError as e:
        logger.warning(f"Constraint violation creating car: {e.orig}")
        raise CarValidationError({FORM_ERROR_KEY: CONSTRAINT_MESSAGE})

    logger.info(f"Car {car.id} ({car.plates}) created by user {current_user.id}")
    return Response(status_code=status.HTTP_201_CREATED)


@router.get("")
def get_cars(
    *,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(dependencies.get_current_active_user),
    include: Optional[str] = None,
):
    """
    Retrieve all cars ordered by brand, model and id.
    `include` takes a comma separated list of customer, created_user, updated_user.
    """
    relations = parse_include(include)
    cars = car_repo.get_all_ordered(db, include=relations)
    return [serialize_car(car, relations) for car in cars]


@router.get("/{car_id}")
def get_car_by_id(
    *,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(dependencies.get_current_active_user),
    car_id: int,
    include: Optional[str] = None,
):
    """
    Get a specific car by ID.
    """
    relations = parse_include(include)
    car = _get_car_or_404(db, car_id, relations)
    return serialize_car(car, relations)


@router.put("/{car_id}", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
def update_car(
    *,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(dependencies.get_current_active_user),
    car_id: int,
    payload: Any = Body(...),
):
    """
    Update a car. The payload is validated before the car is looked up.
    """
    car_in = parse_car_payload(payload)
    car = _get_car_or_404(db, car_id)

    duplicate = car_repo.get_by_plates(db, plates=car_in.plates)
    if duplicate and duplicate.id != car.id:
        raise CarValidationError({"plates": DUPLICATE_PLATES_MESSAGE})
    try:
        car_repo.update_for_user(db, db_obj=car, obj_in=car_in, user_id=current_user.id)
    except IntegrityError as e:
        logger.warning(f"Constraint violation updating car {car_id}: {e.orig}")
        raise CarValidationError({FORM_ERROR_KEY: CONSTRAINT_MESSAGE})

    logger.info(f"Car {car_id} updated by user {current_user.id}")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/{car_id}", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
def delete_car(
    *,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(dependencies.get_current_active_user),
    car_id: int,
):
    """
    Delete a car.
    """
    car = car_repo.remove(db, id=car_id)
    if not car:
        raise HTTPException(status_code=404, detail="Car not found")

    logger.info(f"Car {car_id} deleted by user {current_user.id}")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
