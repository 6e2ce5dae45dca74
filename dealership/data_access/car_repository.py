from typing import Any, Iterable, Optional

from sqlalchemy.orm import Session, selectinload

from dealership.data_access.base_repository import BaseRepository
from dealership.models import Car
from dealership.schemas.car_schemas import CarSchema

# Relations a caller may ask to embed with ?include=
CAR_RELATIONS = ("customer", "created_user", "updated_user")


def parse_include(raw: Optional[str]) -> set[str]:
    """Parse a comma separated ``include`` query value, dropping unknown names."""
    if not raw:
        return set()
    return {name.strip() for name in raw.split(",") if name.strip() in CAR_RELATIONS}


class CarRepository(BaseRepository[Car, CarSchema, CarSchema]):
    def _query(self, db: Session, include: Iterable[str]):
        query = db.query(Car)
        for relation in include:
            query = query.options(selectinload(getattr(Car, relation)))
        return query

    def get_with_relations(self, db: Session, *, id: Any, include: Iterable[str] = ()) -> Optional[Car]:
        return self._query(db, include).filter(Car.id == id).first()

    def get_all_ordered(self, db: Session, *, include: Iterable[str] = ()) -> list[Car]:
        """All cars ordered by brand, model and id."""
        return self._query(db, include).order_by(Car.brand, Car.model, Car.id).all()

    def get_by_plates(self, db: Session, *, plates: str) -> Optional[Car]:
        return db.query(Car).filter(Car.plates == plates).first()

    def create_for_user(self, db: Session, *, obj_in: CarSchema, user_id: int) -> Car:
        """Insert a car, stamping both audit fields with the calling user."""
        data = obj_in.model_dump()
        data["created_user_id"] = user_id
        data["updated_user_id"] = user_id
        return self.create(db, obj_in=data)

    def update_for_user(self, db: Session, *, db_obj: Car, obj_in: CarSchema, user_id: int) -> Car:
        data = obj_in.model_dump(exclude_unset=True)
        data["updated_user_id"] = user_id
        return self.update(db, db_obj=db_obj, obj_in=data)


car_repo = CarRepository(Car)
