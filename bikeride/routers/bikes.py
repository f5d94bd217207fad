from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from .. import schemas, models, catalog
from ..config import FEATURED_BIKES_LIMIT
from ..deps import get_db
from ..store import Collection

router = APIRouter(prefix="/bikes", tags=["bikes"])


@router.get("/", response_model=schemas.BikeCatalog)
def browse_bikes(
    db: Session = Depends(get_db),
    search: Optional[str] = None,
    type: str = "all",
    sort: str = "name",
):
    """
    Browse the bikes that can currently be rented.

    The available fleet is loaded in full and narrowed down in memory.

    Parameters
    ----------
    search : str, optional
        Case-insensitive substring matched against name, type and description.
    type : str, optional
        Bike type to keep, or ``all``.
    sort : str, optional
        ``name`` (default), ``type``, ``price-low`` or ``price-high``.
    """
    available = Collection(db, models.Bike).list(where={"is_available": True})
    items = catalog.browse(available, search=search, bike_type=type, sort_by=sort)
    return {
        "items": items,
        "count": len(items),
        "types": catalog.bike_types(available),
    }


@router.get("/featured", response_model=List[schemas.BikeOut])
def featured_bikes(db: Session = Depends(get_db)):
    """A handful of available bikes for the landing page."""
    return Collection(db, models.Bike).list(where={"is_available": True}, limit=FEATURED_BIKES_LIMIT)


@router.get("/types", response_model=List[str])
def list_bike_types():
    return schemas.BIKE_TYPES


@router.get("/{bike_id}", response_model=schemas.BikeOut)
def get_bike(bike_id: int, db: Session = Depends(get_db)):
    """
    Retrieve a single bike by its ID.

    Raises a 404 error if the bike does not exist.
    """
    bike = Collection(db, models.Bike).get(bike_id)
    if not bike:
        raise HTTPException(status_code=404, detail="Bike not found")
    return bike
