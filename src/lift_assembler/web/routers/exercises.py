"""Exercise matching routes."""

from fastapi import APIRouter, Body, HTTPException, Request

from ...data import parse_catalog
from ...utils.exercise_matcher import CatalogEmptyError, ExerciseMatcher
from ..dependencies import get_catalog

router = APIRouter(prefix="/exercises", tags=["exercises"])


@router.post("/match")
async def match_exercise(request: Request, payload: dict = Body(...)):
    """Resolve one exercise reference against the catalog.

    Body: ``{"name", "exerciseId"?, "category"?, "targetMuscles"?, "catalog"?}``.
    A ``catalog`` in the body replaces the configured one for this request.
    """
    name = payload.get("name")
    if not isinstance(name, str) or not name:
        raise HTTPException(status_code=422, detail="'name' is required")

    if "catalog" in payload:
        try:
            catalog = parse_catalog(payload["catalog"] or [])
        except ValueError as e:
            raise HTTPException(status_code=422, detail=str(e))
    else:
        catalog = get_catalog(request)

    try:
        result = ExerciseMatcher(catalog).match(
            name,
            payload.get("exerciseId"),
            payload.get("category"),
            payload.get("targetMuscles"),
        )
    except CatalogEmptyError as e:
        raise HTTPException(status_code=422, detail=str(e))

    return result.to_dict()
