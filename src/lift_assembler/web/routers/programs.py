"""Program assembly and storage routes."""

from fastapi import APIRouter, Body, HTTPException, Request

from ...data import parse_catalog
from ...services.diff_patcher import StaleDiffError
from ...services.one_rep_max import apply_one_rep_max_weights, one_rep_max_map
from ...services.program_assembler import AssemblyRequest, ProgramAssembler
from ...utils.exercise_matcher import CatalogEmptyError
from ..dependencies import get_catalog, get_config, get_repository

router = APIRouter(prefix="/programs", tags=["programs"])


@router.post("/assemble")
async def assemble_program(request: Request, payload: dict = Body(...)):
    """Assemble a program from ``{week1, progressionDiffs, durationWeeks, ...}``.

    Set ``"save": true`` to store the result. A ``catalog`` in the body
    replaces the configured one for this request, and ``oneRepMaxes``
    (``[{exerciseId, oneRepMax}]``) turns intensity percentages into loads.
    """
    config = get_config(request)

    try:
        assembly_request = AssemblyRequest.from_dict(payload)
    except (KeyError, TypeError, ValueError) as e:
        raise HTTPException(status_code=422, detail=f"Invalid assembly request: {e}")

    strict = payload.get("strict", config.get_strict_fingerprint())
    if not isinstance(strict, bool):
        raise HTTPException(status_code=422, detail="'strict' must be a boolean")

    if "catalog" in payload:
        try:
            catalog = parse_catalog(payload["catalog"] or [])
        except ValueError as e:
            raise HTTPException(status_code=422, detail=str(e))
    else:
        catalog = get_catalog(request)

    try:
        phase_policy = config.phase_policy()
    except ValueError as e:
        raise HTTPException(status_code=422, detail=f"Invalid phase tables: {e}")

    assembler = ProgramAssembler(
        catalog,
        phase_policy=phase_policy,
        periodization_model=config.get_periodization_model(),
        strict_fingerprint=strict,
    )

    try:
        result = assembler.assemble(assembly_request)
    except (CatalogEmptyError, StaleDiffError, ValueError) as e:
        raise HTTPException(status_code=422, detail=str(e))

    if payload.get("oneRepMaxes"):
        try:
            one_rep_maxes = one_rep_max_map(payload["oneRepMaxes"])
        except (KeyError, TypeError, ValueError) as e:
            raise HTTPException(status_code=422, detail=f"Invalid oneRepMaxes: {e}")
        result.program.weeks = apply_one_rep_max_weights(
            result.program.weeks, one_rep_maxes, config.get_weight_increment()
        )

    if payload.get("save"):
        await get_repository(request).save(result.program)

    return result.to_dict()


@router.get("")
async def list_programs(request: Request, user_id: str | None = None):
    """List stored programs, optionally for one user."""
    programs = await get_repository(request).list_all(user_id)
    return {
        "programs": [
            {
                "id": p.id,
                "name": p.name,
                "userId": p.user_id,
                "durationWeeks": p.duration_weeks,
                "daysPerWeek": p.days_per_week,
                "createdAt": p.created_at.isoformat() if p.created_at else None,
            }
            for p in programs
        ]
    }


@router.get("/{program_id}")
async def get_program(request: Request, program_id: str):
    """Get a stored program."""
    data = await get_repository(request).get_raw(program_id)
    if data is None:
        raise HTTPException(status_code=404, detail="Program not found")
    return data


@router.delete("/{program_id}")
async def delete_program(request: Request, program_id: str):
    """Delete a stored program."""
    if not await get_repository(request).delete(program_id):
        raise HTTPException(status_code=404, detail="Program not found")
    return {"status": "deleted", "id": program_id}
