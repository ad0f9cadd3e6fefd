# routes/hub.py
from fastapi import APIRouter, HTTPException
from hub_driver import HubError
from services.hub_state import PreconditionError
from services.session import SESSION
from vendor.parsers import device_info

router = APIRouter(prefix="/api")


@router.post("/hub/read")
def read_hub():
    """Read labels and routing from the hub into the session."""
    try:
        res = SESSION.refresh_hub()
    except HubError as e:
        raise HTTPException(status_code=502, detail=f"Cannot connect to Videohub: {e}")
    return {"status": "ok", "skipped": len(res.skipped), "hub": res.state.summary()}


@router.post("/hub/read-full")
def read_hub_full():
    """
    Same as /hub/read plus the device information block and the raw
    preamble, for inspecting everything the hub reported.
    """
    try:
        res = SESSION.refresh_hub()
    except HubError as e:
        raise HTTPException(status_code=502, detail=f"Cannot connect to Videohub: {e}")
    return {
        "status": "ok",
        "device_info": device_info(res.preamble),
        "preamble": res.preamble,
        "skipped": res.skipped,
        "hub": res.state.summary(),
    }


@router.post("/hub/apply")
def apply_preset():
    """Write the loaded preset's routing (no labels) to the hub."""
    try:
        outcomes = SESSION.apply_loaded()
    except PreconditionError as e:
        return {"status": "noop", "reason": str(e)}
    except HubError as e:
        raise HTTPException(status_code=502, detail=f"Cannot connect to Videohub: {e}")
    return {
        "status": "ok" if all(o.ok for o in outcomes) else "partial",
        "preset": SESSION.loaded_preset_name,
        "outcomes": [o.to_dict() for o in outcomes],
    }


@router.get("/compare")
def compare():
    try:
        diffs = SESSION.compare()
    except PreconditionError as e:
        return {"status": "noop", "reason": str(e)}
    return {
        "status": "ok",
        "preset": SESSION.loaded_preset_name,
        "differences": sum(1 for d in diffs if d.is_different),
        "rows": [d.to_dict() for d in diffs],
    }
