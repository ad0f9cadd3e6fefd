# routes/presets.py
from fastapi import APIRouter, HTTPException, Path as FPath
from pydantic import BaseModel
from services.hub_state import PreconditionError
from services.presets import PresetError
from services.session import SESSION

router = APIRouter(prefix="/api/presets")


class SaveRequest(BaseModel):
    name: str = "preset"
    description: str = ""
    overwrite: bool = False


@router.get("")
def list_presets():
    return {"presets": [{"name": n, "description": d} for n, d in SESSION.list_presets()]}


@router.post("")
def save_preset(req: SaveRequest):
    """Save the last hub read as a preset file."""
    try:
        path = SESSION.save_current(req.name, req.description, overwrite=req.overwrite)
    except PreconditionError as e:
        return {"status": "noop", "reason": str(e)}
    except PresetError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"status": "ok", "path": str(path)}


@router.post("/{name}/load")
def load_preset(name: str = FPath(..., min_length=1)):
    try:
        state = SESSION.load(name)
    except FileNotFoundError:
        raise HTTPException(status_code=404, detail=f"Preset not found: {name}")
    except PresetError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"status": "ok", "preset": SESSION.loaded_preset_name, "data": state.summary()}


@router.delete("/{name}")
def delete_preset(name: str = FPath(..., min_length=1)):
    try:
        path = SESSION.delete(name)
    except FileNotFoundError:
        raise HTTPException(status_code=404, detail=f"Preset not found: {name}")
    except PresetError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"status": "ok", "deleted": str(path)}
