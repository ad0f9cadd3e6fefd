from fastapi import APIRouter, HTTPException
from pydantic import BaseModel
from services.session import SESSION

router = APIRouter(prefix="/api")


class TargetRequest(BaseModel):
    host: str
    port: int | None = None


@router.get("/status")
def status():
    return {
        "host": SESSION.host,
        "port": SESSION.port,
        "hub_read": SESSION.hub_read,
        "loaded_preset": SESSION.loaded_preset_name,
    }


@router.post("/target")
def set_target(req: TargetRequest):
    """Point the session at another hub. Previously read state is kept."""
    try:
        SESSION.set_target(req.host, req.port)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"status": "ok", "host": SESSION.host, "port": SESSION.port}
