from fastapi import FastAPI
from routes.hub import router as hub_router
from routes.presets import router as presets_router
from routes.status import router as status_router


app = FastAPI(title="Videohub Preset Manager")
app.include_router(hub_router)
app.include_router(presets_router)
app.include_router(status_router)
