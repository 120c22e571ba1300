import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import settings
from .routers import cable_quotes, materials, processes

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("cablecost")

app = FastAPI(
    title="Cable Quoting Engine",
    description=f"Cable geometry, material and cost calculator for {settings.COMPANY_NAME}",
    version="1.0.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(cable_quotes.router, prefix="/api")
app.include_router(processes.router, prefix="/api")
app.include_router(materials.router, prefix="/api")


@app.get("/health")
def health():
    return {"status": "ok", "app": "cable-quoting-engine"}
