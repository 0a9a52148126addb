"""Aplicação FastAPI"""

import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .. import __version__
from ..database import RuleSetRepository, SessionLocal, init_db
from ..logging_config import log
from .routers import audit, rulesets, simulate


def _seed_defaults():
    """Grava os defaults como RuleSets globais (SIMULADORES_SEED_DEFAULTS=true)"""
    db = SessionLocal()
    try:
        RuleSetRepository(db).seed_defaults()
    finally:
        db.close()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Ciclo de vida da aplicação"""
    init_db()
    if os.getenv("SIMULADORES_SEED_DEFAULTS", "false").lower() == "true":
        _seed_defaults()
    log.info(f"Simuladores API {__version__} iniciada")
    yield


app = FastAPI(
    title="Simuladores Contábeis API",
    description="Simuladores trabalhistas e tributários parametrizados por RuleSets versionados",
    version=__version__,
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(
    rulesets.router,
    prefix="/api/v1/rulesets",
    tags=["RuleSets"]
)

app.include_router(
    simulate.router,
    prefix="/api/v1/simulate",
    tags=["Simuladores"]
)

app.include_router(
    audit.router,
    prefix="/api/v1/audit",
    tags=["Auditoria"]
)


@app.get("/")
async def root():
    return {
        "message": "Simuladores Contábeis API",
        "version": __version__,
        "docs": "/docs"
    }


@app.get("/health")
async def health_check():
    return {"status": "healthy"}
