import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .core.db import Base, engine
from .core.config import get_settings
from .api import auth, admins, companies, products, schedule
from . import models  # noqa: F401  registers tables on Base.metadata

settings = get_settings()

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

Base.metadata.create_all(bind=engine)

app = FastAPI(title=settings.app_name)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth.router, prefix="/api/auth", tags=["auth"])
app.include_router(admins.router, prefix="/api/admins", tags=["admins"])
app.include_router(companies.router, prefix="/api/companies", tags=["companies"])
app.include_router(products.router, prefix="/api/companies", tags=["products"])
app.include_router(schedule.router, prefix="/api", tags=["schedule"])


@app.get("/health")
def health():
    return {"status": "ok"}
