import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

import config
from fitplan.database import engine, Base
import fitplan.models  # noqa: F401  (registers tables on Base.metadata)
from fitplan.api import billing, login, users

logger = logging.getLogger(__name__)

# Flat-file store: tables are created on import, no migrations
Base.metadata.create_all(bind=engine)

app = FastAPI(title="AI Fitness Planner API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(login.router)
app.include_router(users.router)
app.include_router(billing.router)


# Root endpoint
@app.get("/")
def root():
    return {
        "message": "AI Fitness Planner Backend Server is running!",
        "docs": "/docs",
        "redoc": "/redoc"
    }


# Health check endpoint
@app.get("/health")
def health_check():
    return {"status": "healthy", "message": "API is running"}
