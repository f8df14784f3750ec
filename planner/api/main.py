import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from planner.api.routes.extraction import router as extraction_router
from planner.api.routes.schedule import router as schedule_router
from planner.config import settings

logging.basicConfig(level=settings.log_level)

app = FastAPI(
    title="Homework Planner API",
    description="Deadline-driven daily planning and task-list extraction",
    version="0.1.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:3000",
        "http://localhost:5173",
    ],
    allow_origin_regex=r"http://localhost:\d+",
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(schedule_router)
app.include_router(extraction_router)


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "healthy"}
