"""
Classroom Server - quiz attempts, assignments and AI helpers

FastAPI server with:
- Timed quiz attempts with server-side countdown
- Student quiz catalog backed by the document store
- Quiz authoring and publishing for teachers
- Assignment and coding lab submission and grading
- Generated quizzes, assignments and grading feedback
- Simulated plagiarism and lesson plan tools
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

import app_state
from classroom.core import configure_logging, get_config, get_logger
from routers import assignments_router, coding_lab_router, quiz_router, tools_router

logger = get_logger("server")


# =============================================================================
# FASTAPI APP
# =============================================================================


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage app lifecycle."""
    config = get_config()
    configure_logging(config.log_level)
    logger.info(
        "Starting Classroom",
        store_backend=config.store_backend.value,
        generation_enabled=config.generation_enabled,
    )
    yield
    await app_state.cleanup()
    logger.info("Classroom stopped")


app = FastAPI(
    title="Classroom",
    description="Quiz and coursework backend",
    version="1.0.0",
    lifespan=lifespan,
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=get_config().cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "DELETE"],
    allow_headers=["*"],
)

app.include_router(quiz_router)
app.include_router(assignments_router)
app.include_router(coding_lab_router)
app.include_router(tools_router)


# =============================================================================
# HEALTH ENDPOINTS
# =============================================================================


@app.get("/")
async def root():
    """Health check."""
    return {"status": "ok", "message": "Classroom API"}


@app.get("/health")
async def health_check():
    """Detailed health check."""
    config = get_config()
    return {
        "status": "healthy",
        "store_backend": config.store_backend.value,
        "store_ready": app_state.store is not None,
        "active_attempts": len(app_state.registry) if app_state.registry is not None else 0,
        "generation_enabled": config.generation_enabled,
    }


# =============================================================================
# MAIN
# =============================================================================

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=3000)
