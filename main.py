"""
Drill Timing Optimizer API

FastAPI backend that:
1. Authenticates the editor's Cognito user
2. Receives a drill state (players + action sequences)
3. Synchronizes passes with receiving runs
4. Returns the adjusted drill state to the editor
"""

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel
from typing import Any, List
import tempfile
import base64
import logging
import os

from drill_timing import __version__
from drill_timing.auth import AuthUser, require_auth
from drill_timing.config import get_settings
from drill_timing.diagnostics import compute_idle_time, optimized_schedule
from drill_timing.optimizer import DrillOptimizer
from drill_timing.renderer import render
from drill_timing.schema import DrillState
from drill_timing.validator import validate_drill

settings = get_settings()

logging.basicConfig(
    level=settings.log_level,
    format="[%(levelname)s] %(name)s: %(message)s"
)
logger = logging.getLogger("drill_timing.api")

if settings.dev_mode:
    logger.warning("[AUTH] COGNITO_USER_POOL_ID not set, tokens are decoded without verification")

# ============================================================
# FASTAPI APP SETUP
# ============================================================

app = FastAPI(
    title="Drill Timing Optimizer API",
    description="Synchronize drill players around ball releases",
    version=__version__
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ============================================================
# REQUEST/RESPONSE MODELS
# ============================================================

class HealthResponse(BaseModel):
    """Health check response"""
    status: str
    version: str


class IdleTimeResponse(BaseModel):
    idle_time: float


class IssueModel(BaseModel):
    message: str
    severity: str


class ValidationResponse(BaseModel):
    is_valid: bool
    issues: List[IssueModel]


class TimelineResponse(BaseModel):
    """Optimized drill plus its timeline chart"""
    drill_state: dict
    svg: str  # Base64 encoded SVG
    idle_time: float
    sync_count: int


async def read_drill_json(request: Request) -> Any:
    """Raw JSON body, unchecked; a body that is not JSON is a generic 500"""
    try:
        return await request.json()
    except ValueError:
        logger.exception("[REQUEST] Body is not valid JSON")
        raise HTTPException(status_code=500, detail="Internal Server Error")


def _parse_state(drill_json: Any) -> DrillState:
    return DrillState.model_validate(drill_json)


# ============================================================
# API ENDPOINTS
# ============================================================

@app.get("/", response_model=HealthResponse)
def health_check():
    """Health check endpoint"""
    return HealthResponse(status="healthy", version=__version__)


@app.get("/health", response_model=HealthResponse)
def health():
    """Health check endpoint"""
    return HealthResponse(status="healthy", version=__version__)


@app.post("/optimize")
@app.post("/api/optimize-drill")
def optimize_drill(user: AuthUser = Depends(require_auth), drill_json: Any = Depends(read_drill_json)):
    """
    Optimize a drill state.

    The body is parsed here rather than by FastAPI so that structurally
    broken drills surface as a generic 500, like any optimizer fault.
    """
    try:
        state = _parse_state(drill_json)
        logger.info("[OPTIMIZE] %s sent %d players for optimization", user.sub, len(state.players))
        DrillOptimizer().optimize(state)
        return state.to_json_dict()

    except Exception:
        logger.exception("[OPTIMIZE] Error optimizing drill")
        raise HTTPException(status_code=500, detail="Internal Server Error")


@app.post("/api/idle-time", response_model=IdleTimeResponse)
def idle_time(user: AuthUser = Depends(require_auth), drill_json: Any = Depends(read_drill_json)):
    """Idle time of a drill as sent, without optimizing it"""
    try:
        return IdleTimeResponse(idle_time=compute_idle_time(_parse_state(drill_json)))

    except Exception:
        logger.exception("[IDLE] Error computing idle time")
        raise HTTPException(status_code=500, detail="Internal Server Error")


@app.post("/api/validate-drill", response_model=ValidationResponse)
def validate(user: AuthUser = Depends(require_auth), drill_json: Any = Depends(read_drill_json)):
    """Structural diagnostics; never blocks optimization"""
    try:
        return validate_drill(_parse_state(drill_json)).to_dict()

    except Exception:
        logger.exception("[VALIDATE] Error validating drill")
        raise HTTPException(status_code=500, detail="Internal Server Error")


@app.post("/api/render-timeline", response_model=TimelineResponse)
def render_timeline(user: AuthUser = Depends(require_auth), drill_json: Any = Depends(read_drill_json)):
    """
    Optimize a drill and render its schedule to SVG.

    Returns the optimized state along with the chart.
    """
    try:
        state = _parse_state(drill_json)
        report = DrillOptimizer().run(state)

        with tempfile.NamedTemporaryFile(suffix=".svg", delete=False) as f:
            svg_path = f.name

        try:
            render(
                optimized_schedule(state, report.completion_times),
                svg_path,
                report.ball_arrivals(state)
            )

            with open(svg_path, 'r') as f:
                svg_content = f.read()
        finally:
            os.unlink(svg_path)

        logger.info("[RENDER] Timeline SVG generated: %d bytes", len(svg_content))

        return TimelineResponse(
            drill_state=state.to_json_dict(),
            svg=base64.b64encode(svg_content.encode()).decode(),
            idle_time=compute_idle_time(state),
            sync_count=len(report.sync_edges),
        )

    except Exception:
        logger.exception("[RENDER] Error rendering timeline")
        raise HTTPException(status_code=500, detail="Internal Server Error")


# ============================================================
# RUN SERVER
# ============================================================

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
