from __future__ import annotations

from fastapi import Depends, FastAPI
from sqlalchemy.engine import Engine

from driftboard.api.deps import get_board_engine
from driftboard.api.routes_metrics import router as metrics_router
from driftboard.api.routes_predict import router as predict_router
from driftboard.db.engine import ping_board

app = FastAPI(title="driftboard")

# prediction endpoint lives at the root so the container exposes /predict
app.include_router(predict_router)
# history read-back under /api
app.include_router(metrics_router, prefix="/api")


@app.get("/health")
def health(engine: Engine = Depends(get_board_engine)) -> dict:
    ping = ping_board(engine)
    return {
        "status": "ok" if ping.ok else "degraded",
        "board": {"ok": ping.ok, "detail": ping.detail},
    }
