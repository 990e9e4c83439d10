"""Admin API endpoints with simple token auth."""

from __future__ import annotations

from dataclasses import asdict
from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, Header, HTTPException, Request, status

if TYPE_CHECKING:
    from diet_tracker.containers import AppContainer

router = APIRouter(prefix="/admin", tags=["admin"])


def _get_admin_token(request: Request) -> str:
    container: AppContainer = request.app.state.container
    return container.settings.admin_token


async def require_admin(
    x_admin_token: str | None = Header(default=None),
    admin_token: str = Depends(_get_admin_token),
) -> None:
    """Ensure requests include a valid admin token."""
    if not x_admin_token or x_admin_token != admin_token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)


@router.get("/health", dependencies=[Depends(require_admin)])
async def admin_health() -> dict[str, str]:
    """Admin health check endpoint."""
    return {"status": "ok"}


@router.post("/jobs/daily-reset", dependencies=[Depends(require_admin)])
async def run_daily_reset(request: Request) -> dict[str, object]:
    """Run the daily ledger reset now; used by external cron triggers."""
    container: AppContainer = request.app.state.container
    report = await container.reset_job.run()
    return {"report": asdict(report)}


@router.get("/jobs", dependencies=[Depends(require_admin)])
async def list_jobs(request: Request) -> dict[str, object]:
    """Return jobs registered with the in-process scheduler."""
    container: AppContainer = request.app.state.container
    return {"jobs": container.reset_scheduler.list_jobs()}
