"""
Engagement: admin-facing routes.

Routes:
  POST /api/v1/admin/engagement/reconcile   Compare every counter with its set; optionally fix

Requires: ADMIN or SUPER_ADMIN role.
"""
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from inkwell.auth.dependencies import require_admin
from inkwell.database import get_db
from inkwell.engagement.reconcile import reconcile_counters
from inkwell.engagement.schemas import CounterDriftItem, ReconcileResponse
from inkwell.shared.models import CurrentUser

router = APIRouter(prefix="/admin/engagement", tags=["admin"])


@router.post(
    "/reconcile",
    response_model=ReconcileResponse,
    summary="[Admin] Reconcile engagement counters",
    description="Set fix=false for a dry run that only reports drift.",
)
async def reconcile(
    fix: bool = Query(True, description="Rewrite drifted counters."),
    admin: CurrentUser = Depends(require_admin),
    session: AsyncSession = Depends(get_db),
) -> ReconcileResponse:
    report = await reconcile_counters(session, fix=fix)
    return ReconcileResponse(
        scanned=report.scanned,
        fixed=report.fixed,
        drifts=[CounterDriftItem.model_validate(d) for d in report.drifts],
    )
