"""Counter reconciliation.

Scans every denormalized counter and compares it with the cardinality of the
set it summarizes. Drift is logged at WARNING and, when ``fix`` is set,
overwritten with the true value. Normal writes already recompute counters,
so drift here points at rows written outside the service (manual SQL,
restores, older code paths).
"""

import logging
from dataclasses import dataclass, field
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from inkwell.engagement.service import comment_set_size, like_set_size
from inkwell.models.comment import Comment, Reply
from inkwell.models.enums import LikeTargetType
from inkwell.models.post import Post

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CounterDrift:
    table: str
    row_id: UUID
    column: str
    stored: int
    actual: int


@dataclass
class ReconcileReport:
    scanned: int = 0
    fixed: bool = False
    drifts: list[CounterDrift] = field(default_factory=list)

    @property
    def drift_count(self) -> int:
        return len(self.drifts)


def _checks():
    """(model, primary key, counter column, true value) for every counter."""
    return [
        (Post, Post.post_id, Post.like_count, like_set_size(LikeTargetType.POST, Post.post_id)),
        (Post, Post.post_id, Post.comment_count, comment_set_size(Post.post_id)),
        (
            Comment,
            Comment.comment_id,
            Comment.like_count,
            like_set_size(LikeTargetType.COMMENT, Comment.comment_id),
        ),
        (Reply, Reply.reply_id, Reply.like_count, like_set_size(LikeTargetType.REPLY, Reply.reply_id)),
    ]


async def reconcile_counters(session: AsyncSession, fix: bool = True) -> ReconcileReport:
    report = ReconcileReport(fixed=fix)
    for model, pk, column, actual in _checks():
        rows = (await session.execute(select(pk, column, actual))).all()
        report.scanned += len(rows)
        for row_id, stored, true_value in rows:
            if stored == true_value:
                continue
            drift = CounterDrift(
                table=model.__tablename__,
                row_id=row_id,
                column=column.key,
                stored=stored,
                actual=true_value,
            )
            report.drifts.append(drift)
            logger.warning(
                "Counter drift on %s %s.%s: stored=%d actual=%d",
                drift.table,
                row_id,
                drift.column,
                stored,
                true_value,
            )
            if fix:
                await session.execute(
                    update(model)
                    .where(pk == row_id)
                    .values({column.key: true_value, "updated_at": model.updated_at})
                    .execution_options(synchronize_session=False)
                )
    logger.info(
        "Reconciled %d counters: %d drifted%s",
        report.scanned,
        report.drift_count,
        " (fixed)" if fix and report.drifts else "",
    )
    return report
