"""Signal aggregator: raw fact rows to a fixed-shape SignalSet.

Rows are duck-typed (ORM rows or any object with the same attributes):

  jobs:        start_date, end_date, verification_status
  references:  status, rating, sentiment
  disputes:    status
  rehire_rows: rehire_eligible
  fraud_flags: confidence
"""
import logging
from datetime import date, datetime
from typing import Any, Iterable, Optional

from trustscore.models.enums import COUNTED_JOB_STATUSES
from trustscore.models.signals import SignalSet
from trustscore.scoring.utils import safe_number

logger = logging.getLogger(__name__)

DAYS_PER_MONTH = 30.44
RESPONDED_STATUS = "responded"
RESOLVED_STATUS = "resolved"


def _as_date(value: Any) -> Optional[date]:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value)[:10])
    except ValueError:
        return None


def tenure_months(start: Any, end: Any = None, as_of: Optional[date] = None) -> float:
    """Months between ``start`` and ``end`` (open-ended jobs run to ``as_of``)."""
    start_date = _as_date(start)
    if start_date is None:
        return 0.0
    end_date = _as_date(end) or as_of or date.today()
    if end_date < start_date:
        return 0.0
    return (end_date - start_date).days / DAYS_PER_MONTH


def counted_jobs(jobs: Iterable[Any]) -> list[Any]:
    """Jobs that count toward tenure: verified or matched."""
    return [
        job for job in jobs
        if str(getattr(job, "verification_status", "") or "").lower() in COUNTED_JOB_STATUSES
    ]


def gap_months(jobs: Iterable[Any], as_of: Optional[date] = None) -> float:
    """Uncovered months between consecutive jobs; overlaps do not count."""
    today = as_of or date.today()
    spans = []
    for job in jobs:
        start = _as_date(job.start_date)
        if start is None:
            continue
        end = _as_date(job.end_date) or today
        if end >= start:
            spans.append((start, end))
    spans.sort()

    total = 0.0
    covered_until: Optional[date] = None
    for start, end in spans:
        if covered_until is not None and start > covered_until:
            total += (start - covered_until).days / DAYS_PER_MONTH
        if covered_until is None or end > covered_until:
            covered_until = end
    return total


def aggregate_signals(
    jobs: Iterable[Any] = (),
    references: Iterable[Any] = (),
    disputes: Iterable[Any] = (),
    rehire_rows: Iterable[Any] = (),
    fraud_flags: Iterable[Any] = (),
    as_of: Optional[date] = None,
) -> SignalSet:
    """Reduce an entity's fact rows to a SignalSet."""
    today = as_of or date.today()
    verified = counted_jobs(jobs)
    tenure = sum(tenure_months(j.start_date, j.end_date, today) for j in verified)

    reference_list = list(references)
    responded = [r for r in reference_list if str(r.status or "").lower() == RESPONDED_STATUS]
    ratings = [safe_number(r.rating, 0.0) for r in responded if r.rating is not None]
    sentiments = [safe_number(r.sentiment, 0.0) for r in responded if r.sentiment is not None]

    dispute_list = list(disputes)
    resolved = sum(1 for d in dispute_list if str(d.status or "").lower() == RESOLVED_STATUS)

    flags = list(fraud_flags)
    confidences = [safe_number(f.confidence, 0.0) for f in flags if f.confidence is not None]

    signals = SignalSet(
        tenure_months=tenure,
        verified_job_count=len(verified),
        reference_total=len(reference_list),
        reference_responded=len(responded),
        dispute_total=len(dispute_list),
        dispute_resolved=resolved,
        gap_months=gap_months(verified, today),
        rehire_eligible=any(bool(r.rehire_eligible) for r in rehire_rows),
        fraud_score=max(confidences) if confidences else None,
        fraud_count=len(flags),
        review_count=len(responded),
        sentiment_average=sum(sentiments) / len(sentiments) if sentiments else None,
        average_rating=sum(ratings) / len(ratings) if ratings else None,
    )
    logger.debug(f"Aggregated signals: {signals.model_dump()}")
    return signals
