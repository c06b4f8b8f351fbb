"""Data loading, validation and aggregation for the Recruiter Productivity Ranking."""

import json
import logging
import math
from datetime import date, datetime, timedelta
from typing import Dict, Iterable, List, Optional, Tuple
from src.models import Recruiter, Requisition, RecruiterAggregate
from src.config import DEFAULT_DISPLAY_NAME, KNOWN_STATUSES, TODAY

logger = logging.getLogger(__name__)


def _parse_date(value: Optional[str]) -> Optional[date]:
    if value is None or value == '':
        return None
    if not isinstance(value, str):
        raise ValueError(f"Expected a YYYY-MM-DD date string, got {value!r}")
    # Timestamps from the backend carry a time part; only the day matters
    return datetime.strptime(value[:10], '%Y-%m-%d').date()


def _parse_status(row: Dict) -> str:
    status = row.get('status')
    if not isinstance(status, str) or not status.strip():
        raise ValueError(f"Requisition {row.get('id')} has no status, got {status!r}")
    return status


def _load_rows(raw_json: str, label: str) -> List[Dict]:
    data = json.loads(raw_json)
    if not isinstance(data, list) or not all(isinstance(r, dict) for r in data):
        raise ValueError(f"{label} export must be a JSON list of objects")
    return data


def parse_uploaded_data(requisitions_json: str, recruiters_json: str) -> Tuple[Dict[str, Recruiter], List[Requisition]]:
    """
    Parse uploaded JSON exports into Recruiter and Requisition objects.

    Raises:
        ValueError: If a row has no usable status or a date is not a date string
        KeyError: If a required id field is missing
    """
    requisitions_data = _load_rows(requisitions_json, "Requisitions")
    recruiters_data = _load_rows(recruiters_json, "Recruiters")

    recruiters = {
        r['id']: Recruiter(
            id=r['id'],
            name=r.get('name') or DEFAULT_DISPLAY_NAME
        )
        for r in recruiters_data
    }

    requisitions = [
        Requisition(
            id=r['id'],
            recruiter_id=r['recruiter_id'],
            status=_parse_status(r),
            request_date=_parse_date(r.get('request_date')),
            close_date=_parse_date(r.get('close_date'))
        )
        for r in requisitions_data
    ]

    logger.info("Parsed %d recruiters and %d requisitions", len(recruiters), len(requisitions))
    return recruiters, requisitions


def load_data(requisitions_path: str, recruiters_path: str) -> Tuple[Dict[str, Recruiter], List[Requisition]]:
    """Load requisition and recruiter exports from disk."""
    with open(requisitions_path, 'r', encoding='utf-8') as f:
        requisitions_json = f.read()

    with open(recruiters_path, 'r', encoding='utf-8') as f:
        recruiters_json = f.read()

    return parse_uploaded_data(requisitions_json, recruiters_json)


def validate_data(recruiters: Dict, requisitions: List) -> Tuple[bool, str]:
    """Validate uploaded data for consistency."""
    errors = []

    for requisition in requisitions:
        if requisition.recruiter_id not in recruiters:
            errors.append(f"Requisition {requisition.id} assigned to unknown recruiter {requisition.recruiter_id}")
        if requisition.status.strip().lower() not in KNOWN_STATUSES:
            errors.append(f"Requisition {requisition.id} has unknown status '{requisition.status}'")

    if not recruiters:
        errors.append("No recruiters found in uploaded file")

    if errors:
        return False, "\n".join(errors)
    return True, f"✅ Loaded {len(recruiters)} recruiters and {len(requisitions)} requisitions"


def _in_window(requisition: Requisition, start: date, end: date) -> bool:
    anchor = requisition.close_date or requisition.request_date
    if anchor is None:
        return False
    return start < anchor <= end


def aggregate_requisitions(
    recruiters: Dict[str, Recruiter],
    requisitions: Iterable[Requisition],
    reference_date: Optional[date] = None,
    window_days: Optional[int] = None
) -> List[RecruiterAggregate]:
    """
    Aggregate closed requisitions into one RecruiterAggregate per recruiter.

    Closed requisitions missing a date still count as closed but are left out
    of the average. Recruiters with no dated closure get an average of None.

    Args:
        recruiters: Recruiters by id, in display order
        requisitions: All requisitions from the export
        reference_date: End of the rolling window (defaults to today)
        window_days: Rolling window length, or None for all time

    Returns:
        One aggregate per recruiter, in recruiter order
    """
    closed_counts = {rec_id: 0 for rec_id in recruiters}
    days_by_recruiter: Dict[str, List[int]] = {rec_id: [] for rec_id in recruiters}

    end = reference_date or TODAY
    start = end - timedelta(days=window_days) if window_days is not None else None

    for requisition in requisitions:
        if not requisition.is_closed:
            continue
        if requisition.recruiter_id not in recruiters:
            logger.warning("Skipping requisition %s: unknown recruiter %s",
                           requisition.id, requisition.recruiter_id)
            continue
        if start is not None and not _in_window(requisition, start, end):
            continue

        closed_counts[requisition.recruiter_id] += 1

        if requisition.has_both_dates:
            if requisition.close_date < requisition.request_date:
                logger.warning("Requisition %s closes before it was requested, counting 1 day",
                               requisition.id)
            days_by_recruiter[requisition.recruiter_id].append(requisition.days_to_close)

    aggregates = []
    for rec_id, recruiter in recruiters.items():
        days = days_by_recruiter[rec_id]
        aggregates.append(RecruiterAggregate(
            identifier=rec_id,
            display_name=recruiter.name,
            closed_count=closed_counts[rec_id],
            average_days_to_close=sum(days) / len(days) if days else None
        ))

    return aggregates


# Field names used by the backend ranking function
AGGREGATE_FIELD_ALIASES = {
    'identifier': ('identifier', 'user_id'),
    'display_name': ('display_name', 'nombre_reclutador'),
    'closed_count': ('closed_count', 'vacantes_cerradas'),
    'average_days_to_close': ('average_days_to_close', 'promedio_dias_cierre'),
}


def _field(row: Dict, name: str):
    for key in AGGREGATE_FIELD_ALIASES[name]:
        if key in row:
            return row[key]
    return None


def sanitize_aggregate_row(row: Dict) -> RecruiterAggregate:
    """
    Turn a pre-aggregated backend row into a RecruiterAggregate.

    Accepts both this package's field names and the backend ranking
    function's (user_id, nombre_reclutador, vacantes_cerradas,
    promedio_dias_cierre).

    Raises:
        ValueError: If the row cannot be ranked
    """
    if not isinstance(row, dict):
        raise ValueError(f"Row must be an object, got {row!r}")

    identifier = _field(row, 'identifier')
    if not identifier:
        raise ValueError("Row is missing an identifier")

    closed_count = _field(row, 'closed_count')
    if closed_count is None:
        closed_count = 0
    if isinstance(closed_count, bool) or not isinstance(closed_count, (int, float)):
        raise ValueError(f"Recruiter {identifier}: closed_count must be a number, got {closed_count!r}")
    if not math.isfinite(closed_count) or closed_count != int(closed_count):
        raise ValueError(f"Recruiter {identifier}: closed_count must be a whole number, got {closed_count!r}")
    if closed_count < 0:
        raise ValueError(f"Recruiter {identifier}: closed_count cannot be negative ({closed_count})")

    days = _field(row, 'average_days_to_close')
    if days is not None:
        if isinstance(days, bool) or not isinstance(days, (int, float)):
            raise ValueError(f"Recruiter {identifier}: average_days_to_close must be a number, got {days!r}")
        if not math.isfinite(days):
            logger.warning("Recruiter %s: non-finite average_days_to_close %r treated as missing",
                           identifier, days)
            days = None
        elif days < 0:
            raise ValueError(f"Recruiter {identifier}: average_days_to_close cannot be negative ({days})")

    display_name = _field(row, 'display_name')
    if not isinstance(display_name, str):
        display_name = ''

    return RecruiterAggregate(
        identifier=str(identifier),
        display_name=display_name.strip() or DEFAULT_DISPLAY_NAME,
        closed_count=int(closed_count),
        average_days_to_close=float(days) if days is not None else None
    )


def parse_aggregates(rows: Iterable[Dict]) -> Tuple[List[RecruiterAggregate], List[str]]:
    """Sanitize pre-aggregated rows, collecting the ones that cannot be ranked."""
    aggregates = []
    errors = []
    seen = set()

    for index, row in enumerate(rows):
        try:
            aggregate = sanitize_aggregate_row(row)
        except ValueError as e:
            errors.append(f"Row {index}: {e}")
            continue

        if aggregate.identifier in seen:
            errors.append(f"Row {index}: duplicate recruiter {aggregate.identifier}")
            continue

        seen.add(aggregate.identifier)
        aggregates.append(aggregate)

    for error in errors:
        logger.warning("Rejected aggregate row. %s", error)

    return aggregates, errors


def parse_ranking_export(ranking_json: str) -> Tuple[List[RecruiterAggregate], List[str]]:
    """
    Parse a ranking export already aggregated per recruiter by the backend.

    Raises:
        ValueError: If the export is not a JSON list
    """
    rows = json.loads(ranking_json)
    if not isinstance(rows, list):
        raise ValueError("Ranking export must be a JSON list of recruiter rows")

    aggregates, errors = parse_aggregates(rows)
    logger.info("Parsed %d ranking rows, rejected %d", len(aggregates), len(errors))
    return aggregates, errors
