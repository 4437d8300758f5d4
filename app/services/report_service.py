"""
Event reporting service
"""

from typing import Dict, Iterable, List, Optional, Tuple

from sqlalchemy.orm import Session

from app.schemas.event import CompiledReportRow, DetailedReportRow
from app.services.repositories import EventRepo, TaskRepo


def _percent(part: int, whole: int) -> float:
    if not whole:
        return 0.0
    return round(part / whole * 100, 2)


def aggregate_compiled(rows: Iterable[Dict]) -> List[CompiledReportRow]:
    """Group event rows by (year, event_type), counting events and summing budgets.

    Each row carries ``year``, ``event_type``, ``total_budget`` and optionally
    ``event_name`` and ``team``. Rows without a year are grouped under None
    and sorted last.
    """
    groups: Dict[Tuple[Optional[int], str], Dict] = {}
    for row in rows:
        key = (row.get("year"), row["event_type"])
        group = groups.setdefault(key, {
            "year": key[0],
            "event_type": key[1],
            "event_count": 0,
            "total_budget": 0.0,
            "event_names": [],
            "budget_by_team": {},
        })
        budget = float(row.get("total_budget") or 0)
        group["event_count"] += 1
        group["total_budget"] += budget
        if row.get("event_name"):
            group["event_names"].append(row["event_name"])
        team = row.get("team") or "N/A"
        group["budget_by_team"][team] = group["budget_by_team"].get(team, 0.0) + budget

    ordered = sorted(groups.values(), key=lambda g: (g["year"] is None, g["year"] or 0, g["event_type"]))
    return [CompiledReportRow(**group) for group in ordered]


class ReportService:
    """Service for compiled and detailed event reports"""

    @staticmethod
    def compiled_report(db: Session) -> List[CompiledReportRow]:
        events = EventRepo.list_all(db)
        return aggregate_compiled(
            {
                "year": event.date.year if event.date else None,
                "event_type": event.event_type,
                "total_budget": event.total_budget,
                "event_name": event.event_name,
                "team": event.team,
            }
            for event in events
        )

    @staticmethod
    def detailed_report(
        db: Session,
        event_name: Optional[str] = None,
        team: Optional[str] = None,
        year: Optional[int] = None,
    ) -> List[DetailedReportRow]:
        events = EventRepo.search(db, event_name=event_name, team=team, year=year)
        counts = TaskRepo.status_counts_by_event(db, [event.id for event in events])

        report = []
        for event in events:
            by_status = counts.get(event.id, {})
            completed = by_status.get("Completed", 0)
            in_progress = by_status.get("In Progress", 0)
            pending = by_status.get("Pending", 0)
            total_tasks = completed + in_progress + pending
            # Check-in is not tracked, so every RSVP counts as attended
            total_rsvp = len(event.attendees)
            total_attended = total_rsvp

            report.append(DetailedReportRow(
                event_id=event.id,
                event_name=event.event_name,
                event_type=event.event_type,
                year=event.date.year if event.date else None,
                team=event.team,
                total_rsvp=total_rsvp,
                total_attended=total_attended,
                attendance_percentage=_percent(total_attended, total_rsvp),
                total_tasks=total_tasks,
                completed_tasks=completed,
                in_progress_tasks=in_progress,
                pending_tasks=pending,
                task_completion_rate=_percent(completed, total_tasks),
                total_budget=event.total_budget or 0,
            ))
        return report
