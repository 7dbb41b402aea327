"""Schedule template management and iCalendar export."""

import logging
import re
from datetime import date, datetime, timedelta
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import pytz
from icalendar import Calendar, Event
from sqlalchemy.orm import Session

from config import (
    ICS_DEFAULT_FILENAME,
    ICS_EVENT_DURATION_MINUTES,
    ICS_PRODID,
    ICS_UID_DOMAIN,
)
from core.exceptions import BadRequestError, TemplateNotFoundError
from models.base import utcnow
from models.schedule_template import ScheduleTemplateModel
from utils.group_manager import GroupManager

logger = logging.getLogger(__name__)

UPDATABLE_TEMPLATE_FIELDS = ("title", "description", "day_of_week", "time_slot")
NULLABLE_TEMPLATE_FIELDS = ("description",)

# Characters that break a quoted header value or a file path
_UNSAFE_FILENAME_CHARS = re.compile(r'[\x00-\x1f\x7f"\\/:*?<>|;]')


def parse_target_date(value: Optional[str]) -> date:
    """Parse a YYYY-MM-DD query value; None means today in UTC.

    Raises:
        BadRequestError: If the value is not a valid date.
    """
    if not value:
        return datetime.now(pytz.utc).date()
    try:
        return date.fromisoformat(value.strip())
    except ValueError:
        raise BadRequestError("date must be in YYYY-MM-DD format")


def event_window(time_slot: str, target_date: date):
    """Return the (start, end) UTC datetimes of a template on a given date."""
    hours, minutes = (int(part) for part in time_slot.split(":"))
    start = datetime(
        target_date.year, target_date.month, target_date.day, hours, minutes,
        tzinfo=pytz.utc,
    )
    return start, start + timedelta(minutes=ICS_EVENT_DURATION_MINUTES)


def build_ics(
    template: ScheduleTemplateModel,
    target_date: date,
    now: Optional[datetime] = None,
) -> str:
    """Render a single-event VCALENDAR for one occurrence of a template.

    Args:
        template: The schedule template.
        target_date: Calendar date of the occurrence.
        now: Generation time, used for DTSTAMP and the UID.

    Returns:
        The iCalendar document as text (CRLF line endings).
    """
    now = now or utcnow()
    start, end = event_window(template.time_slot, target_date)

    cal = Calendar()
    cal.add("prodid", ICS_PRODID)
    cal.add("version", "2.0")
    cal.add("calscale", "GREGORIAN")

    event = Event()
    event.add("uid", f"{template.id}-{int(now.timestamp() * 1000)}@{ICS_UID_DOMAIN}")
    event.add("dtstamp", now)
    event.add("dtstart", start)
    event.add("dtend", end)
    event.add("summary", template.title)
    event.add("description", template.description or "")

    cal.add_component(event)
    return cal.to_ical().decode("utf-8")


def ics_content_disposition(title: str) -> str:
    """Build an attachment header naming the file after the template title.

    The plain ``filename`` is an ASCII-only fallback; ``filename*`` carries the
    full UTF-8 name (RFC 5987) for clients that understand it.
    """
    name = _UNSAFE_FILENAME_CHARS.sub("", title or "").strip().strip(".")
    filename = f"{name}.ics" if name else ICS_DEFAULT_FILENAME

    ascii_name = filename.encode("ascii", "ignore").decode("ascii").strip()
    if ascii_name.strip(".") in ("", "ics"):
        ascii_name = ICS_DEFAULT_FILENAME

    return f"attachment; filename=\"{ascii_name}\"; filename*=UTF-8''{quote(filename)}"


class ScheduleManager:
    """Manages schedule templates scoped to a group."""

    def __init__(self, db: Session):
        self.db = db
        self.groups = GroupManager(db)

    def list_templates(self, group_id: int) -> List[ScheduleTemplateModel]:
        return (
            self.db.query(ScheduleTemplateModel)
            .filter(ScheduleTemplateModel.group_id == group_id)
            .order_by(
                ScheduleTemplateModel.day_of_week,
                ScheduleTemplateModel.time_slot,
                ScheduleTemplateModel.id,
            )
            .all()
        )

    def get_template(self, template_id: int) -> ScheduleTemplateModel:
        model = (
            self.db.query(ScheduleTemplateModel)
            .filter(ScheduleTemplateModel.id == template_id)
            .first()
        )
        if model is None:
            raise TemplateNotFoundError()
        return model

    def create_template(
        self,
        group_id: int,
        title: str,
        day_of_week: int,
        time_slot: str,
        description: Optional[str] = None,
    ) -> ScheduleTemplateModel:
        """Create a weekly schedule template.

        Raises:
            GroupNotFoundError: If the group does not exist.
        """
        self.groups.get_group(group_id)
        model = ScheduleTemplateModel(
            group_id=group_id,
            title=title,
            description=description,
            day_of_week=day_of_week,
            time_slot=time_slot,
        )
        self.db.add(model)
        self.db.commit()
        self.db.refresh(model)
        logger.info("Created schedule template %s in group %s", model.id, group_id)
        return model

    def update_template(self, template_id: int, changes: Dict[str, Any]) -> ScheduleTemplateModel:
        model = self.get_template(template_id)
        applied = {
            k: v
            for k, v in changes.items()
            if k in UPDATABLE_TEMPLATE_FIELDS and (v is not None or k in NULLABLE_TEMPLATE_FIELDS)
        }
        if not applied:
            return model
        for field, value in applied.items():
            setattr(model, field, value)
        self.db.commit()
        self.db.refresh(model)
        logger.info("Updated schedule template %s", template_id)
        return model

    def delete_template(self, template_id: int) -> None:
        model = self.get_template(template_id)
        self.db.delete(model)
        self.db.commit()
        logger.info("Deleted schedule template: %s", template_id)
