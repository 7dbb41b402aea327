"""Schedule template routes and calendar export."""

from typing import List, Optional

from fastapi import APIRouter, Query, status
from fastapi.responses import Response

from core.dependencies import ScheduleManagerDep
from core.exceptions import BadRequestError
from schemas.schedule_template import (
    CreateScheduleTemplateRequest,
    ScheduleTemplateInfo,
    UpdateScheduleTemplateRequest,
)
from utils.schedule_manager import build_ics, ics_content_disposition, parse_target_date

router = APIRouter(prefix="/api/schedule-templates", tags=["ScheduleTemplate"])


@router.get("", response_model=List[ScheduleTemplateInfo], summary="List a group's templates")
def list_templates(
    schedule_manager: ScheduleManagerDep,
    group_id: Optional[int] = Query(default=None, alias="groupId"),
) -> List[ScheduleTemplateInfo]:
    if group_id is None:
        raise BadRequestError("groupId is required")
    return [
        ScheduleTemplateInfo.model_validate(t)
        for t in schedule_manager.list_templates(group_id)
    ]


@router.post(
    "",
    response_model=ScheduleTemplateInfo,
    status_code=status.HTTP_201_CREATED,
    summary="Create a template",
)
def create_template(
    req: CreateScheduleTemplateRequest,
    schedule_manager: ScheduleManagerDep,
) -> ScheduleTemplateInfo:
    template = schedule_manager.create_template(
        group_id=req.group_id,
        title=req.title,
        description=req.description,
        day_of_week=req.day_of_week,
        time_slot=req.time_slot,
    )
    return ScheduleTemplateInfo.model_validate(template)


@router.get("/{template_id}", response_model=ScheduleTemplateInfo, summary="Get a template")
def get_template(template_id: int, schedule_manager: ScheduleManagerDep) -> ScheduleTemplateInfo:
    return ScheduleTemplateInfo.model_validate(schedule_manager.get_template(template_id))


@router.patch("/{template_id}", response_model=ScheduleTemplateInfo, summary="Update a template")
def update_template(
    template_id: int,
    req: UpdateScheduleTemplateRequest,
    schedule_manager: ScheduleManagerDep,
) -> ScheduleTemplateInfo:
    template = schedule_manager.update_template(
        template_id, req.model_dump(exclude_unset=True)
    )
    return ScheduleTemplateInfo.model_validate(template)


@router.delete("/{template_id}", summary="Delete a template")
def delete_template(template_id: int, schedule_manager: ScheduleManagerDep) -> dict:
    schedule_manager.delete_template(template_id)
    return {"success": True, "message": "Template deleted successfully"}


@router.get("/{template_id}/ics", summary="Export a template occurrence as iCalendar")
def export_ics(
    template_id: int,
    schedule_manager: ScheduleManagerDep,
    date: Optional[str] = Query(default=None, description="Target date, YYYY-MM-DD"),
) -> Response:
    """Export one occurrence of a template as a single-event .ics file.

    The event starts at the template's time slot (UTC) on the target date,
    which defaults to today, and lasts one hour.
    """
    template = schedule_manager.get_template(template_id)
    target_date = parse_target_date(date)
    return Response(
        content=build_ics(template, target_date),
        media_type="text/calendar; charset=utf-8",
        headers={"Content-Disposition": ics_content_disposition(template.title)},
    )
