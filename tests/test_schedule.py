"""Tests for schedule templates and the iCalendar export."""

from datetime import date, datetime
from types import SimpleNamespace

import pytest
import pytz

from core.exceptions import BadRequestError
from utils.schedule_manager import build_ics, event_window, ics_content_disposition, parse_target_date


def make_template(**overrides):
    fields = dict(id=7, title="Piano lesson", description=None, day_of_week=5, time_slot="09:30")
    fields.update(overrides)
    return SimpleNamespace(**fields)


def unfolded_lines(ics):
    return ics.replace("\r\n ", "").split("\r\n")


def test_event_window_is_one_hour_utc():
    start, end = event_window("09:30", date(2024, 3, 1))
    assert start == datetime(2024, 3, 1, 9, 30, tzinfo=pytz.utc)
    assert end == datetime(2024, 3, 1, 10, 30, tzinfo=pytz.utc)


def test_event_window_crossing_midnight():
    start, end = event_window("23:30", date(2024, 12, 31))
    assert end == datetime(2025, 1, 1, 0, 30, tzinfo=pytz.utc)


def test_build_ics_event_fields():
    now = datetime(2024, 2, 1, 12, 0, tzinfo=pytz.utc)
    lines = unfolded_lines(build_ics(make_template(), date(2024, 3, 1), now=now))

    assert lines[0] == "BEGIN:VCALENDAR"
    assert "VERSION:2.0" in lines
    assert "PRODID:-//LIFF Family Tool//JP" in lines
    assert "DTSTART:20240301T093000Z" in lines
    assert "DTEND:20240301T103000Z" in lines
    assert "SUMMARY:Piano lesson" in lines
    assert f"UID:7-{int(now.timestamp() * 1000)}@liff-family-tool" in lines
    assert lines.count("BEGIN:VEVENT") == 1


def test_build_ics_escapes_text():
    ics = build_ics(
        make_template(title="Clean, sweep; mop", description="line1\nline2"),
        date(2024, 3, 1),
    )
    lines = unfolded_lines(ics)
    assert "SUMMARY:Clean\\, sweep\\; mop" in lines
    assert "DESCRIPTION:line1\\nline2" in lines


def test_content_disposition_sanitises_title():
    header = ics_content_disposition('a/b:"c"')
    assert header.startswith('attachment; filename="abc.ics"')


def test_content_disposition_non_ascii_title():
    header = ics_content_disposition("ピアノ")
    assert 'filename="schedule.ics"' in header
    assert "filename*=UTF-8''%E3%83%94%E3%82%A2%E3%83%8E.ics" in header


def test_content_disposition_empty_title():
    assert 'filename="schedule.ics"' in ics_content_disposition("")


def test_parse_target_date():
    assert parse_target_date("2024-03-01") == date(2024, 3, 1)
    assert parse_target_date(None) == datetime.now(pytz.utc).date()
    with pytest.raises(BadRequestError):
        parse_target_date("03/01/2024")


def template_body(group_id, **overrides):
    body = {"groupId": group_id, "title": "Piano", "dayOfWeek": 5, "timeSlot": "09:30"}
    body.update(overrides)
    return body


def test_template_crud(client, group):
    resp = client.post("/api/schedule-templates", json=template_body(group.id, description="Bring notes"))
    assert resp.status_code == 201
    template = resp.json()
    assert template["day_of_week"] == 5
    assert template["time_slot"] == "09:30"

    resp = client.patch(
        f"/api/schedule-templates/{template['id']}",
        json={"timeSlot": "18:00", "description": None},
    )
    assert resp.status_code == 200
    assert resp.json()["time_slot"] == "18:00"
    assert resp.json()["description"] is None

    listed = client.get("/api/schedule-templates", params={"groupId": group.id}).json()
    assert [t["id"] for t in listed] == [template["id"]]

    assert client.delete(f"/api/schedule-templates/{template['id']}").status_code == 200
    assert client.get(f"/api/schedule-templates/{template['id']}").status_code == 404


@pytest.mark.parametrize(
    "overrides",
    [{"timeSlot": "24:00"}, {"timeSlot": "9:30"}, {"dayOfWeek": 7}, {"dayOfWeek": -1}],
)
def test_template_validation(client, group, overrides):
    resp = client.post("/api/schedule-templates", json=template_body(group.id, **overrides))
    assert resp.status_code == 400
    assert "error" in resp.json()


def test_list_templates_requires_group(client):
    assert client.get("/api/schedule-templates").status_code == 400


def test_ics_download(client, group):
    template = client.post("/api/schedule-templates", json=template_body(group.id)).json()

    resp = client.get(f"/api/schedule-templates/{template['id']}/ics", params={"date": "2024-03-01"})
    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith("text/calendar")
    assert 'filename="Piano.ics"' in resp.headers["content-disposition"]
    lines = unfolded_lines(resp.text)
    assert "DTSTART:20240301T093000Z" in lines
    assert "DTEND:20240301T103000Z" in lines


def test_ics_bad_date(client, group):
    template = client.post("/api/schedule-templates", json=template_body(group.id)).json()
    resp = client.get(f"/api/schedule-templates/{template['id']}/ics", params={"date": "tomorrow"})
    assert resp.status_code == 400
    assert resp.json() == {"error": "date must be in YYYY-MM-DD format"}


def test_ics_missing_template(client):
    assert client.get("/api/schedule-templates/404/ics").status_code == 404
