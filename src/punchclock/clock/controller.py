from __future__ import annotations

from flask import Flask, g, request

from ..common.datetime_utils import parse_iso_datetime
from ..common.http import json_body, login_required, ok, ok_page
from ..container import Container
from ..core.enums import PunchType
from ..core.exceptions import ValidationError
from .filters import parse_filter


def register(app: Flask, container: Container) -> None:
    def _parse_punch_payload(payload: dict) -> dict:
        errors: list[str] = []

        punch_type = None
        if payload.get("type") in (None, ""):
            errors.append("Punch type is required")
        else:
            try:
                punch_type = PunchType.parse(payload["type"])
            except ValueError:
                errors.append("Invalid punch type")

        timestamp = None
        raw_ts = payload.get("timestamp")
        if raw_ts not in (None, ""):
            try:
                timestamp = parse_iso_datetime(str(raw_ts))
            except ValueError:
                errors.append("Timestamp must be an ISO-8601 date-time")

        description = payload.get("description")
        if description is not None and not isinstance(description, str):
            errors.append("Description must be a string")

        if errors:
            raise ValidationError("Invalid punch data", errors)
        return {"type": punch_type, "timestamp": timestamp, "description": description}

    @app.route("/api/timerecord", methods=["POST"], endpoint="create_time_record")
    @login_required
    def create_time_record():
        data = _parse_punch_payload(json_body())
        event = container.clock_service.create_punch(g.user_id, **data)
        return ok(event.to_dict(), "Time record created successfully", status=201)

    @app.route("/api/timerecord/<int:record_id>", methods=["GET"], endpoint="get_time_record")
    @login_required
    def get_time_record(record_id: int):
        event = container.clock_service.get_punch(record_id, g.user_id)
        return ok(event.to_dict())

    @app.route("/api/timerecord", methods=["GET"], endpoint="list_time_records")
    @login_required
    def list_time_records():
        f = parse_filter(request.args)
        page = container.clock_service.list_punches(g.user_id, f)
        return ok_page(page, [e.to_dict(include_created_at=False) for e in page.items])

    @app.route("/api/timerecord/summary", methods=["GET"], endpoint="time_record_summary")
    @login_required
    def time_record_summary():
        f = parse_filter(request.args, allow_type=False)
        page = container.clock_service.list_summary(g.user_id, f)
        return ok_page(page, [s.to_dict() for s in page.items])

    @app.route("/api/timerecord/today", methods=["GET"], endpoint="today_time_records")
    @login_required
    def today_time_records():
        events = container.clock_service.list_today(g.user_id)
        return ok([e.to_dict(include_created_at=False) for e in events])

    @app.route("/api/timerecord/<int:record_id>", methods=["DELETE"], endpoint="delete_time_record")
    @login_required
    def delete_time_record(record_id: int):
        deleted = container.clock_service.delete_punch(record_id, g.user_id)
        return ok(deleted, "Time record deleted successfully")
