from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_iso_date
from ..core.constants import DEFAULT_PAGE, DEFAULT_PAGE_LIMIT
from ..core.exceptions import DomainError, InvalidTransitionError, NotFoundError, ValidationError
from .model import MissedCheckInFilters
from .service import parse_status

# Tenant and acting user are resolved by the auth layer in front of this API.
COMPANY_HEADER = "X-Company-Id"
USER_HEADER = "X-User-Id"


def register(app: Flask, container) -> None:
    service = container.missed_checkin_service

    def _error(exc: DomainError, status_code: int):
        return jsonify({"success": False, "error": {"code": exc.code, "message": str(exc)}}), status_code

    def _require_int_header(name: str) -> int:
        value = request.headers.get(name, "")
        if not value.isdigit():
            raise ValidationError(f"Missing or invalid {name} header")
        return int(value)

    def _int_arg(name: str, default=None):
        value = request.args.get(name)
        if value is None or value == "":
            return default
        if not value.isdigit():
            raise ValidationError(f"{name} must be a positive integer")
        return int(value)

    def _date_arg(name: str):
        value = request.args.get(name)
        if not value:
            return None
        try:
            return parse_iso_date(value)
        except ValueError:
            raise ValidationError(f"{name} must be YYYY-MM-DD")

    def _team_ids_arg():
        ids = request.args.getlist("team_id")
        if not all(i.isdigit() for i in ids):
            raise ValidationError("team_id must be a positive integer")
        return [int(i) for i in ids] or None

    @app.route("/api/v1/missed-check-ins", methods=["GET"], endpoint="missed_checkins_list")
    def list_missed_checkins():
        try:
            company_id = _require_int_header(COMPANY_HEADER)
            status = request.args.get("status")
            filters = MissedCheckInFilters(
                status=parse_status(status) if status else None,
                team_ids=_team_ids_arg(),
                person_id=_int_arg("worker_id"),
                date_from=_date_arg("from"),
                date_to=_date_arg("to"),
                page=_int_arg("page", DEFAULT_PAGE),
                limit=_int_arg("limit", DEFAULT_PAGE_LIMIT),
            )
            page = service.list_records(company_id=company_id, filters=filters)
        except ValidationError as e:
            return _error(e, 400)

        return jsonify(
            {
                "success": True,
                "data": {
                    "items": [r.to_dict() for r in page.items],
                    "pagination": {
                        "page": page.page,
                        "limit": page.limit,
                        "total": page.total,
                        "total_pages": page.total_pages,
                    },
                },
            }
        )

    @app.route("/api/v1/missed-check-ins/counts", methods=["GET"], endpoint="missed_checkins_counts")
    def count_missed_checkins():
        try:
            company_id = _require_int_header(COMPANY_HEADER)
            counts = service.count_by_status(company_id=company_id, team_ids=_team_ids_arg())
        except ValidationError as e:
            return _error(e, 400)

        return jsonify({"success": True, "data": {status.value: n for status, n in counts.items()}})

    @app.route("/api/v1/missed-check-ins/<int:record_id>", methods=["GET"], endpoint="missed_checkins_get")
    def get_missed_checkin(record_id: int):
        try:
            company_id = _require_int_header(COMPANY_HEADER)
            record = service.get_record(company_id=company_id, record_id=record_id)
        except ValidationError as e:
            return _error(e, 400)
        except NotFoundError as e:
            return _error(e, 404)

        return jsonify({"success": True, "data": record.to_dict()})

    @app.route("/api/v1/missed-check-ins/<int:record_id>", methods=["PATCH"], endpoint="missed_checkins_update")
    def update_missed_checkin(record_id: int):
        payload = request.get_json(silent=True) or {}
        try:
            company_id = _require_int_header(COMPANY_HEADER)
            user_id = _require_int_header(USER_HEADER)
            if not payload.get("status"):
                raise ValidationError("status is required")
            record = service.transition_status(
                company_id=company_id,
                record_id=record_id,
                new_status=payload["status"],
                acting_user_id=user_id,
                notes=payload.get("notes"),
            )
        except (ValidationError, InvalidTransitionError) as e:
            return _error(e, 400)
        except NotFoundError as e:
            return _error(e, 404)

        return jsonify({"success": True, "data": record.to_dict()})
