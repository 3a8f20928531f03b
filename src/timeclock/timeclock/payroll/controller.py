from __future__ import annotations

import logging

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_local_date
from ..common.web import error_response, internal_error, json_body, make_admin_required
from ..core.exceptions import DomainError
from ..container import Container
from .csv_export import write_hours_csv

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    admin_required = make_admin_required(container.auth_service.is_admin)
    payroll = container.payroll_report_service
    status = container.status_service
    tz = container.tz

    def _range():
        data = json_body()
        start = request.args.get("startDate") or data.get("startDate")
        end = request.args.get("endDate") or data.get("endDate")
        return (
            parse_local_date(start, tz) if start else None,
            parse_local_date(end, tz) if end else None,
        )

    @app.route("/calculate-hours", methods=["POST"], endpoint="calculate_hours")
    @admin_required
    def calculate_hours():
        try:
            start, end = _range()
            rows = payroll.hours_report(start=start, end=end)
            return jsonify([r.to_dict() for r in rows])
        except DomainError as e:
            return error_response(e)
        except Exception:
            logger.exception("Hours calculation failed")
            return internal_error()

    @app.route("/calculate-hours.csv", methods=["POST"], endpoint="calculate_hours_csv")
    @admin_required
    def calculate_hours_csv():
        try:
            start, end = _range()
            csv_bytes = write_hours_csv(payroll.hours_report(start=start, end=end))
        except DomainError as e:
            return error_response(e)
        except Exception:
            logger.exception("Hours export failed")
            return internal_error()

        return app.response_class(
            csv_bytes,
            mimetype="text/csv",
            headers={"Content-Disposition": "attachment; filename=hours_summary_detailed.csv"},
        )

    @app.route("/dashboard-stats", methods=["POST"], endpoint="dashboard_stats")
    @admin_required
    def dashboard_stats():
        try:
            return jsonify(payroll.dashboard_stats().to_dict())
        except Exception:
            logger.exception("Dashboard stats failed")
            return internal_error()

    @app.route("/live-status", methods=["POST"], endpoint="live_status")
    @admin_required
    def live_status():
        try:
            board = status.live_board()
            return jsonify(
                {
                    "employees": [item.to_dict(tz) for item in board],
                    "counts": status.counts(board),
                }
            )
        except Exception:
            logger.exception("Live status failed")
            return internal_error()
