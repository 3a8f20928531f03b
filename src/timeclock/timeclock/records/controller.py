from __future__ import annotations

import logging

from flask import Flask, jsonify, request

from ..common.datetime_utils import local_range_bounds, parse_local_date
from ..common.web import as_bool, client_ip, error_response, internal_error, json_body, make_admin_required
from ..core.constants import BULK_CLOCK_OUT_NOTE
from ..core.exceptions import DomainError
from ..container import Container
from ..payroll.csv_export import write_records_csv

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    admin_required = make_admin_required(container.auth_service.is_admin)
    records = container.record_service
    tz = container.tz

    def _date_arg(name: str):
        value = request.args.get(name) or json_body().get(name)
        return parse_local_date(value, tz) if value else None

    @app.route("/add-record", methods=["POST"], endpoint="add_record")
    def add_record():
        data = json_body()
        try:
            record = records.add_record(
                pin=data.get("pin", ""),
                action=data.get("action", ""),
                time=data.get("time"),
                ip=client_ip(data),
            )
            return jsonify({"id": record.record_id, "name": record.name}), 201
        except DomainError as e:
            return error_response(e)
        except Exception:
            logger.exception("Failed to add record")
            return internal_error()

    @app.route("/manual-clock-out", methods=["POST"], endpoint="manual_clock_out")
    @admin_required
    def manual_clock_out():
        data = json_body()
        try:
            record = records.manual_clock_out(
                pin=data.get("pin", ""),
                time=data.get("time"),
                ip=client_ip(data),
                note=data.get("note"),
            )
            return jsonify({"id": record.record_id, "name": record.name}), 201
        except DomainError as e:
            return error_response(e)
        except Exception:
            logger.exception("Manual clock-out failed")
            return internal_error()

    @app.route("/mark-absent", methods=["POST"], endpoint="mark_absent")
    @admin_required
    def mark_absent():
        data = json_body()
        try:
            record = records.mark_absent(
                pin=data.get("pin", ""),
                day=data.get("date"),
                ip=client_ip(data),
                force=as_bool(data.get("force")),
                note=data.get("note"),
            )
            return jsonify({"id": record.record_id, "name": record.name}), 201
        except DomainError as e:
            return error_response(e)
        except Exception:
            logger.exception("Mark absent failed")
            return internal_error()

    @app.route("/get-records", methods=["POST"], endpoint="get_records")
    def get_records():
        pin = request.args.get("pin") or json_body().get("pin")
        try:
            return jsonify([r.to_dict(tz) for r in records.list_records(pin=pin)])
        except DomainError as e:
            return error_response(e)
        except Exception:
            logger.exception("Failed to read records")
            return internal_error()

    @app.route("/download-records", methods=["POST"], endpoint="download_records")
    @admin_required
    def download_records():
        try:
            start, end = local_range_bounds(_date_arg("startDate"), _date_arg("endDate"), tz)
            csv_bytes = write_records_csv(records.records_between(start, end), tz)
        except DomainError as e:
            return error_response(e)
        except Exception:
            logger.exception("Record export failed")
            return internal_error()

        return app.response_class(
            csv_bytes,
            mimetype="text/csv",
            headers={"Content-Disposition": "attachment; filename=records.csv"},
        )

    @app.route("/bulk-clock-out", methods=["POST"], endpoint="bulk_clock_out")
    @admin_required
    def bulk_clock_out():
        data = json_body()
        try:
            result = records.clock_out_working(
                ip=client_ip(data),
                note=data.get("note") or BULK_CLOCK_OUT_NOTE,
            )
            return jsonify(result.to_dict(tz))
        except DomainError as e:
            return error_response(e)
        except Exception:
            logger.exception("Bulk clock-out failed")
            return internal_error()
