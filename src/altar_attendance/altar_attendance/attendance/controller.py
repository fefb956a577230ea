from __future__ import annotations

from flask import Flask, Response, jsonify, request, session

from ..common.datetime_utils import today_iso
from ..common.validators import require_iso_date
from ..common.web import login_required
from ..container import Container
from ..core.enums import StatusFilter
from ..core.exceptions import DuplicateNameError, NotReadyError, ValidationError
from .export import export_csv
from .store import AttendanceStore


def _status_filter(value) -> StatusFilter:
    try:
        return StatusFilter(value or StatusFilter.ALL.value)
    except ValueError:
        raise ValidationError(f"Invalid filter: {value!r}") from None


def register(app: Flask, container: Container) -> None:
    def current_store() -> AttendanceStore:
        return container.stores.get(session["group"])

    @app.errorhandler(DuplicateNameError)
    def handle_duplicate(e):
        return jsonify({"error": str(e)}), 409

    @app.errorhandler(ValidationError)
    def handle_validation(e):
        return jsonify({"error": str(e)}), 400

    @app.errorhandler(NotReadyError)
    def handle_not_ready(e):
        return jsonify({"error": str(e)}), 503

    @app.route("/api/state", endpoint="api_state")
    @login_required
    def api_state():
        store = current_store()
        return jsonify(
            {
                "group": store.group_key,
                "state": store.state.value,
                "pending_changes": store.pending_changes,
                "mark_all_scope": store.mark_all_scope.value,
            }
        )

    @app.route("/api/roster", methods=["GET"], endpoint="api_roster")
    @login_required
    def api_roster():
        store = current_store()
        work_date = require_iso_date(request.args.get("date") or today_iso())
        status_filter = _status_filter(request.args.get("filter"))

        rows = [
            {
                "id": e.entry_id,
                "name": e.name,
                "status": store.status_of(work_date, e.entry_id).value,
                "summary": store.summarize(e.entry_id).to_dict(),
            }
            for e in store.visible_entries(work_date, status_filter)
        ]
        return jsonify({"date": work_date, "filter": status_filter.value, "count": len(rows), "servers": rows})

    @app.route("/api/roster", methods=["POST"], endpoint="api_roster_add")
    @login_required
    def api_roster_add():
        data = request.get_json(silent=True) or {}
        entry = current_store().add_entry(data.get("name", ""))
        if entry is None:
            return Response(status=204)
        return jsonify(entry.to_dict()), 201

    @app.route("/api/roster/<entry_id>", methods=["DELETE"], endpoint="api_roster_remove")
    @login_required
    def api_roster_remove(entry_id: str):
        current_store().remove_entry(entry_id)
        return jsonify({"ok": True})

    @app.route("/api/roster", methods=["DELETE"], endpoint="api_roster_remove_all")
    @login_required
    def api_roster_remove_all():
        removed = current_store().remove_all()
        return jsonify({"removed": removed})

    @app.route("/api/attendance/<work_date>/<entry_id>", methods=["PUT"], endpoint="api_set_status")
    @login_required
    def api_set_status(work_date: str, entry_id: str):
        data = request.get_json(silent=True) or {}
        current_store().set_status(work_date, entry_id, data.get("status"))
        return jsonify({"date": work_date, "id": entry_id, "status": data.get("status")})

    @app.route("/api/attendance/<work_date>/<entry_id>/cycle", methods=["POST"], endpoint="api_cycle_status")
    @login_required
    def api_cycle_status(work_date: str, entry_id: str):
        status = current_store().cycle_status(work_date, entry_id)
        return jsonify({"date": work_date, "id": entry_id, "status": status.value})

    @app.route("/api/attendance/<work_date>/mark-all", methods=["POST"], endpoint="api_mark_all")
    @login_required
    def api_mark_all(work_date: str):
        data = request.get_json(silent=True) or {}
        marked = current_store().set_all_status(
            work_date,
            data.get("status"),
            status_filter=_status_filter(data.get("filter")),
        )
        return jsonify({"date": work_date, "marked": marked})

    @app.route("/api/attendance/<work_date>", methods=["DELETE"], endpoint="api_clear_date")
    @login_required
    def api_clear_date(work_date: str):
        current_store().clear_date(work_date)
        return jsonify({"ok": True})

    @app.route("/api/summary/<entry_id>", endpoint="api_summary")
    @login_required
    def api_summary(entry_id: str):
        store = current_store()
        entry = store.get_entry(entry_id)
        if entry is None:
            raise ValidationError(f"Unknown altar server: {entry_id!r}")
        return jsonify({"id": entry_id, "name": entry.name, **store.summarize(entry_id).to_dict()})

    @app.route("/api/export.csv", endpoint="api_export_csv")
    @login_required
    def api_export_csv():
        store = current_store()
        work_date = require_iso_date(request.args.get("date") or today_iso())
        filename = f"attendance_{store.group_key}_{work_date}.csv"
        return Response(
            export_csv(store, work_date),
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename={filename}"},
        )

    @app.route("/api/sync", methods=["POST"], endpoint="api_sync")
    @login_required
    def api_sync():
        store = current_store()
        ok = store.flush()
        return jsonify({"synced": ok, "pending_changes": store.pending_changes}), (200 if ok else 502)
