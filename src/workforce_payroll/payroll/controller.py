from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.http import manager_required, query_date, query_flag, query_str
from ..container import Container
from .exporters import shift_rows_csv


def register(app: Flask, container: Container) -> None:
    manager = manager_required(container)
    service = container.payroll_report_service

    @app.route("/api/admin/payroll", methods=["GET"], endpoint="payroll_shifts")
    @manager
    def payroll_shifts(ctx):
        rows = service.list_shift_rows(
            ctx,
            start=query_date("from"),
            end=query_date("to"),
            store_id=query_str("storeId"),
            profile_id=query_str("profileId"),
        )
        return jsonify({"rows": [r.to_dict() for r in rows], "total": len(rows)})

    @app.route("/api/admin/payroll/shifts.csv", methods=["GET"], endpoint="payroll_shifts_csv")
    @manager
    def payroll_shifts_csv(ctx):
        start = query_date("from")
        end = query_date("to")
        rows = service.list_shift_rows(
            ctx,
            start=start,
            end=end,
            store_id=query_str("storeId"),
            profile_id=query_str("profileId"),
        )
        filename = f"payroll_{start.isoformat()}_to_{end.isoformat()}.csv"
        return app.response_class(
            shift_rows_csv(rows).encode("utf-8"),
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename={filename}"},
        )

    def _build_report(ctx):
        return service.build_report(
            ctx,
            start=query_date("from"),
            end=query_date("to"),
            as_of=query_date("asOf", required=False),
            store_id=query_str("storeId"),
            profile_id=query_str("profileId"),
            totals_over_all=query_flag("totalsOverAll"),
        )

    @app.route("/api/admin/payroll/stores", methods=["GET"], endpoint="payroll_stores")
    @manager
    def payroll_stores(ctx):
        ctx.require_stores()
        stores = container.stores_repo.list_stores(ctx.store_ids)
        return jsonify(
            {
                "stores": [
                    {"id": s.store_id, "name": s.name, "labor_tier": s.labor_tier.value if s.labor_tier else None}
                    for s in stores
                ]
            }
        )

    @app.route("/api/admin/payroll/report", methods=["GET"], endpoint="payroll_report")
    @manager
    def payroll_report(ctx):
        return jsonify(_build_report(ctx).to_dict())

    @app.route("/api/admin/payroll/reconciliation", methods=["GET"], endpoint="payroll_reconciliation")
    @manager
    def payroll_reconciliation(ctx):
        report = _build_report(ctx)
        return jsonify(
            {
                "period": report.period.to_dict(),
                "employeeSummary": [e.to_dict() for e in report.summary.employees],
                "totals": report.summary.totals.to_dict(),
                "reconciliation": report.reconciliation.to_dict() if report.reconciliation else None,
                "whatsappText": report.whatsapp_text,
            }
        )

    @app.route("/api/admin/payroll/reviews", methods=["GET"], endpoint="payroll_reviews")
    @manager
    def payroll_reviews(ctx):
        shifts = container.shift_review_service.pending_reviews(ctx)
        return jsonify(
            {
                "rows": [
                    {
                        "id": s.shift_id,
                        "store_id": s.store_id,
                        "store_name": s.store_name,
                        "employee_name": s.employee_name,
                        "shift_type": s.shift_kind.value,
                        "started_at": s.effective_start.isoformat(),
                        "ended_at": s.ended_at.isoformat() if s.ended_at else None,
                        "reason": "manual_close_pending_review" if s.manual_close_pending else "override_pending",
                    }
                    for s in shifts
                ]
            }
        )

    @app.route("/api/admin/payroll/reviews/<shift_id>/override", methods=["POST"], endpoint="approve_override")
    @manager
    def approve_override(shift_id, ctx):
        body = request.get_json(silent=True) or {}
        container.shift_review_service.approve_override(ctx, shift_id=shift_id, note=body.get("note", ""))
        return jsonify({"ok": True})

    @app.route(
        "/api/admin/payroll/reviews/<shift_id>/manual-close", methods=["POST"], endpoint="approve_manual_close"
    )
    @manager
    def approve_manual_close(shift_id, ctx):
        container.shift_review_service.approve_manual_close(ctx, shift_id=shift_id)
        return jsonify({"ok": True})
