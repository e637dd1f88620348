from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.http import manager_required, query_date, query_str
from ..container import Container


def register(app: Flask, container: Container) -> None:
    manager = manager_required(container)
    service = container.advance_service

    @app.route("/api/admin/payroll/advances", methods=["GET"], endpoint="advances_list")
    @manager
    def advances_list(ctx):
        rows = service.list(
            ctx,
            start=query_date("from", required=False),
            end=query_date("to", required=False),
            profile_id=query_str("profileId"),
            status=query_str("status"),
        )
        return jsonify({"rows": [a.to_dict() for a in rows]})

    @app.route("/api/admin/payroll/advances", methods=["POST"], endpoint="advances_create")
    @manager
    def advances_create(ctx):
        body = request.get_json(silent=True) or {}
        advance_id = service.create(
            ctx,
            profile_id=body.get("profileId", ""),
            advance_hours=body.get("advanceHours"),
            advance_date=body.get("advanceDate"),
            store_id=body.get("storeId"),
            cash_amount=body.get("cashAmountDollars"),
            note=body.get("note"),
            status=body.get("status") or "verified",
        )
        return jsonify({"id": advance_id}), 201

    @app.route("/api/admin/payroll/advances/<advance_id>", methods=["PATCH"], endpoint="advances_update")
    @manager
    def advances_update(advance_id, ctx):
        body = request.get_json(silent=True) or {}
        fields = {}
        if body.get("advanceDate"):
            fields["advance_date"] = body["advanceDate"]
        if body.get("advanceHours") is not None:
            fields["advance_hours"] = body["advanceHours"]
        if "cashAmountDollars" in body:
            fields["cash_amount"] = body["cashAmountDollars"]
        if "note" in body:
            fields["note"] = body["note"]
        if body.get("status"):
            fields["status"] = body["status"]
        service.update(ctx, advance_id, **fields)
        return jsonify({"ok": True})

    @app.route("/api/admin/payroll/advances/<advance_id>/void", methods=["POST"], endpoint="advances_void")
    @manager
    def advances_void(advance_id, ctx):
        service.void(ctx, advance_id)
        return jsonify({"ok": True})
