"""Workforce payroll package.

Organized by feature modules (shifts, schedules, stores, advances, payroll)
with thin Flask controllers over service and repository layers. The payroll
module holds the pure report pipeline: time normalization, aggregation and
reconciliation.
"""
