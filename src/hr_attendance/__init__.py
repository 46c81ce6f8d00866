"""HR attendance service package.

Organized by feature modules (attendance, holidays, schedules, requests,
payroll, ...) with a thin Flask controller layer over service/repository layers.
"""
