"""Employee time clock package.

Organized by feature modules (employees, records, status, payroll, ...) with a
thin Flask JSON controller layer over service/repository layers. Status and
hours are always derived from the append-only record log.
"""
