"""Care billing package.

Feature modules (attendance, clients, invoices, staff, payroll) sit on top of a
generic record store; the service layer turns day-level attendance into
monthly invoices and staff day-rate reconciliations.
"""
