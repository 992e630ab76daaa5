"""OpenAttendify attendance core.

Feature packages (attendance, tasks, employees, integrations, erp) each hold a
domain model, a repository interface with its MySQL implementation, a service
and a thin Flask controller.
"""
