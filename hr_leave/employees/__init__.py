"""Employees module — employee records, leave summaries and balance adjustment."""

from hr_leave.employees.models import Employee

__all__ = ["Employee"]
