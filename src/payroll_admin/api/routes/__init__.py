"""API routes."""

from payroll_admin.api.routes.departments import router as departments_router
from payroll_admin.api.routes.employees import router as employees_router
from payroll_admin.api.routes.health import router as health_router
from payroll_admin.api.routes.payroll import router as payroll_router
from payroll_admin.api.routes.payslips import router as payslips_router
from payroll_admin.api.routes.time_entries import router as time_entries_router

__all__ = [
    "departments_router",
    "employees_router",
    "health_router",
    "payroll_router",
    "payslips_router",
    "time_entries_router",
]
