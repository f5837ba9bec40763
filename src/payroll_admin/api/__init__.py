"""HTTP API over the payroll engine."""
