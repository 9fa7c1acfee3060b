"""recovery_debt: training recovery debt and readiness estimation."""

__version__ = "0.1.0"
