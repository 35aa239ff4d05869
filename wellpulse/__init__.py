"""WellPulse: multi-tenant wellbeing check-ins."""

__version__ = "1.0.0"
