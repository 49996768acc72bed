"""Trust, risk and team-fit scoring engine."""

__version__ = "1.0.0"
