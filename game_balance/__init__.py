"""
Game Balance Analytics

Turns game telemetry event logs into per-stage, per-level and per-user
progression, difficulty and attrition aggregates.
"""

__version__ = "1.0.0"
