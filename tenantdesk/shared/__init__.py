"""Shared helpers: telemetry and small utilities used across layers."""
