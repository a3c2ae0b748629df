"""Prometheus instrumentation for the valuation facade."""
