"""
Service layer for business logic.

This package contains the orchestrator that runs one transaction batch
through parsing, aggregation, rendering and delivery.
"""
