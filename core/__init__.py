"""
Core processing modules for transaction summaries.

This package contains:
- aggregation: Month extraction, amount parsing and batch summary fold
- config: Application configuration and settings
- exceptions: Custom exception classes
- logger: Logging configuration
- parsing: CSV parsing into transaction records
- reporting: Rounding and report rendering
- schema: Pydantic models for records, summaries, reports and events
"""
