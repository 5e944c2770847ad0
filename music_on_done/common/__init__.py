"""
Common - shared utilities.

- logging/  - structured logging setup
- outcome   - Outcome value for fail-open operations
"""
