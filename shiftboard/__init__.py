"""Staff scheduling core: worked hours, staffing counts and time-off reconciliation.

Modules:
- config: load configuration (JSON or YAML)
- logging_config: structlog setup
- errors: exception types
- domain: typed shift model, SQLAlchemy records, repositories, schedule week store
- services: pure query functions (worked hours, shift categories, staffing counts)
- engine: request lifecycle, OFF rule saving, reconciliation, manager edits
- io: CSV import
- cli: command-line interface entrypoints
"""

__all__ = [
    "config",
    "logging_config",
    "errors",
    "domain",
    "services",
    "engine",
    "io",
    "cli",
]
