"""Family camp registration roster tooling.

Roster loading / grouping, spreadsheet export and spreadsheet import
against the hosted PostgreSQL registrants table.
"""

__version__ = "0.1.0"
