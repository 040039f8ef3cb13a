from __future__ import annotations

from ..models.import_result import ImportResult

"""SUMMARY line rendering for the import command."""


def render_import_summary(result: ImportResult) -> str:
    """Render the SUMMARY payload (without the SUMMARY label).

    Format:
        status={ok|failed} processed={n} upserted={n} skipped={n} errors={n}

    Examples:
        >>> r = ImportResult(success=True, processed_rows=3, upserted_count=2, skipped_count=1,
        ...                  errors=["Row 4: Age is missing"])
        >>> render_import_summary(r)
        'status=ok processed=3 upserted=2 skipped=1 errors=1'
    """
    status = "ok" if result.success else "failed"
    return (
        f"status={status} "
        f"processed={result.processed_rows} "
        f"upserted={result.upserted_count} "
        f"skipped={result.skipped_count} "
        f"errors={len(result.errors)}"
    )
