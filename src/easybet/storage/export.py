"""Export the event log to Parquet."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from duckdb import DuckDBPyConnection


def export_events_to_parquet(
    conn: DuckDBPyConnection,
    output_path: str | Path,
    activity_id: int | None = None,
) -> int:
    """Export events to a Parquet file. Optional filter by activity_id. Returns row count."""
    path = Path(output_path).resolve()
    path.parent.mkdir(parents=True, exist_ok=True)
    path_str = str(path).replace("'", "''")
    if activity_id is not None:
        conn.execute(
            f"COPY (SELECT * FROM events WHERE activity_id = {int(activity_id)} ORDER BY id) "
            f"TO '{path_str}' (FORMAT PARQUET)"
        )
        count = conn.execute("SELECT COUNT(*) FROM events WHERE activity_id = ?", [activity_id]).fetchone()[0]
    else:
        conn.execute(f"COPY (SELECT * FROM events ORDER BY id) TO '{path_str}' (FORMAT PARQUET)")
        count = conn.execute("SELECT COUNT(*) FROM events").fetchone()[0]
    return count
