#!/usr/bin/env python3
"""
Resumable import: processes numbered records slowly and survives restarts.

Press Ctrl+C (or send SIGTERM) at any point; the progress file is saved
before the process exits. Run again and it picks up after the last
processed record.

Usage:
    python examples/resumable_import/run.py                 # 200 records
    python examples/resumable_import/run.py 1000            # 1,000 records
    catsa-janga show -s examples/resumable_import/settings.yaml
"""

import asyncio
import sys
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from catsa_janga.core.config import load_settings
from catsa_janga.core.logging import configure_logging, get_logger
from catsa_janga.engine import ProgressSaver

SETTINGS_PATH = Path(__file__).parent / "settings.yaml"

logger = get_logger("resumable_import")

state: dict[str, Any] = {"next_record": 1, "total": 0, "started_at": None}


async def process_record(record_id: int) -> int:
    await asyncio.sleep(0.05)
    return record_id * 2


async def main(num_records: int) -> None:
    settings = load_settings(SETTINGS_PATH)
    configure_logging(settings.logging)

    # Built inside the running loop so signal handling binds to it
    saver = ProgressSaver.from_settings(
        settings.checkpoint,
        lambda: state,
        initial_data={"next_record": 1, "total": 0, "started_at": datetime.now(UTC)},
    )
    restored = await saver.restore()
    state.update(restored or {})
    logger.info("Starting import", next_record=state["next_record"], num_records=num_records)

    autosave = None
    if settings.checkpoint.autosave_interval_seconds is not None:
        autosave = asyncio.create_task(saver.autosave(settings.checkpoint.autosave_interval_seconds))

    try:
        for record_id in range(state["next_record"], num_records + 1):
            state["total"] += await process_record(record_id)
            state["next_record"] = record_id + 1
    finally:
        if autosave is not None:
            autosave.cancel()

    await saver.save()
    logger.info("Import complete", total=state["total"], started_at=str(state["started_at"]))
    saver.close()


if __name__ == "__main__":
    count = int(sys.argv[1]) if len(sys.argv) > 1 else 200
    if count < 1:
        print("Error: Record count must be positive", file=sys.stderr)  # noqa: T201
        sys.exit(1)
    asyncio.run(main(count))
