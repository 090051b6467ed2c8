"""Run summary report."""

from __future__ import annotations

from pathlib import Path

from open311_loader.common.fs import write_json
from open311_loader.pipeline.runner import KindResult


def write_run_summary(path: Path, run_id: str, results: list[KindResult], status: str) -> Path:
    totals = {
        "records_in": sum(result.records_in for result in results),
        "records_out": sum(result.records_out for result in results),
    }
    payload = {
        "run_id": run_id,
        "status": status,
        "kinds": [result.kind for result in results],
        "totals": totals,
        "results": [result.to_dict() for result in results],
    }
    write_json(path, payload)
    return path
