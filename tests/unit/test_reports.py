import json
from pathlib import Path

from open311_loader.pipeline.reports import write_run_summary
from open311_loader.pipeline.runner import KindResult


def test_write_run_summary_totals_results(tmp_path: Path):
    results = [
        KindResult(kind="services", path="s.json", table="Services", records_in=3, records_out=3),
        KindResult(
            kind="cities",
            path="c.json",
            table="Cities",
            records_in=2,
            records_out=1,
            duplicate_keys=["Troy, NY"],
            error_code="WRITE_ERROR",
        ),
    ]

    path = write_run_summary(tmp_path / "reports" / "run_summary.json", "run-1", results, "error")

    payload = json.loads(path.read_text(encoding="utf-8"))
    assert payload["kinds"] == ["services", "cities"]
    assert payload["totals"] == {"records_in": 5, "records_out": 4}
    assert payload["results"][1]["duplicate_keys"] == ["Troy, NY"]
    assert payload["status"] == "error"
