"""Load Open311 Services, Requests and Cities JSON files into DynamoDB tables.

Tables are created on first use and reused afterwards; items are upserted by
their key field, so re-running a load does not duplicate items. AWS
credentials come from the standard boto3 chain.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Callable

from open311_loader.common.config_loader import AwsConfig, load_config
from open311_loader.common.constants import EXIT_HARD_FAIL, EXIT_SUCCESS, RECORD_KIND_ORDER
from open311_loader.common.errors import LoaderError
from open311_loader.common.ids import generate_run_id
from open311_loader.common.logging import build_logger, log_event
from open311_loader.pipeline.reports import write_run_summary
from open311_loader.pipeline.runner import RECORD_KINDS, KindResult, RecordKind, run_kind
from open311_loader.store.dynamo import DynamoStore, build_store

FILE_DESTS = {
    "services": "service_file",
    "requests": "request_file",
    "cities": "city_file",
}


def parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="open311-loader", description=__doc__)
    parser.add_argument("command", nargs="?", default="all", choices=[*RECORD_KIND_ORDER, "all"])
    parser.add_argument(
        "--serviceFile",
        dest="service_file",
        default="",
        help="JSON file containing list of Open311 Services offered by city",
    )
    parser.add_argument(
        "--requestFile",
        dest="request_file",
        default="",
        help="JSON file containing list of example Open311 requests",
    )
    parser.add_argument(
        "--cityFile",
        dest="city_file",
        default="",
        help="JSON file containing list of cities and corresponding endpoints",
    )
    parser.add_argument(
        "--region",
        default=None,
        help="AWS region in which DynamoDB tables are created (default from config, us-east-1)",
    )
    parser.add_argument(
        "--tableName",
        dest="table_name",
        default=None,
        help="Table name override; only valid with a single record kind",
    )
    parser.add_argument("--endpoint-url", default=None, help="DynamoDB endpoint, e.g. DynamoDB Local")
    parser.add_argument("--config", default=None, help="YAML config file")
    parser.add_argument("--run-id", default=None)
    parser.add_argument("--log-level", default="INFO", choices=["DEBUG", "INFO", "WARN", "ERROR"])
    parser.add_argument("--log-dir", default=None)
    parser.add_argument("--summary-file", default=None, help="Write a JSON run summary to this path")
    args = parser.parse_args(argv)

    if args.command == "all":
        if args.table_name:
            parser.error("--tableName applies to a single record kind, not 'all'")
        if not any(getattr(args, dest) for dest in FILE_DESTS.values()):
            parser.error("Please specify at least one JSON file to load (--serviceFile, --requestFile, --cityFile)")
    elif not getattr(args, FILE_DESTS[args.command]):
        parser.error(f"--{RECORD_KINDS[args.command].file_flag} is required for the {args.command} command")
    return args


def selected_files(args: argparse.Namespace) -> list[tuple[RecordKind, Path]]:
    kinds = RECORD_KIND_ORDER if args.command == "all" else (args.command,)
    selected = []
    for name in kinds:
        path = getattr(args, FILE_DESTS[name])
        if path:
            selected.append((RECORD_KINDS[name], Path(path)))
    return selected


def _cli_overrides(args: argparse.Namespace) -> dict:
    aws = {}
    if args.region:
        aws["region"] = args.region
    if args.endpoint_url:
        aws["endpoint_url"] = args.endpoint_url
    return {"aws": aws} if aws else {}


def run_command(
    args: argparse.Namespace,
    *,
    store_factory: Callable[[AwsConfig], DynamoStore] = build_store,
) -> int:
    run_id = args.run_id or generate_run_id()
    log_dir = Path(args.log_dir) if args.log_dir else None
    logger = build_logger(run_id, log_dir=log_dir, level=args.log_level)

    results: list[KindResult] = []
    status = "success"
    exit_code = EXIT_SUCCESS

    try:
        config = load_config(Path(args.config) if args.config else None, overrides=_cli_overrides(args))
        store = store_factory(config.aws)
        log_event(logger, f"established DynamoDB client in {store.region}", run_id=run_id, event="SESSION", status="ok")

        for kind, path in selected_files(args):
            table_name = args.table_name or config.tables[kind.name]
            result = KindResult(kind=kind.name, path=str(path), table=table_name)
            results.append(result)
            log_event(
                logger,
                f"loading {kind.label} from {path}",
                run_id=run_id,
                kind=kind.name,
                table=table_name,
                event="KIND_START",
                status="ok",
            )
            try:
                run_kind(store, kind, path, table_name, config, logger=logger, result=result)
            except LoaderError as exc:
                result.error_code = exc.error_code
                raise
            log_event(
                logger,
                f"added {result.records_out} items to the '{table_name}' table",
                run_id=run_id,
                kind=kind.name,
                table=table_name,
                event="KIND_END",
                status="ok",
                records_in=result.records_in,
                records_out=result.records_out,
            )
    except LoaderError as exc:
        status = "error"
        exit_code = EXIT_HARD_FAIL
        log_event(
            logger,
            str(exc),
            level=logging.ERROR,
            run_id=run_id,
            event="RUN_FAIL",
            status="error",
            error_code=exc.error_code,
        )

    if args.summary_file:
        try:
            write_run_summary(Path(args.summary_file), run_id=run_id, results=results, status=status)
        except OSError as exc:
            exit_code = EXIT_HARD_FAIL
            log_event(
                logger,
                f"unable to write run summary {args.summary_file}: {exc}",
                level=logging.ERROR,
                run_id=run_id,
                event="SUMMARY_FAIL",
                status="error",
                error_code="SUMMARY_ERROR",
            )
    return exit_code


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv if argv is not None else sys.argv[1:])
    return run_command(args)


if __name__ == "__main__":
    raise SystemExit(main())
