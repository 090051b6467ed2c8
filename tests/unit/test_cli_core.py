from pathlib import Path

import pytest

from open311_loader.cli import parse_args, selected_files


def test_parse_args_defaults():
    args = parse_args(["--cityFile", "cities.json"])
    assert args.command == "all"
    assert args.city_file == "cities.json"
    assert args.service_file == ""
    assert args.region is None
    assert args.table_name is None
    assert args.log_level == "INFO"


def test_parse_args_requires_a_file_for_all(capsys):
    with pytest.raises(SystemExit) as excinfo:
        parse_args([])
    assert excinfo.value.code == 2
    assert "at least one JSON file" in capsys.readouterr().err


def test_single_kind_requires_its_file_flag():
    with pytest.raises(SystemExit) as excinfo:
        parse_args(["services", "--cityFile", "cities.json"])
    assert excinfo.value.code == 2


def test_table_name_rejected_for_all():
    with pytest.raises(SystemExit):
        parse_args(["all", "--cityFile", "cities.json", "--tableName", "Mine"])


def test_table_name_accepted_for_single_kind():
    args = parse_args(["cities", "--cityFile", "cities.json", "--tableName", "Open311Cities", "--region", "us-west-2"])
    assert args.table_name == "Open311Cities"
    assert args.region == "us-west-2"


def test_selected_files_follow_fixed_kind_order():
    args = parse_args(["--cityFile", "c.json", "--serviceFile", "s.json", "--requestFile", "r.json"])

    selected = selected_files(args)

    assert [(kind.name, path) for kind, path in selected] == [
        ("services", Path("s.json")),
        ("requests", Path("r.json")),
        ("cities", Path("c.json")),
    ]


def test_selected_files_for_single_kind_ignores_other_flags():
    args = parse_args(["requests", "--requestFile", "r.json", "--cityFile", "c.json"])
    assert [kind.name for kind, _path in selected_files(args)] == ["requests"]
