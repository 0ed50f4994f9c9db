import json
import textwrap
import uuid

import pytest

from vstruct.checker import check_files, resolve_schema_ref
from vstruct.checker.run_check import find_data_files, main
from vstruct.exceptions import SchemaResolutionError
from vstruct.loader import DataLoader


SCHEMA_MODULE = """\
from vstruct import Nullable, Optional

USER = {
    "name": str,
    "age": Nullable(float),
    "tags": [str],
    "nick": Optional(str),
}

BROKEN = {"name": []}


class Schemas:
    USER = USER
"""


@pytest.fixture
def schema_module(tmp_path, monkeypatch):
    name = f"schemas_{uuid.uuid4().hex}"
    (tmp_path / f"{name}.py").write_text(SCHEMA_MODULE)
    monkeypatch.syspath_prepend(str(tmp_path))
    return name


@pytest.fixture
def data_dir(tmp_path):
    data = tmp_path / "data"
    data.mkdir()
    (data / "good.yaml").write_text("name: a\nage: null\ntags: [x, y]\n")
    (data / "bad.yaml").write_text(textwrap.dedent("""\
        name: b
        age: 3
        tags:
          - x
          - 5
    """))
    (data / "good.json").write_text('{"name": "c", "age": 1.5, "tags": []}')
    (data / "notes.txt").write_text("ignored")
    return data


def test_resolve_schema_ref(schema_module):
    schema = resolve_schema_ref(f"{schema_module}:USER")
    assert set(schema) == {"name", "age", "tags", "nick"}
    assert resolve_schema_ref(f"{schema_module}:Schemas.USER") is schema


@pytest.mark.parametrize("ref", ["no_colon", ":USER", "module:"])
def test_resolve_schema_ref_invalid_format(ref):
    with pytest.raises(SchemaResolutionError):
        resolve_schema_ref(ref)


def test_resolve_schema_ref_missing(schema_module):
    with pytest.raises(SchemaResolutionError):
        resolve_schema_ref("no_such_module_for_vstruct:USER")
    with pytest.raises(SchemaResolutionError):
        resolve_schema_ref(f"{schema_module}:NOPE")


def test_find_data_files(data_dir):
    files = find_data_files([str(data_dir)])
    assert [f.name for f in files] == ["bad.yaml", "good.json", "good.yaml"]


def test_check_files_reports_location(schema_module, data_dir):
    schema = resolve_schema_ref(f"{schema_module}:USER")
    results = check_files(schema, find_data_files([str(data_dir)]), DataLoader(cache_enabled=False))
    by_name = {r.file_path.name: r for r in results}
    assert by_name["good.yaml"].ok
    assert by_name["good.json"].ok
    errors = by_name["bad.yaml"].errors
    assert len(errors) == 1
    assert errors[0]["path"] == "/tags/1"
    assert errors[0]["line"] == 5
    assert "Expected str but got int" in errors[0]["message"]


def test_check_files_reports_load_errors(tmp_path):
    path = tmp_path / "broken.yaml"
    path.write_text("a: [1, 2")
    (result,) = check_files({"a": [int]}, [path], DataLoader(cache_enabled=False))
    assert not result.ok
    assert "Failed to parse" in result.errors[0]["message"]


def test_check_files_rejects_scalar_documents(tmp_path):
    path = tmp_path / "scalar.yaml"
    path.write_text("just a string\n")
    (result,) = check_files({"a": str}, [path], DataLoader(cache_enabled=False))
    assert "Input must be an object" in result.errors[0]["message"]


def test_main_human_failure(schema_module, data_dir, capsys):
    with pytest.raises(SystemExit) as excinfo:
        main([f"{schema_module}:USER", str(data_dir)])
    assert excinfo.value.code == 1
    out = capsys.readouterr().out
    assert "bad.yaml" in out
    assert "ERROR:5: Validation error: Expected str but got int (path=/tags/1)" in out


def test_main_human_success(schema_module, data_dir, capsys):
    with pytest.raises(SystemExit) as excinfo:
        main([f"{schema_module}:USER", str(data_dir / "good.yaml")])
    assert excinfo.value.code == 0
    assert "Checked 1 file(s) with no errors." in capsys.readouterr().out


def test_main_json(schema_module, data_dir, capsys):
    with pytest.raises(SystemExit):
        main([f"{schema_module}:USER", str(data_dir), "--format", "json"])
    output = json.loads(capsys.readouterr().out)
    assert output["files"] == 3
    assert output["failed"] == 1


def test_main_github_actions(schema_module, data_dir, capsys):
    with pytest.raises(SystemExit):
        main([f"{schema_module}:USER", str(data_dir), "--format", "github-actions"])
    out = capsys.readouterr().out
    assert f"::error file={data_dir / 'bad.yaml'},line=5::" in out


def test_main_markdown(schema_module, data_dir, capsys):
    with pytest.raises(SystemExit):
        main([f"{schema_module}:USER", str(data_dir), "--format", "markdown"])
    out = capsys.readouterr().out
    assert "# vstruct check report" in out
    assert "Checked 3 file(s), 1 failed." in out
    assert "at `/tags/1` (line 5, column 5)" in out
    assert "- OK" in out


def test_main_no_files(schema_module, tmp_path, capsys):
    with pytest.raises(SystemExit) as excinfo:
        main([f"{schema_module}:USER", str(tmp_path / "missing")])
    assert excinfo.value.code == 1
    assert "No data files found." in capsys.readouterr().err


def test_main_bad_schema_ref(capsys):
    with pytest.raises(SystemExit) as excinfo:
        main(["no_such_module_for_vstruct:USER", "."])
    assert excinfo.value.code == 2


def test_main_malformed_schema(schema_module, data_dir, capsys):
    with pytest.raises(SystemExit) as excinfo:
        main([f"{schema_module}:BROKEN", str(data_dir / "good.yaml")])
    assert excinfo.value.code == 2
    assert "malformed schema" in capsys.readouterr().err
