# tests/test_cli.py
import json
from unittest.mock import patch
import pytest

from Spine2D_Json_Tools import cli
from Spine2D_Json_Tools.json_merger import read_json


@pytest.fixture
def body_file(tmp_path, body_raw):
    path = tmp_path / "body.json"
    path.write_text(json.dumps(body_raw), encoding="utf-8")
    return str(path)


@pytest.fixture
def tail_file(tmp_path, tail_raw):
    path = tmp_path / "tail.json"
    path.write_text(json.dumps(tail_raw), encoding="utf-8")
    return str(path)


def test_merge(body_file, tail_file, tmp_path):
    out = str(tmp_path / "merged.json")
    assert cli.main(["merge", body_file, tail_file, "-o", out]) == 0
    merged = read_json(out)
    assert [s["name"] for s in merged["slots"]][0] == "tail"
    assert {b["name"] for b in merged["bones"]} >= {"tail", "tail-tip", "hip"}


def test_merge_collision_exits_with_error(body_file, tmp_path):
    out = tmp_path / "merged.json"
    assert cli.main(["merge", body_file, body_file, "-o", str(out)]) == 1
    assert not out.exists()


def test_rename_bones(body_file, tmp_path):
    out = str(tmp_path / "renamed.json")
    assert cli.main(["rename", body_file, "--prefix", "a-", "-o", out]) == 0
    names = [b["name"] for b in read_json(out)["bones"]]
    assert names[0] == "root"
    assert "a-hip" in names


def test_rename_bones_including_root(body_file, tmp_path):
    out = str(tmp_path / "renamed.json")
    assert cli.main(["rename", body_file, "--suffix", "_L", "--include-root", "-o", out]) == 0
    assert read_json(out)["bones"][0]["name"] == "root_L"


def test_rename_animations(body_file, tmp_path):
    out = str(tmp_path / "renamed.json")
    assert cli.main(["rename", body_file, "--kind", "animation", "--prefix", "x-", "-o", out]) == 0
    assert list(read_json(out)["animations"]) == ["x-walk", "x-idle"]


def test_extend(body_file, tmp_path, capsys):
    out = str(tmp_path / "extended.json")
    assert cli.main(["extend", body_file, "idle", "2", "-o", out]) == 0
    rotate = read_json(out)["animations"]["idle"]["bones"]["torso"]["rotate"]
    assert [k.get("time") for k in rotate] == [None, 2, 2, 4]
    assert cli.main(["durations", out]) == 0
    assert "idle\t4" in capsys.readouterr().out.splitlines()


def test_extend_unknown_animation(body_file, tmp_path):
    assert cli.main(["extend", body_file, "run", "2", "-o", str(tmp_path / "x.json")]) == 1


def test_durations(body_file, capsys):
    assert cli.main(["durations", body_file]) == 0
    assert capsys.readouterr().out.splitlines() == ["walk\t1", "idle\t2"]


def test_missing_input(tmp_path):
    assert cli.main(["durations", str(tmp_path / "missing.json")]) == 1


def test_unknown_command_exits():
    with pytest.raises(SystemExit):
        cli.main(["explode"])


def test_unpremultiply_loads_image_helpers_on_demand(tmp_path):
    assert not hasattr(cli, "unpremultiply_alpha")
    with patch("Spine2D_Json_Tools.image_utils.unpremultiply_alpha") as unpremultiply:
        assert cli.main(["unpremultiply", "in.png", str(tmp_path / "out.png")]) == 0
    unpremultiply.assert_called_once_with("in.png", str(tmp_path / "out.png"))
