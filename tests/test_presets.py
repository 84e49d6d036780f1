import io

import pytest

from modshelf.presets import NO_PRESETS_LABEL, PRESET_FILE_NAME, ModPresets
from modshelf.terminal import Terminal


def make_presets(keys=()):
    return ModPresets(Terminal(stream=io.StringIO(), keys=list(keys)))


@pytest.fixture
def mods_folder(tmp_path):
    for name in ("m1", "m2"):
        (tmp_path / name).mkdir()
    return tmp_path


def write_preset_file(folder, text):
    (folder / PRESET_FILE_NAME).write_text(text, encoding="utf-8")


def test_read_parameter_file_parses_presets(tmp_path):
    write_preset_file(
        tmp_path,
        "# comment\npreset =  p1 \nmod0 = a\nmod1 =b  \n\npreset = p2\nmod0 = c\nbad line\n",
    )
    presets = make_presets()
    presets.read_parameter_file(str(tmp_path))
    assert presets.presets == ["p1", "p2"]
    assert presets.get_mods_list("p1") == ["a", "b"]
    assert presets.get_mods_list("p2") == ["c"]
    assert presets.selected_mod_preset_index == 0
    assert presets.selected_mod_preset == "p1"


def test_read_missing_file_has_no_presets(tmp_path):
    presets = make_presets()
    presets.read_parameter_file(str(tmp_path))
    assert presets.presets == []
    assert presets.selected_mod_preset_index == -1
    assert presets.selected_mod_preset == ""
    assert presets.selector.selection_list == [NO_PRESETS_LABEL]


def test_repeated_preset_is_listed_once(tmp_path):
    write_preset_file(tmp_path, "preset = p1\nmod0 = a\npreset = p1\nmod0 = b\n")
    presets = make_presets()
    presets.read_parameter_file(str(tmp_path))
    assert presets.presets == ["p1"]
    assert presets.get_mods_list("p1") == ["a", "b"]


def test_recreate_round_trip(tmp_path):
    presets = make_presets()
    presets.read_parameter_file(str(tmp_path))
    presets.presets = ["first", "second"]
    presets.data = {"first": ["x", "y"], "second": ["z"]}
    presets.recreate_preset_file()

    reloaded = make_presets()
    reloaded.read_parameter_file(str(tmp_path))
    assert reloaded.presets == ["first", "second"]
    assert reloaded.get_mods_list("first") == ["x", "y"]
    assert reloaded.get_mods_list("second") == ["z"]


def test_recreate_file_format(tmp_path):
    presets = make_presets()
    presets.read_parameter_file(str(tmp_path))
    presets.presets = ["p1"]
    presets.data = {"p1": ["a", "b"]}
    presets.recreate_preset_file()
    lines = (tmp_path / PRESET_FILE_NAME).read_text(encoding="utf-8").splitlines()
    assert lines[0] == "# This is a config file"
    assert "preset = p1" in lines
    assert lines.index("mod0 = a") + 1 == lines.index("mod1 = b")


def test_get_mods_list_returns_copy(tmp_path):
    write_preset_file(tmp_path, "preset = p1\nmod0 = a\n")
    presets = make_presets()
    presets.read_parameter_file(str(tmp_path))
    mods = presets.get_mods_list("p1")
    mods.append("other")
    assert presets.get_mods_list("p1") == ["a"]
    assert presets.get_mods_list("unknown") == []


def test_next_and_previous_wrap(tmp_path):
    write_preset_file(tmp_path, "preset = p1\npreset = p2\npreset = p3\n")
    presets = make_presets()
    presets.read_parameter_file(str(tmp_path))
    presets.select_previous_mod_preset()
    assert presets.selected_mod_preset == "p3"
    presets.select_next_mod_preset()
    assert presets.selected_mod_preset == "p1"
    presets.select_next_mod_preset()
    assert presets.selected_mod_preset == "p2"


def test_next_and_previous_without_selection(tmp_path):
    presets = make_presets()
    presets.read_parameter_file(str(tmp_path))
    presets.select_next_mod_preset()
    presets.select_previous_mod_preset()
    assert presets.selected_mod_preset_index == -1


def test_fill_selector_descriptions(tmp_path):
    write_preset_file(tmp_path, "preset = p1\nmod0 = a\nmod1 = b\npreset = p2\n")
    presets = make_presets()
    presets.read_parameter_file(str(tmp_path))
    assert presets.selector.selection_list == ["p1", "p2"]
    assert presets.selector.descriptions == [["  | a", "  | b"], []]


def test_delete_mod_preset(tmp_path):
    write_preset_file(tmp_path, "preset = p1\nmod0 = a\npreset = p2\nmod0 = b\n")
    presets = make_presets()
    presets.read_parameter_file(str(tmp_path))
    presets.delete_mod_preset("p1")
    assert presets.presets == ["p2"]

    reloaded = make_presets()
    reloaded.read_parameter_file(str(tmp_path))
    assert reloaded.presets == ["p2"]
    assert reloaded.get_mods_list("p2") == ["b"]


def test_delete_unknown_preset_changes_nothing(tmp_path):
    write_preset_file(tmp_path, "preset = p1\nmod0 = a\n")
    presets = make_presets()
    presets.read_parameter_file(str(tmp_path))
    presets.delete_mod_preset("missing")
    assert presets.presets == ["p1"]


def test_conflicts_with_other_mods(tmp_path):
    for mod in ("a", "b", "c"):
        (tmp_path / mod / "data").mkdir(parents=True)
    (tmp_path / "a" / "data" / "f.bin").write_bytes(b"one")
    (tmp_path / "a" / "data" / "g.bin").write_bytes(b"same")
    (tmp_path / "b" / "data" / "f.bin").write_bytes(b"two")
    (tmp_path / "c" / "data" / "g.bin").write_bytes(b"same")
    presets = make_presets()
    presets.read_parameter_file(str(tmp_path))
    conflicts = presets.get_conflicts_with_other_mods("a")
    assert conflicts == {"b": ["data/f.bin"], "c": []}


def test_preset_conflicts_last_mod_wins(tmp_path):
    for mod in ("a", "b"):
        (tmp_path / mod).mkdir()
    (tmp_path / "a" / "f.bin").write_bytes(b"12345")
    (tmp_path / "a" / "only_a.bin").write_bytes(b"123")
    (tmp_path / "b" / "f.bin").write_bytes(b"1234567")
    write_preset_file(tmp_path, "preset = p\nmod0 = a\nmod1 = b\n")
    presets = make_presets()
    presets.read_parameter_file(str(tmp_path))
    conflicts, total = presets.preset_conflicts("p")
    assert conflicts == {"f.bin": "b"}
    assert total == len(b"1234567") + len(b"123")


def test_create_new_preset_with_one_mod(mods_folder):
    presets = make_presets(["a", "+", "", "a"])
    presets.read_parameter_file(str(mods_folder))
    name = presets.create_new_preset()
    assert name == "preset-1"
    assert presets.presets == ["preset-1"]
    assert presets.get_mods_list("preset-1") == ["m1"]


def test_edit_preset_abort(mods_folder):
    presets = make_presets(["a", "b"])
    presets.read_parameter_file(str(mods_folder))
    assert presets.edit_preset("p", []) is None
    assert presets.presets == []


def test_edit_preset_rename(mods_folder):
    presets = make_presets(["down", "a", "+", "renamed", "a"])
    presets.read_parameter_file(str(mods_folder))
    assert presets.edit_preset("p", []) == "renamed"
    assert presets.presets == ["renamed"]
    assert presets.get_mods_list("renamed") == ["m2"]


def test_edit_preset_cancel_removes_last_occurrence(mods_folder):
    presets = make_presets(["a", "a", "x", "+", "", "a"])
    presets.read_parameter_file(str(mods_folder))
    presets.edit_preset("p", ["m2"])
    assert presets.get_mods_list("p") == ["m2", "m1"]


def test_select_mod_preset_moves_selection(tmp_path):
    write_preset_file(tmp_path, "preset = p1\npreset = p2\n")
    presets = make_presets(["down", "a"])
    presets.read_parameter_file(str(tmp_path))
    presets.select_mod_preset()
    assert presets.selected_mod_preset == "p2"


def test_select_mod_preset_creates_and_saves(mods_folder):
    presets = make_presets(["+", "a", "+", "", "a", "b"])
    presets.read_parameter_file(str(mods_folder))
    presets.select_mod_preset()

    reloaded = make_presets()
    reloaded.read_parameter_file(str(mods_folder))
    assert reloaded.presets == ["preset-1"]
    assert reloaded.get_mods_list("preset-1") == ["m1"]