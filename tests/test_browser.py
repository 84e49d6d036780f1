import io

import pytest

from modshelf.browser import THIS_FOLDER_CONFIG, ModBrowser, path_depth
from modshelf.parameters import ParametersHandler
from modshelf.terminal import Button, Terminal


@pytest.fixture
def root(tmp_path):
    mods = tmp_path / "mods"
    (mods / "game1" / "modA" / "data").mkdir(parents=True)
    (mods / "game1" / "modA" / "data" / "a.txt").write_text("alpha")
    (mods / "game1" / "modB" / "data").mkdir(parents=True)
    (mods / "game1" / "modB" / "data" / "a.txt").write_text("beta")
    (mods / "game1" / "modB" / "data" / "b.txt").write_text("bravo")
    (mods / "game2").mkdir()
    (tmp_path / "install").mkdir()
    return tmp_path


def make_browser(root, keys=()):
    stream = io.StringIO()
    terminal = Terminal(stream=stream, keys=list(keys))
    params = ParametersHandler(root / "config" / "parameters.ini")
    params.set_parameter("stored-mods-base-folder", str(root / "mods"))
    params.set_parameter("default-install-mods-base-folder", str(root / "install"))
    browser = ModBrowser(terminal, params)
    browser.only_show_folders = True
    browser.max_relative_depth = 1
    browser.initialize()
    return browser, stream


def enter_game1(browser):
    browser.scan_inputs(Button.A, Button.A)


def test_path_depth_invariants():
    assert path_depth("/") == 0
    assert path_depth("/a/b/") == path_depth("/a/b")
    assert path_depth("/a/b/c") == path_depth("/a/b") + 1


def test_initialize_opens_base_folder(root):
    browser, _ = make_browser(root)
    assert browser.is_initialized
    assert browser.current_directory == str(root / "mods")
    assert browser.selector.selection_list == ["game1", "game2"]
    assert browser.current_relative_depth == 0
    assert browser.mod_manager.install_mods_base_folder == str(root / "install")


def test_change_directory_rejects_missing_and_too_deep(root):
    browser, _ = make_browser(root)
    assert browser.change_directory(str(root / "nowhere")) is False
    assert browser.change_directory(str(root / "mods" / "game1" / "modA")) is False
    assert browser.current_directory == str(root / "mods")


def test_change_directory_strips_trailing_slash(root):
    browser, _ = make_browser(root)
    assert browser.change_directory(str(root / "mods" / "game1") + "/") is True
    assert browser.current_directory == str(root / "mods" / "game1")
    assert browser.get_relative_path_depth(browser.current_directory) == 1


def test_go_back_restores_cursor(root):
    browser, _ = make_browser(root)
    browser.selector.increment_cursor_position()
    assert browser.go_to_selected_directory() is True
    assert browser.current_directory == str(root / "mods" / "game2")
    assert browser.go_back() is True
    assert browser.current_directory == str(root / "mods")
    assert browser.selector.selected_string == "game2"


def test_go_back_at_base_fails(root):
    browser, _ = make_browser(root)
    assert browser.go_back() is False


def test_entering_game_folder_checks_mods(root):
    browser, _ = make_browser(root)
    enter_game1(browser)
    assert browser.selector.selection_list == ["modA", "modB"]
    assert browser.selector.tags == ["INACTIVE", "INACTIVE"]


def test_apply_and_remove_mod(root):
    browser, _ = make_browser(root)
    enter_game1(browser)
    browser.scan_inputs(Button.A, Button.A)
    installed = root / "install" / "data" / "a.txt"
    assert installed.read_text() == "alpha"
    assert browser.selector.tags[0] == "ACTIVE"

    browser.scan_inputs(Button.X, Button.X)
    assert not installed.exists()
    assert browser.selector.tags[0] == "INACTIVE"


def test_apply_conflicting_mod_asks_to_replace(root):
    browser, _ = make_browser(root, keys=["a"])
    enter_game1(browser)
    browser.scan_inputs(Button.A, Button.A)
    browser.selector.increment_cursor_position()
    browser.scan_inputs(Button.A, Button.NONE)
    assert (root / "install" / "data" / "a.txt").read_text() == "beta"
    assert browser.selector.tags[1] == "ACTIVE"


def test_remove_all_mods_forced(root):
    browser, _ = make_browser(root)
    enter_game1(browser)
    browser.mod_manager.apply_mod("modB")
    browser.remove_all_mods(True)
    assert not (root / "install" / "data" / "b.txt").exists()
    assert not (root / "install" / "data" / "a.txt").exists()


def test_folder_menu_disable_all(root):
    browser, _ = make_browser(root, keys=["down", "a", "a"])
    enter_game1(browser)
    browser.scan_inputs(Button.A, Button.A)
    assert (root / "install" / "data" / "a.txt").exists()
    browser.scan_inputs(Button.ZL, Button.ZL)
    assert not (root / "install" / "data" / "a.txt").exists()
    assert browser.selector.tags == ["INACTIVE", "INACTIVE"]


def test_apply_mods_preset(root):
    conf = root / "mods" / "game1" / "mod_presets.conf"
    conf.write_text("preset = both\nmod0 = modA\nmod1 = modB\n")
    browser, _ = make_browser(root, keys=["a"])
    enter_game1(browser)
    assert browser.presets.selected_mod_preset == "both"
    browser.scan_inputs(Button.PLUS, Button.PLUS)
    assert (root / "install" / "data" / "a.txt").read_text() == "beta"
    assert (root / "install" / "data" / "b.txt").read_text() == "bravo"
    assert browser.selector.tags == ["INACTIVE", "ACTIVE"]


def test_folder_config_switches_preset_and_back(root):
    (root / "mods" / "game1" / THIS_FOLDER_CONFIG).write_text("sxos\n")
    browser, _ = make_browser(root)
    enter_game1(browser)
    assert browser.parameters.current_config_preset_name == "sxos"
    assert browser.mod_manager.install_mods_base_folder == "/sxos/"
    assert browser.go_back() is True
    assert browser.parameters.current_config_preset_name == "default"
    assert browser.mod_manager.install_mods_base_folder == str(root / "install")


def test_y_cycles_config_preset_at_top(root):
    browser, _ = make_browser(root)
    browser.scan_inputs(Button.Y, Button.Y)
    assert browser.parameters.current_config_preset_name == "reinx"
    assert browser.mod_manager.install_mods_base_folder == "/reinx/"


def test_switch_back_to_gui_requests_quit(root):
    browser, _ = make_browser(root, keys=["a"])
    browser.parameters.set_parameter("use-gui", "0")
    browser.scan_inputs(Button.ZR, Button.ZR)
    assert browser.quit_requested is True
    assert browser.parameters.get_parameter("use-gui") == "1"


def test_b_goes_back_from_game_folder(root):
    browser, _ = make_browser(root)
    enter_game1(browser)
    browser.scan_inputs(Button.B, Button.B)
    assert browser.current_directory == str(root / "mods")
    assert browser.current_relative_depth == 0


def test_display_conflicts_lists_differing_files(root):
    browser, stream = make_browser(root, keys=["b"])
    enter_game1(browser)
    browser.display_conflicts_with_other_mods("modA")
    output = stream.getvalue()
    assert "Conflicts with modA" in output
    assert "  | data/a.txt" in output


def test_print_menu_shows_current_folder(root):
    browser, stream = make_browser(root)
    browser.print_menu()
    assert f"Current Folder : {root / 'mods'}" in stream.getvalue()