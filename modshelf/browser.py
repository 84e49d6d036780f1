"""The folder browser: navigate stored mods and act on them with buttons."""

from __future__ import annotations

import os
import re
import sys
from pathlib import Path
from typing import List, Optional

from modshelf.mod_manager import ModManager
from modshelf.parameters import ParametersHandler
from modshelf.presets import ModPresets
from modshelf.selector import Selector, ask_question
from modshelf.terminal import (
    GREEN_BACKGROUND,
    MAGENTA_BACKGROUND,
    RED_BACKGROUND,
    RESET,
    Button,
    Terminal,
    get_app_version,
)

THIS_FOLDER_CONFIG = "this_folder_config.txt"
HIDDEN_ENTRIES = (".plugins",)

_REPEATED_SLASHES = re.compile(r"/{2,}")


def _collapse_slashes(path: str) -> str:
    return _REPEATED_SLASHES.sub("/", path)


def path_depth(path: str) -> int:
    """Number of folder levels in a slash-separated path."""
    depth = len(path.split("/"))
    if path.startswith("/"):
        depth -= 1
    if path.endswith("/"):
        depth -= 1
    return depth


class ModBrowser:
    """Browses the stored-mods folder and applies mods from its game folders."""

    def __init__(
        self,
        terminal: Optional[Terminal] = None,
        parameters: Optional[ParametersHandler] = None,
    ) -> None:
        self.terminal = terminal if terminal is not None else Terminal()
        self.parameters = parameters if parameters is not None else ParametersHandler()
        self.selector = Selector()
        self.mod_manager = ModManager(self.parameters, self.terminal)
        self.presets = ModPresets(self.terminal)

        self.is_initialized = False
        self.quit_requested = False
        self.only_show_folders = False
        self.max_relative_depth = -1
        self.current_relative_depth = 0
        self.base_folder = "/"
        self.current_directory = self.base_folder
        self.main_config_preset = self.parameters.current_config_preset_name

        self._last_directory = ""
        self._last_cursor_position = -1
        self._last_page = -1

    @property
    def _at_mods_level(self) -> bool:
        return self.current_relative_depth == self.max_relative_depth

    def initialize(self) -> None:
        """Load the parameters and open the stored-mods base folder."""
        self.selector.max_items_per_page = 30
        self.parameters.initialize()
        self.main_config_preset = self.parameters.current_config_preset_name

        self.base_folder = self.parameters.get_parameter("stored-mods-base-folder")
        self.mod_manager.install_mods_base_folder = self.parameters.get_parameter(
            "install-mods-base-folder"
        )
        self.mod_manager.parameters = self.parameters

        self.change_directory(self.base_folder)
        self.is_initialized = True

    # ------------------------------------------------------------------ input

    def scan_inputs(self, down: int, held: int) -> None:
        """React to the buttons of one frame, then redraw the menu."""
        self.selector.scan_inputs(down, held)
        if not down and not held:
            return

        if self._at_mods_level:
            self._scan_mods_level(down)
        else:
            self._scan_folder_level(down)

        if down & Button.B and not self.go_back():
            self.terminal.print_left("Can't go back.")

        self.print_menu()

    def _retag_selected(self) -> None:
        self.selector.set_tag(
            self.selector.selected_entry,
            self.mod_manager.get_mod_status(self.selector.selected_string),
        )

    def _scan_mods_level(self, down: int) -> None:
        selected = self.selector.selected_string
        if down & Button.A:
            if not selected:
                return
            self.mod_manager.apply_mod(selected)
            self.terminal.print_left("Checking...", MAGENTA_BACKGROUND, True)
            self._retag_selected()
        elif down & Button.X:
            if not selected:
                return
            self.mod_manager.remove_mod(selected)
            self._retag_selected()
        elif down & Button.Y:
            self._mod_options_menu(selected)
        elif down & (Button.ZL | Button.ZR):
            self._folder_options_menu()
        elif down & Button.MINUS:
            self.presets.select_mod_preset()
        elif down & Button.PLUS:
            self._apply_selected_preset()
        elif down & Button.L:
            self.presets.select_previous_mod_preset()
        elif down & Button.R:
            self.presets.select_next_mod_preset()

    def _scan_folder_level(self, down: int) -> None:
        if down & Button.A:
            self.go_to_selected_directory()
            if self._at_mods_level:
                self.mod_manager.set_current_mods_folder(self.current_directory)
                self.check_mods_status()
                self.presets.read_parameter_file(self.current_directory)
        elif down & Button.Y:
            if self.current_relative_depth == 0:
                self.parameters.increment_selected_preset_id()
                self.mod_manager.install_mods_base_folder = self.parameters.get_parameter(
                    "install-mods-base-folder"
                )
        elif down & (Button.ZL | Button.ZR):
            answer = ask_question(
                "Do you want to switch back to the GUI ?", ["Yes", "No"], self.terminal
            )
            if answer == "Yes":
                self.parameters.set_parameter("use-gui", "1")
                self.quit_requested = True

    def _mod_options_menu(self, selected: str) -> None:
        status_option = "Show the status of each mod files"
        conflicts_option = "Show the list of conflicts"
        answer = ask_question(
            "Mod options:", [status_option, conflicts_option], self.terminal
        )
        if answer == status_option:
            self.mod_manager.display_mod_files_status(
                f"{self.current_directory}/{selected}"
            )
        elif answer == conflicts_option:
            self.display_conflicts_with_other_mods(selected)

    def _folder_options_menu(self) -> None:
        recheck_option = "Reset mods status cache and recheck all mods"
        disable_option = "Disable all mods"
        preset_option = "Attribute a config preset for this folder"
        answer = ask_question(
            "Options for this folder:",
            [recheck_option, disable_option, preset_option],
            self.terminal,
        )
        if answer == recheck_option:
            confirm = ask_question(
                "Do you which to recheck all mods ?", ["Yes", "No"], self.terminal
            )
            if confirm == "Yes":
                self.mod_manager.reset_all_mods_cache_status()
                self.check_mods_status()
        elif answer == disable_option:
            self.remove_all_mods()
            self.check_mods_status()
        elif answer == preset_option:
            self._attribute_folder_preset()

    def _attribute_folder_preset(self) -> None:
        keep_option = "Keep the main menu preset (default)."
        choices: List[str] = [keep_option]
        descriptions: List[List[str]] = [[]]
        for preset in self.parameters.presets:
            choices.append(preset)
            folder = self.parameters.get_parameter(f"{preset}-install-mods-base-folder")
            descriptions.append([f"install-mods-base-folder: {folder}"])

        answer = ask_question(
            "Please select the config preset you want for this folder:",
            choices,
            self.terminal,
            descriptions,
        )
        if not answer:
            return

        config_path = Path(self.current_directory) / THIS_FOLDER_CONFIG
        config_path.unlink(missing_ok=True)
        if answer != keep_option:
            config_path.write_text(answer, encoding="utf-8")
            self.change_config_preset(answer)
        else:
            self.change_config_preset(self.main_config_preset)

    def _apply_selected_preset(self) -> None:
        preset = self.presets.selected_mod_preset
        answer = ask_question(
            f"Do you want to apply {preset} ?", ["Yes", "No"], self.terminal
        )
        if answer != "Yes":
            return
        self.remove_all_mods(True)
        self.mod_manager.apply_mod_list(self.presets.get_mods_list(preset))
        self.check_mods_status()

    # ---------------------------------------------------------------- display

    def print_menu(self) -> None:
        """Draw the browser screen."""
        term = self.terminal
        term.clear()
        term.print_right(f"modshelf v{get_app_version()}")
        term.print_left(f"Current Folder : {self.current_directory}", RED_BACKGROUND)
        term.rule()
        self.selector.render(term)
        term.rule()
        term.print_left(
            f"  Page ({self.selector.current_page + 1}/{self.selector.nb_pages})"
        )
        term.rule()
        if self._at_mods_level:
            term.print_left(f"Mod preset : {self.presets.selected_mod_preset}")
        term.print_left(
            "Configuration preset : "
            + GREEN_BACKGROUND
            + self.parameters.current_config_preset_name
            + RESET
        )
        term.print_left(
            f"install-mods-base-folder = {self.mod_manager.install_mods_base_folder}"
        )
        term.rule()
        if self._at_mods_level:
            term.print_left_right(" ZL : Rescan all mods", "ZR : Disable all mods ")
            term.print_left_right(
                " A/X : Apply/Disable mod", "L/R : Previous/Next preset "
            )
            term.print_left_right(" -/+ : Select/Apply mod preset", "Y : Mod options ")
        else:
            term.print_left_right(" A : Select folder", "Y : Change config preset ")
            term.print_left_right(" B : Quit", "ZL/ZR : Switch back to the GUI ")
        if self.current_relative_depth > 0:
            term.print_left(" B : Go back")

    def display_conflicts_with_other_mods(self, mod_name: str) -> None:
        """List the files other mods would overwrite differently, until B is pressed."""
        self.terminal.clear()
        conflicts = self.presets.get_conflicts_with_other_mods(mod_name)

        names: List[str] = []
        descriptions: List[List[str]] = []
        for other, files in conflicts.items():
            if not files:
                continue
            names.append(other)
            descriptions.append([f"  | {path}" for path in files])

        selector = Selector()
        selector.set_selection_list(names)
        selector.set_description_list(descriptions)
        selector.max_items_per_page = self.terminal.height - 9

        term = self.terminal
        down: int = Button.A
        held: int = Button.A
        while True:
            if down or held:
                term.clear()
                term.print_left(f"Conflicts with {mod_name}", RED_BACKGROUND)
                term.rule()
                selector.render(term)
                term.rule()
                term.print_left(f"Page ({selector.current_page + 1}/{selector.nb_pages})")
                term.rule()
                term.print_left_right(" B : Go back", "")
                if selector.nb_pages > 1:
                    term.print_left_right(" <- : Previous Page", "-> : Next Page ")

            buttons = term.read_buttons()
            if buttons is None:
                break
            down, held = buttons
            if down & Button.B:
                break
            selector.scan_inputs(down, held)

    def check_mods_status(self) -> None:
        """Tag every mod of the current folder with its status."""
        if not self._at_mods_level:
            return
        self.selector.reset_tags_list()
        mods = list(self.selector.selection_list)
        for index, mod in enumerate(mods):
            self.selector.set_tag(index, "Checking...")
            self.print_menu()
            self.terminal.print_left(
                f"Checking ({index + 1}/{len(mods)}) : {mod}...", MAGENTA_BACKGROUND
            )
            self.selector.set_tag(index, self.mod_manager.get_mod_status(mod))

    # ------------------------------------------------------------- navigation

    def change_directory(self, new_directory: str) -> bool:
        """Open a folder; return False if it is missing or too deep."""
        new_directory = str(new_directory)
        if len(new_directory) != 1 and new_directory.endswith("/"):
            new_directory = new_directory[:-1]

        if not os.path.isdir(new_directory):
            return False
        depth = self.get_relative_path_depth(new_directory)
        if depth != -1 and depth > self.max_relative_depth:
            return False

        restored_cursor = -1
        restored_page = -1
        if new_directory == self._last_directory:
            restored_cursor = self._last_cursor_position
            restored_page = self._last_page
        self._last_directory = self.current_directory
        self._last_cursor_position = self.selector.cursor_position
        self._last_page = self.selector.current_page
        self.current_directory = new_directory
        self.current_relative_depth = depth

        if self.only_show_folders:
            entries = [
                entry.name for entry in Path(new_directory).iterdir() if entry.is_dir()
            ]
        else:
            entries = os.listdir(new_directory)
        entries = sorted(entry for entry in entries if entry not in HIDDEN_ENTRIES)

        self.selector.set_selection_list(entries)
        self.selector.reset_cursor_position()
        self.selector.reset_page()

        if 0 <= restored_page < self.selector.nb_pages:
            while self.selector.current_page != restored_page:
                self.selector.next_page()
            self.selector.cursor_position = restored_cursor

        if depth == self.max_relative_depth:
            config_path = Path(new_directory) / THIS_FOLDER_CONFIG
            if config_path.is_file():
                self.main_config_preset = self.parameters.current_config_preset_name
                lines = config_path.read_text(encoding="utf-8").splitlines()
                if lines:
                    self.change_config_preset(lines[0])
        elif self.main_config_preset != self.parameters.current_config_preset_name:
            self.change_config_preset(self.main_config_preset)

        return True

    def change_config_preset(self, name: str) -> None:
        """Switch the config preset and the install folder that goes with it."""
        self.parameters.set_current_config_preset_name(name)
        self.mod_manager.install_mods_base_folder = self.parameters.get_parameter(
            "install-mods-base-folder"
        )

    def go_to_selected_directory(self) -> bool:
        new_path = _collapse_slashes(
            f"{self.current_directory}/{self.selector.selected_string}"
        )
        return self.change_directory(new_path)

    def go_back(self) -> bool:
        """Open the parent folder unless already at the base folder."""
        if (
            self.get_relative_path_depth(self.current_directory) <= 0
            or self.current_directory == "/"
        ):
            return False
        elements = self.current_directory.split("/")
        new_path = _collapse_slashes("/" + "/".join(elements[:-1]))
        if not os.path.isdir(new_path):
            print(f'Can\'t go back, "{new_path}" is not a folder', file=sys.stderr)
            return False
        return self.change_directory(new_path)

    def get_relative_path_depth(self, path: str) -> int:
        """Depth of ``path`` relative to the base folder."""
        return path_depth(str(path)) - path_depth(self.base_folder)

    def remove_all_mods(self, force: bool = False) -> None:
        """Disable every mod of the current folder, asking first unless forced."""
        if force:
            answer = "Yes"
        else:
            answer = ask_question(
                "Do you want to disable all mods ?", ["Yes", "No"], self.terminal
            )
        if answer == "Yes":
            for mod in list(self.selector.selection_list):
                self.mod_manager.remove_mod(mod)