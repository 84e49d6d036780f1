"""Named lists of mods, stored per mods folder in a small config file."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple

from modshelf.fsutil import (
    files_are_identical,
    list_files_in_subfolders,
    list_subfolders,
    parse_size_units,
)
from modshelf.selector import Selector, ask_question
from modshelf.terminal import (
    GREEN_BACKGROUND,
    MAGENTA_BACKGROUND,
    RED_BACKGROUND,
    Button,
    Terminal,
    get_app_version,
)

PRESET_FILE_NAME = "mod_presets.conf"
NO_PRESETS_LABEL = "NO MODS PRESETS"

_SEPARATOR = "########################################"


def _tag_selection(
    selector: Selector, mods: Sequence[str], selected: Sequence[str], start: int
) -> None:
    """Tag every mod of ``mods`` with its positions in ``selected``."""
    for number, mod in enumerate(selected, start=start):
        if mod not in mods:
            continue
        entry = mods.index(mod)
        tag = selector.get_tag(entry)
        if tag:
            tag += " & "
        selector.set_tag(entry, f"{tag}#{number}")


class ModPresets:
    """The mod presets of one mods folder, with the screens to manage them."""

    def __init__(self, terminal: Optional[Terminal] = None) -> None:
        self.terminal = terminal if terminal is not None else Terminal()
        self.selector = Selector()
        self.reset()

    def reset(self) -> None:
        """Forget every preset and the folder they belong to."""
        self.selected_mod_preset_index = -1
        self.mod_folder = ""
        self.preset_file_path = ""
        self.presets: List[str] = []
        self.data: Dict[str, List[str]] = {}

    @property
    def selected_mod_preset(self) -> str:
        """Name of the selected preset, or "" if none is selected."""
        if 0 <= self.selected_mod_preset_index < len(self.presets):
            return self.presets[self.selected_mod_preset_index]
        return ""

    def get_mods_list(self, preset: str) -> List[str]:
        """Return a copy of the mods of a preset, in order."""
        return list(self.data.get(preset, []))

    def read_parameter_file(self, mod_folder: str = "") -> None:
        """Load the presets file of ``mod_folder`` (or of the current folder)."""
        if not mod_folder:
            mod_folder = self.mod_folder
        self.reset()
        self.mod_folder = str(mod_folder)
        self.preset_file_path = f"{self.mod_folder}/{PRESET_FILE_NAME}"

        try:
            lines = Path(self.preset_file_path).read_text(encoding="utf-8").splitlines()
        except (FileNotFoundError, IsADirectoryError):
            lines = []

        current_preset = ""
        for line in lines:
            if line.startswith("#"):
                continue
            elements = line.split("=")
            if len(elements) != 2:
                continue
            key, value = (element.strip(" ") for element in elements)
            if key == "preset":
                current_preset = value
                if self.selected_mod_preset_index == -1:
                    self.selected_mod_preset_index = 0
                if current_preset not in self.presets:
                    self.presets.append(current_preset)
            else:
                self.data.setdefault(current_preset, []).append(value)

        self.fill_selector()

    def recreate_preset_file(self) -> None:
        """Write all presets to the presets file."""
        lines = ["# This is a config file", "", ""]
        for preset in self.presets:
            lines += [_SEPARATOR, "# mods preset name", f"preset = {preset}", "", "# mods list"]
            lines += [
                f"mod{index} = {mod}"
                for index, mod in enumerate(self.data.get(preset, []))
            ]
            lines += [_SEPARATOR, ""]
        Path(self.preset_file_path).write_text("\n".join(lines) + "\n", encoding="utf-8")

    def _draw_header(self, title: str) -> None:
        self.terminal.clear()
        self.terminal.print_right(f"modshelf v{get_app_version()}")
        self.terminal.print_left(title, RED_BACKGROUND)
        self.terminal.rule()

    def _save_and_reload(self) -> None:
        self.fill_selector()
        self.recreate_preset_file()
        self.read_parameter_file(self.mod_folder)

    def select_mod_preset(self) -> None:
        """Let the user pick, delete, edit or create presets until B is pressed."""
        self.fill_selector()
        redraw = True
        while True:
            if redraw:
                self._draw_header("Select mod preset")
                self.selector.render(self.terminal)
                self.terminal.rule()
                self.terminal.print_left(
                    f"  Page ({self.selector.current_page + 1}/{self.selector.nb_pages})"
                )
                self.terminal.rule()
                self.terminal.print_left_right(
                    " A : Select mod preset", " X : Delete mod preset "
                )
                self.terminal.print_left_right(" Y : Edit preset", "+ : Create a preset ")
                self.terminal.print_left(" B : Go back")

            buttons = self.terminal.read_buttons()
            if buttons is None:
                break
            down, held = buttons
            self.selector.scan_inputs(down, held)
            redraw = bool(down or held)

            if down & Button.B:
                break
            if down & Button.A and self.presets:
                self.selected_mod_preset_index = self.selector.selected_entry
                return
            if down & Button.X and self.presets:
                answer = ask_question(
                    "Are you sure you want to remove this preset ?",
                    ["Yes", "No"],
                    self.terminal,
                )
                if answer == "No":
                    redraw = True
                    continue
                self.delete_mod_preset(self.presets[self.selector.selected_entry])
            elif down & Button.PLUS:
                self.create_new_preset()
                self._save_and_reload()
            elif down & Button.Y:
                name = self.selector.selected_string
                self.edit_preset(name, self.get_mods_list(name))
                self._save_and_reload()

    def create_new_preset(self) -> Optional[str]:
        """Open the preset editor on a fresh, unused preset name."""
        offset = 1
        while True:
            name = f"preset-{len(self.presets) + offset}"
            offset += 1
            if name not in self.presets:
                break
        return self.edit_preset(name, [])

    def delete_mod_preset(self, name: str) -> None:
        """Remove a preset and rewrite the presets file."""
        if name not in self.presets:
            return
        self.data[name] = []
        self.presets.remove(name)
        self._save_and_reload()

    def edit_preset(self, name: str, selected_mods: Sequence[str]) -> Optional[str]:
        """Choose the mods of a preset; return its final name, or None if aborted."""
        selected = list(selected_mods)
        mods = sorted(list_subfolders(self.mod_folder))
        selector = Selector()
        selector.set_selection_list(mods)
        _tag_selection(selector, mods, selected, 0)

        redraw = True
        while True:
            if redraw:
                self._draw_header(
                    f"Creating preset : {name}. Select the mods you want."
                )
                selector.render(self.terminal)
                self.terminal.rule()
                self.terminal.print_left_right(" A : Add mod", "X : Cancel mod ")
                self.terminal.print_left_right(" + : SAVE", "B : Abort / Go back ")

            buttons = self.terminal.read_buttons()
            if buttons is None:
                return None
            down, held = buttons
            selector.scan_inputs(down, held)
            redraw = bool(down or held)

            if down & Button.A:
                mod = selector.selected_string
                if not mod:
                    continue
                selected.append(mod)
                entry = selector.selected_entry
                tag = selector.get_tag(entry)
                if tag:
                    tag += " & "
                selector.set_tag(entry, f"{tag}#{len(selected)}")
            elif down & Button.X:
                mod = selector.selected_string
                if mod in selected:
                    last = len(selected) - 1 - selected[::-1].index(mod)
                    del selected[last]
                    selector.reset_tags_list()
                    _tag_selection(selector, mods, selected, 1)
            elif down & Button.PLUS:
                break
            elif down & Button.B:
                return None

        self.data[name] = []
        if name in self.presets:
            preset_index = self.presets.index(name)
        else:
            preset_index = len(self.presets)
            self.presets.append(name)

        name = self.terminal.prompt("Preset name", name)
        self.presets[preset_index] = name
        self.data.setdefault(name, []).extend(selected)

        self.show_conflicted_files(name)
        return name

    def preset_conflicts(self, name: str) -> Tuple[Dict[str, str], int]:
        """Return the files shared by the preset's mods and its total size.

        The mapping goes from each shared relative path to the mod whose copy
        is used, that is the last one in the preset holding it.
        """
        seen: set = set()
        sizes: Dict[str, int] = {}
        conflicts: Dict[str, str] = {}
        for mod in self.data.get(name, []):
            self.terminal.print_left(
                f" > Getting files for the mod: {mod}", MAGENTA_BACKGROUND
            )
            mod_path = Path(f"{self.mod_folder}/{mod}")
            for relative_path in list_files_in_subfolders(mod_path):
                sizes[relative_path] = os.path.getsize(mod_path / relative_path)
                if relative_path in seen:
                    conflicts[relative_path] = mod
                else:
                    seen.add(relative_path)
        return dict(sorted(conflicts.items())), sum(sizes.values())

    def show_conflicted_files(self, name: str) -> None:
        """Show the files that mods of the preset overwrite, until A is pressed."""
        self.terminal.clear()
        self.terminal.print_left("Scanning preset files...", MAGENTA_BACKGROUND)
        conflicts, total_size = self.preset_conflicts(name)
        total_size_str = parse_size_units(total_size)

        if conflicts:
            entries = [Path(path).name for path in conflicts]
            tags = [f'-> "{mod}" will be used.' for mod in conflicts.values()]
        else:
            entries = ["No conflict has been found."]
            tags = [""]

        selector = Selector()
        selector.max_items_per_page = self.terminal.height - 9
        selector.set_selection_list(entries)
        selector.set_tags_list(tags)

        redraw = True
        while True:
            if redraw:
                self.terminal.clear()
                self.terminal.print_right(f"modshelf v{get_app_version()}")
                self.terminal.print_left(
                    f'Conflicted files for the preset "{name}":', RED_BACKGROUND
                )
                self.terminal.rule()
                selector.render(self.terminal)
                self.terminal.rule()
                self.terminal.print_left(
                    f"Total size of the preset:{total_size_str}", GREEN_BACKGROUND
                )
                self.terminal.rule()
                self.terminal.print_left(
                    f"Page ({selector.current_page + 1}/{selector.nb_pages})"
                )
                self.terminal.rule()
                self.terminal.print_left(" A : OK")
                if selector.nb_pages > 1:
                    self.terminal.print_left_right(
                        " <- : Previous Page", "-> : Next Page "
                    )

            buttons = self.terminal.read_buttons()
            if buttons is None:
                break
            down, held = buttons
            redraw = bool(down or held)
            if down & Button.A:
                break
            selector.scan_inputs(down, held)

    def get_conflicts_with_other_mods(self, mod_name: str) -> Dict[str, List[str]]:
        """Map every other mod to the files it shares with ``mod_name`` but differs on."""
        self.terminal.print_left(
            f"Searching for conflicts with {mod_name}", MAGENTA_BACKGROUND
        )
        mod_path = Path(f"{self.mod_folder}/{mod_name}")
        mod_files = set(list_files_in_subfolders(mod_path))

        conflicts: Dict[str, List[str]] = {}
        for other in list_subfolders(self.mod_folder):
            if other == mod_name:
                continue
            self.terminal.print_left(
                f" > Scanning conflicts with {other}", MAGENTA_BACKGROUND
            )
            other_path = Path(f"{self.mod_folder}/{other}")
            conflicts[other] = [
                relative_path
                for relative_path in list_files_in_subfolders(other_path)
                if relative_path in mod_files
                and not files_are_identical(
                    other_path / relative_path, mod_path / relative_path
                )
            ]
        return conflicts

    def select_previous_mod_preset(self) -> None:
        if self.selected_mod_preset_index == -1:
            return
        self.selected_mod_preset_index -= 1
        if self.selected_mod_preset_index < 0:
            self.selected_mod_preset_index = len(self.presets) - 1

    def select_next_mod_preset(self) -> None:
        if self.selected_mod_preset_index == -1:
            return
        self.selected_mod_preset_index += 1
        if self.selected_mod_preset_index >= len(self.presets):
            self.selected_mod_preset_index = 0

    def fill_selector(self) -> None:
        """Put the presets, with their mods as descriptions, in the selector."""
        self.selector.reset()
        if not self.presets:
            self.selector.set_selection_list([NO_PRESETS_LABEL])
            return
        self.selector.set_selection_list(self.presets)
        for index, preset in enumerate(self.presets):
            self.selector.set_description(
                index, [f"  | {mod}" for mod in self.data.get(preset, [])]
            )