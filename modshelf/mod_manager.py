"""Installing, removing and checking mods against an install folder."""

from __future__ import annotations

import os
import shutil
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple

from modshelf.fsutil import (
    files_are_identical,
    list_files_in_subfolders,
    parse_size_units,
    remove_empty_parents,
)
from modshelf.parameters import ParametersHandler
from modshelf.selector import Selector, ask_question
from modshelf.terminal import (
    GREEN_BACKGROUND,
    MAGENTA_BACKGROUND,
    RED_BACKGROUND,
    Button,
    Terminal,
)

CACHE_FILE_NAME = "mods_status_cache.txt"

YES = "Yes"
YES_TO_ALL = "Yes to all"
NO = "No"
NO_TO_ALL = "No to all"

TAG_INSTALLED = "-> Installed"
TAG_NOT_SAME = "-> Not Same"
TAG_NOT_INSTALLED = "-> Not Installed"


class ModManager:
    """Applies the mods of one folder to the install folder and tracks their status."""

    def __init__(
        self,
        parameters: Optional[ParametersHandler] = None,
        terminal: Optional[Terminal] = None,
    ) -> None:
        self.parameters = parameters if parameters is not None else ParametersHandler()
        self.terminal = terminal if terminal is not None else Terminal()
        self.install_mods_base_folder = "/atmosphere/"
        self.current_mods_folder_path = ""
        self.use_cache_only_for_status_check = False
        self.ignored_files: List[str] = []
        self.mods_status_cache: Dict[str, str] = {}
        self.mods_status_cache_fraction: Dict[str, float] = {}

    @property
    def _cache_file_path(self) -> str:
        return f"{self.current_mods_folder_path}/{CACHE_FILE_NAME}"

    def _cache_key(self, mod_name: str) -> str:
        return f"{self.parameters.current_config_preset_name}: {mod_name}"

    def _mod_folder(self, mod_name: str) -> Path:
        return Path(f"{self.current_mods_folder_path}/{mod_name}")

    def set_current_mods_folder(self, folder: str) -> None:
        """Switch to another folder of mods and load its status cache."""
        self.current_mods_folder_path = str(folder)
        self.mods_status_cache.clear()
        self.mods_status_cache_fraction.clear()
        self.load_mods_status_cache_file()

    def load_mods_status_cache_file(self) -> None:
        """Read the status cache of the current folder, if there is one."""
        self.mods_status_cache.clear()
        self.mods_status_cache_fraction.clear()
        cache_path = Path(self._cache_file_path)
        if not cache_path.is_file():
            return
        for line in cache_path.read_text(encoding="utf-8").splitlines():
            elements = line.split("=")
            if len(elements) < 2:
                continue
            # Early cache files carried an extra leading field.
            name_index = 1 if len(elements) == 4 else 0
            name = elements[name_index]
            self.mods_status_cache[name] = elements[name_index + 1]
            if len(elements) < 3:
                continue
            self.mods_status_cache_fraction[name] = float(elements[name_index + 2])

    def save_mods_status_cache_file(self) -> None:
        """Write every known, non-empty status to the cache file."""
        data = "".join(
            f"{key}={status}={self.mods_status_cache_fraction.get(key, 0.0):.6f}\n"
            for key, status in sorted(self.mods_status_cache.items())
            if status
        )
        Path(self._cache_file_path).write_text(data, encoding="utf-8")

    def reset_mod_cache_status(self, mod_name: str) -> None:
        """Forget the cached status of one mod under the current preset."""
        key = self._cache_key(mod_name)
        self.mods_status_cache[key] = ""
        self.mods_status_cache_fraction[key] = -1.0

    def reset_all_mods_cache_status(self) -> None:
        """Delete the cache file and start over with an empty cache."""
        Path(self._cache_file_path).unlink(missing_ok=True)
        self.load_mods_status_cache_file()

    def get_mod_status_fraction(self, mod_name: str) -> float:
        """Fraction of the mod's files that are installed as they are."""
        self.get_mod_status(mod_name)
        return self.mods_status_cache_fraction.get(self._cache_key(mod_name), 0.0)

    def get_mod_status(self, mod_name: str) -> str:
        """Return ACTIVE, INACTIVE or PARTIAL (n/m), checking files if not cached."""
        key = self._cache_key(mod_name)
        cached = self.mods_status_cache.get(key, "")
        if cached:
            return cached
        if self.use_cache_only_for_status_check:
            return "Not Checked"

        mod_folder = self._mod_folder(mod_name)
        self.terminal.print_left(
            "   Checking : Listing mod files...", MAGENTA_BACKGROUND, True
        )
        relative_paths = list_files_in_subfolders(mod_folder)
        total = len(relative_paths)

        same = 0
        self.terminal.reset_last_displayed_value()
        for index, relative_path in enumerate(relative_paths):
            mod_file = mod_folder / relative_path
            self.terminal.display_progress_bar(
                index, total, f"Checking : ({index + 1}/{total}) {mod_file.name}"
            )
            if files_are_identical(
                Path(self.install_mods_base_folder) / relative_path, mod_file
            ):
                same += 1

        # An empty mod counts as active; its fraction is undefined.
        self.mods_status_cache_fraction[key] = same / total if total else float("nan")
        if same == total:
            status = "ACTIVE"
        elif same == 0:
            status = "INACTIVE"
        else:
            status = f"PARTIAL ({same}/{total})"
        self.mods_status_cache[key] = status

        self.save_mods_status_cache_file()
        return status

    def _ask_to_replace(self, path: str) -> str:
        return ask_question(
            f"{path} already exists. Replace ?",
            [YES, YES_TO_ALL, NO, NO_TO_ALL],
            self.terminal,
        )

    def apply_mod(self, mod_name: str, force: bool = False) -> None:
        """Copy the mod's files into the install folder, asking about overwrites."""
        self.terminal.print_left(f"Applying : {mod_name}...", GREEN_BACKGROUND)
        mod_folder = self._mod_folder(mod_name)
        self.terminal.print_left("   Getting files list...", GREEN_BACKGROUND, True)
        relative_paths = [
            path
            for path in list_files_in_subfolders(mod_folder)
            if path not in self.ignored_files
        ]
        total = len(relative_paths)

        replace_option = YES_TO_ALL if force else ""
        self.terminal.reset_last_displayed_value()
        for index, relative_path in enumerate(relative_paths):
            if relative_path.startswith("."):
                continue
            mod_file = mod_folder / relative_path
            size = parse_size_units(os.path.getsize(mod_file))
            self.terminal.display_progress_bar(
                index,
                total,
                f"({index + 1}/{total}) {Path(relative_path).name} ({size})",
            )

            install_path = Path(self.install_mods_base_folder) / relative_path
            conflict = install_path.is_file()
            if conflict:
                if replace_option == NO_TO_ALL:
                    continue
                if replace_option != YES_TO_ALL:
                    replace_option = self._ask_to_replace(relative_path)
            if not conflict or replace_option in (YES, YES_TO_ALL):
                install_path.parent.mkdir(parents=True, exist_ok=True)
                shutil.copyfile(mod_file, install_path)

        self.reset_mod_cache_status(mod_name)

    def apply_mod_list(self, mod_names: Sequence[str]) -> None:
        """Apply mods in order; where they share a file, the last one wins."""
        applied: set = set()
        ignored_per_mod: List[List[str]] = [[] for _ in mod_names]
        for index in reversed(range(len(mod_names))):
            for mod_file in list_files_in_subfolders(self._mod_folder(mod_names[index])):
                if mod_file in applied:
                    ignored_per_mod[index].append(mod_file)
                else:
                    applied.add(mod_file)

        for mod_name, ignored in zip(mod_names, ignored_per_mod):
            self.ignored_files = ignored
            self.apply_mod(mod_name, True)
            self.ignored_files = []

    def remove_mod(self, mod_name: str) -> None:
        """Delete installed files that match the mod, then prune empty folders."""
        self.terminal.print_left(f"Disabling : {mod_name}", RED_BACKGROUND)
        mod_folder = self._mod_folder(mod_name)
        relative_paths = list_files_in_subfolders(mod_folder)
        total = len(relative_paths)

        self.terminal.reset_last_displayed_value()
        for index, relative_path in enumerate(relative_paths, start=1):
            mod_file = mod_folder / relative_path
            size = parse_size_units(os.path.getsize(mod_file))
            self.terminal.display_progress_bar(
                index, total, f"{Path(relative_path).name} ({size})"
            )
            installed = Path(self.install_mods_base_folder) / relative_path
            if files_are_identical(mod_file, installed):
                installed.unlink()
                remove_empty_parents(installed.parent)

        self.reset_mod_cache_status(mod_name)

    def mod_files_status(self, mod_folder_path: str) -> List[Tuple[str, str]]:
        """Return (relative path, status tag) for each file of a mod folder."""
        self.terminal.print_left("Checking Files...", RED_BACKGROUND)
        relative_paths = list_files_in_subfolders(mod_folder_path)
        total = len(relative_paths)
        statuses: List[Tuple[str, str]] = []
        self.terminal.reset_last_displayed_value()
        for index, relative_path in enumerate(relative_paths):
            self.terminal.display_progress_bar(
                index, total, f"({index + 1}/{total}) {Path(relative_path).name}"
            )
            installed = Path(self.install_mods_base_folder) / relative_path
            if files_are_identical(Path(mod_folder_path) / relative_path, installed):
                tag = TAG_INSTALLED
            elif installed.is_file():
                tag = TAG_NOT_SAME
            else:
                tag = TAG_NOT_INSTALLED
            statuses.append((relative_path, tag))
        return statuses

    def display_mod_files_status(self, mod_folder_path: str) -> None:
        """Show each file of a mod with its install status until B is pressed."""
        self.terminal.print_left("Listing Files...", RED_BACKGROUND)
        statuses = self.mod_files_status(mod_folder_path)

        selector = Selector()
        selector.max_items_per_page = self.terminal.height - 9
        selector.set_selection_list([path for path, _ in statuses])
        for index, (_, tag) in enumerate(statuses):
            selector.set_tag(index, tag)

        down: int = Button.A
        held: int = Button.A
        while True:
            if down or held:
                self.terminal.clear()
                self.terminal.print_left(str(mod_folder_path), RED_BACKGROUND)
                self.terminal.rule()
                selector.render(self.terminal)
                self.terminal.rule()
                self.terminal.print_left(
                    f"Page ({selector.current_page + 1}/{selector.nb_pages})"
                )
                self.terminal.rule()
                self.terminal.print_left_right(" B : Go back", "")
                if selector.nb_pages > 1:
                    self.terminal.print_left_right(
                        " <- : Previous Page", "-> : Next Page "
                    )

            buttons = self.terminal.read_buttons()
            if buttons is None:
                break
            down, held = buttons
            if down & Button.B:
                break
            selector.scan_inputs(down, held)