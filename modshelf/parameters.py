"""Application parameters stored in an INI-like file, with config presets."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Union

from modshelf.terminal import get_app_version

DEFAULT_PARAMETERS_PATH = "/config/SimpleModManager/parameters.ini"

_SEPARATOR = "########################################"


class ParametersHandler:
    """Reads, holds and rewrites the parameters file."""

    def __init__(self, path: Union[str, Path] = DEFAULT_PARAMETERS_PATH) -> None:
        self._default_path = Path(path)
        self.current_config_preset_id = 0
        self.reset()

    def initialize(self) -> None:
        """Load the file, creating it with defaults first if absent."""
        if not self.path.is_file():
            self.recreate_parameters_file()
        self.read_parameters()
        self.recreate_parameters_file()
        self.set_current_config_preset_name(self.get_parameter("last-preset-used"))

    def reset(self) -> None:
        self.path = self._default_path
        self._data: Dict[str, str] = {}
        self.presets: List[str] = []
        self._set_default_parameters()

    def set_current_config_preset_id(self, preset_id: int) -> None:
        """Select a preset by index; an invalid index selects the first."""
        if preset_id < 0 or preset_id >= len(self.presets):
            self.current_config_preset_id = 0
        else:
            self.current_config_preset_id = preset_id
        self._fill_current_preset_parameters()
        self.recreate_parameters_file()

    def set_current_config_preset_name(self, name: str) -> None:
        try:
            preset_id = self.presets.index(name)
        except ValueError:
            preset_id = -1
        self.set_current_config_preset_id(preset_id)

    def set_parameter(self, name: str, value: str) -> None:
        self._data[name] = value
        self.recreate_parameters_file()

    def get_parameter(self, name: str) -> str:
        return self._data.get(name, "")

    @property
    def current_config_preset_name(self) -> str:
        return self.presets[self.current_config_preset_id]

    def increment_selected_preset_id(self) -> None:
        """Cycle to the next config preset."""
        next_id = self.current_config_preset_id + 1
        self.set_current_config_preset_id(0 if next_id >= len(self.presets) else next_id)

    def _set_default_parameters(self) -> None:
        self._data["stored-mods-base-folder"] = "/mods/"
        self._data["use-gui"] = "1"
        self._data["last-preset-used"] = "default"
        for preset, folder in (
            ("default", "/atmosphere/"),
            ("reinx", "/reinx/"),
            ("sxos", "/sxos/"),
            ("root", "/"),
        ):
            self.presets.append(preset)
            self._data[f"{preset}-install-mods-base-folder"] = folder

    def _fill_current_preset_parameters(self) -> None:
        preset = self.presets[self.current_config_preset_id]
        self._data["last-preset-used"] = preset
        self._data["install-mods-base-folder"] = self.get_parameter(
            f"{preset}-install-mods-base-folder"
        )

    def recreate_parameters_file(self) -> None:
        """Write the current parameters to the file."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        lines = [
            "# This is a config file",
            "",
            "# folder where mods are stored",
            f"stored-mods-base-folder = {self.get_parameter('stored-mods-base-folder')}",
            f"use-gui = {self.get_parameter('use-gui')}",
            f"last-preset-used = {self.get_parameter('last-preset-used')}",
            "",
            "",
        ]
        for preset in self.presets:
            lines += [
                _SEPARATOR,
                "# preset that can be changed in the app",
                f"preset = {preset}",
                "",
                "# base folder where mods are installed",
                "install-mods-base-folder = "
                + self.get_parameter(f"{preset}-install-mods-base-folder"),
                _SEPARATOR,
                "",
                "",
            ]
        lines += [
            "# DO NOT TOUCH THIS : used to recognise the last version of the program config",
            f"last-program-version = {get_app_version()}",
            "",
        ]
        self.path.write_text("\n".join(lines) + "\n", encoding="utf-8")

    def read_parameters(self) -> None:
        """Merge the file's parameters and presets into the current ones."""
        try:
            lines = self.path.read_text(encoding="utf-8").splitlines()
        except FileNotFoundError:
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
                if value not in self.presets:
                    self.presets.append(value)
            elif not current_preset:
                self._data[key] = value
            else:
                self._data[f"{current_preset}-{key}"] = value

        self._data["last-program-version"] = self.get_parameter(
            f"{self.presets[-1]}-last-program-version"
        )