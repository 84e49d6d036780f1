"""Application state, first-run migration and the main input loop."""

from __future__ import annotations

import argparse
import os
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Union

from modshelf.browser import ModBrowser
from modshelf.parameters import ParametersHandler
from modshelf.selector import ask_question
from modshelf.terminal import GREEN_BACKGROUND, Button, Terminal, get_app_version

PathLike = Union[str, "os.PathLike[str]"]

DEFAULT_PARAMETERS_PATH = "~/.config/modshelf/parameters.ini"
OLD_CONFIG_NAME = "parameters.ini"
MAX_RELATIVE_DEPTH = 1


@dataclass
class AppState:
    """Flags shared across the application while it runs."""

    quit_now_triggered: bool = False
    trigger_switch_ui: bool = False

    @property
    def version_str(self) -> str:
        return f"v{get_app_version()}"


def migrate_old_config(
    terminal: Terminal, old_config_path: PathLike, parameters: PathLike
) -> bool:
    """Move a parameters file left in the working folder to ``parameters``.

    ``parameters`` is the path of the current parameters file. Returns
    whether a migration took place.
    """
    old_path = Path(old_config_path)
    if not old_path.is_file():
        return False

    handler = ParametersHandler(str(parameters))
    handler.initialize()
    new_path = Path(parameters)

    version = get_app_version()
    terminal.print_left("")
    terminal.print_left(f"Welcome in modshelf v{version}", GREEN_BACKGROUND)
    for _ in range(4):
        terminal.print_left("")
    terminal.print_left(f" > Looks like you've been running on a version <= {version}")
    terminal.print_left(f" > Now parameters.ini is read from : {new_path}")
    terminal.print_left(" > The old file will be moved to this location.")
    terminal.print_left("")
    terminal.print_left("")
    ask_question("Confirm by pressing A.", ["Ok"], terminal)

    new_path.parent.mkdir(parents=True, exist_ok=True)
    shutil.move(str(old_path), str(new_path))
    return True


def run(browser: ModBrowser, terminal: Terminal, state: AppState) -> None:
    """Feed button frames to the browser until the user quits or input ends."""
    while not state.quit_now_triggered:
        buttons = terminal.read_buttons()
        if buttons is None:
            break
        down, held = buttons
        if down & Button.B and browser.current_relative_depth == 0:
            break
        browser.scan_inputs(down, held)
        if browser.quit_requested:
            state.trigger_switch_ui = True
            state.quit_now_triggered = True


def _parse_args(argv: Optional[List[str]]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="modshelf", description="Browse, apply and remove game mods."
    )
    parser.add_argument(
        "--parameters",
        default=os.path.expanduser(DEFAULT_PARAMETERS_PATH),
        help="path of the parameters file",
    )
    parser.add_argument(
        "--old-config",
        default=None,
        help="parameters file from an older layout, moved on start",
    )
    parser.add_argument("--version", action="version", version=get_app_version())
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    """Start the text interface."""
    args = _parse_args(argv)
    terminal = Terminal()

    old_config = args.old_config or str(Path.cwd() / OLD_CONFIG_NAME)
    migrate_old_config(terminal, old_config, args.parameters)

    parameters = ParametersHandler(str(args.parameters))
    browser = ModBrowser(terminal, parameters)
    browser.only_show_folders = True
    browser.max_relative_depth = MAX_RELATIVE_DEPTH
    browser.initialize()
    browser.print_menu()

    state = AppState()
    run(browser, terminal, state)
    return 0