"""A paged list widget with a cursor, tags and description lines."""

from __future__ import annotations

from typing import List, Optional, Sequence

from modshelf.terminal import BLUE_BACKGROUND, Button, Terminal, get_app_version


class Selector:
    """A list of entries split into pages, with a movable cursor."""

    def __init__(self) -> None:
        self._previous_held = 0
        self._holding_ticks = 0
        self.reset()

    def reset(self) -> None:
        """Return to an empty list with default settings."""
        self.cursor_marker = ">"
        self.default_cursor_position = 0
        self.reset_cursor_position()
        self.max_items_per_page = 30
        self.current_page = 0
        self.selection_list: List[str] = []
        self.tags: List[str] = []
        self.descriptions: List[List[str]] = []
        self._pages: List[List[int]] = []

    def set_selection_list(self, selection_list: Sequence[str]) -> None:
        """Replace the entries, clearing tags and descriptions."""
        self.selection_list = list(selection_list)
        self.reset_tags_list()
        self.reset_description_list()

    def set_tag(self, entry: int, tag: str) -> None:
        if 0 <= entry < len(self.tags):
            self.tags[entry] = tag

    def set_tags_list(self, tags: Sequence[str]) -> None:
        if len(tags) != len(self.selection_list):
            return
        self.tags = list(tags)

    def set_description(self, entry: int, lines: Sequence[str]) -> None:
        if not 0 <= entry < len(self.descriptions):
            return
        self.descriptions[entry] = list(lines)
        self.process_page_numbering()

    def set_description_list(self, descriptions: Sequence[Sequence[str]]) -> None:
        if len(descriptions) != len(self.selection_list):
            return
        self.descriptions = [list(lines) for lines in descriptions]
        self.process_page_numbering()

    def process_page_numbering(self) -> None:
        """Split the entries into pages according to the lines they take."""
        page_lines = 1
        pages: List[List[int]] = [[]]
        for entry, lines in enumerate(self.descriptions[: len(self.selection_list)]):
            page_lines += 1 + len(lines)
            if page_lines >= self.max_items_per_page:
                pages.append([])
                page_lines = 1
            pages[-1].append(entry)
        self._pages = pages

    @property
    def nb_pages(self) -> int:
        return len(self._pages)

    def _current_items(self) -> List[int]:
        if 0 <= self.current_page < len(self._pages):
            return self._pages[self.current_page]
        return []

    @property
    def selected_entry(self) -> int:
        """Index of the entry under the cursor, or -1."""
        items = self._current_items()
        if 0 <= self.cursor_position < len(items):
            return items[self.cursor_position]
        return -1

    @property
    def selected_string(self) -> str:
        if not self.selection_list:
            return ""
        entry = self.selected_entry
        if not 0 <= entry < len(self.selection_list):
            return ""
        return self.selection_list[entry]

    def get_entry(self, name: str) -> int:
        try:
            return self.selection_list.index(name)
        except ValueError:
            return -1

    def get_tag(self, entry: int) -> str:
        return self.tags[entry]

    def render(self, terminal: Terminal) -> None:
        """Draw the current page."""
        for position, entry in enumerate(self._current_items()):
            selected = position == self.cursor_position
            color = BLUE_BACKGROUND if selected else ""
            prefix = (self.cursor_marker if selected else " ") + " "
            terminal.print_left_right(
                prefix + self.selection_list[entry], self.tags[entry] + " ", color
            )
            for line in self.descriptions[entry]:
                terminal.print_left(line, color)

    def scan_inputs(self, down: int, held: int) -> None:
        """Move the cursor or page according to the buttons of one frame."""
        if held == self._previous_held:
            self._holding_ticks += 1
        else:
            self._holding_ticks = 0
        self._previous_held = held

        if not down and not held:
            return

        repeat = self._holding_ticks > 15 and self._holding_ticks % 3 == 0
        if down & Button.DOWN or (held & Button.DOWN and repeat):
            self.increment_cursor_position()
        elif down & Button.UP or (held & Button.UP and repeat):
            self.decrement_cursor_position()
        elif down & Button.LEFT:
            self.previous_page()
        elif down & Button.RIGHT:
            self.next_page()

    def reset_cursor_position(self) -> None:
        self.cursor_position = self.default_cursor_position

    def reset_page(self) -> None:
        self.current_page = 0

    def reset_tags_list(self) -> None:
        self.tags = [""] * len(self.selection_list)

    def reset_description_list(self) -> None:
        self.descriptions = [[] for _ in self.selection_list]
        self.process_page_numbering()

    def increment_cursor_position(self) -> None:
        if not self.selection_list:
            self.cursor_position = -1
            return
        self.cursor_position += 1
        if self.cursor_position >= len(self._current_items()):
            self.next_page()
            self.cursor_position = 0

    def decrement_cursor_position(self) -> None:
        if not self.selection_list:
            self.cursor_position = -1
            return
        self.cursor_position -= 1
        if self.cursor_position < 0:
            self.previous_page()
            self.cursor_position = len(self._current_items()) - 1

    def next_page(self) -> None:
        self.current_page += 1
        if self.current_page >= self.nb_pages:
            self.current_page = 0
        else:
            self.cursor_position = 0

    def previous_page(self) -> None:
        self.current_page -= 1
        if self.current_page < 0:
            self.current_page = self.nb_pages - 1
        else:
            self.cursor_position = 0


def ask_question(
    question: str,
    answers: Sequence[str],
    terminal: Terminal,
    descriptions: Optional[Sequence[Sequence[str]]] = None,
) -> str:
    """Let the user pick one of the answers; return "" when backed out."""
    selector = Selector()
    layout_lines = 5 + len(question) // max(terminal.width, 1)
    selector.max_items_per_page = terminal.height - layout_lines
    selector.set_selection_list(answers)
    if descriptions and len(descriptions) == len(answers):
        selector.set_description_list(descriptions)

    answer = ""
    down: int = Button.A
    while True:
        if down:
            terminal.clear()
            terminal.print_right(f"modshelf v{get_app_version()}")
            terminal.rule()
            terminal.print_left(question)
            terminal.rule()
            selector.render(terminal)
            terminal.rule()
            terminal.print_left_right(" A: Select", "B: Back ")

        buttons = terminal.read_buttons()
        if buttons is None:
            break
        down, _ = buttons
        if down & Button.DOWN:
            selector.increment_cursor_position()
        elif down & Button.UP:
            selector.decrement_cursor_position()
        elif down & Button.A:
            answer = selector.selected_string
            break
        elif down & Button.B:
            break

    terminal.clear()
    return answer