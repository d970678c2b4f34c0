"""A toggle button that switches a pose between viewing and editing."""

from __future__ import annotations

from typing import Callable, List

EditCallback = Callable[[str], None]

EDITING_STYLE = (
    "background-color: rgb(204, 255, 179); color: rgb(0, 0, 0); outline: none;"
)
IDLE_STYLE = (
    "background-color: rgb(255, 255, 204); color: rgb(0, 0, 0); outline: none;"
)


class EditButton:
    """Edit/Finish toggle bound to a pose by its id.

    Listeners in ``started_editing`` and ``finished_editing`` are called with
    the button's id whenever the state is set.
    """

    def __init__(self, id: str) -> None:
        self.id = id
        self.started_editing: List[EditCallback] = []
        self.finished_editing: List[EditCallback] = []
        self.editing = False
        self.text = ""
        self.style_sheet = ""
        self.finish_editing()

    def toggle(self) -> None:
        if self.editing:
            self.finish_editing()
        else:
            self.start_editing()

    def start_editing(self) -> None:
        self.editing = True
        self.text = "Finish"
        self.style_sheet = EDITING_STYLE
        for callback in list(self.started_editing):
            callback(self.id)

    def finish_editing(self) -> None:
        self.editing = False
        self.text = "Edit"
        self.style_sheet = IDLE_STYLE
        for callback in list(self.finished_editing):
            callback(self.id)