"""
Panel Visibility State Machine.

Server-side model of the client toggle script emitted with the overlay
styles. The container starts hidden with every panel visible; the two
actions mirror toggleAllErrorPanels() and toggleErrorPanel(type).
"""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional, Union

from ..debug.events import Category
from ..debug.store import CaptureStore


class PanelVisibility:
    """
    Visibility of the panel container and each category panel.

    Only categories that rendered a panel take part.

    Example:
        state = PanelVisibility([Category.ERRORS, Category.NOTICES])
        state.toggle_all()               # container shown, all panels visible
        state.toggle_one("errors")       # only errors visible
        state.toggle_one("errors")       # all visible again
    """

    def __init__(self, categories: Iterable[Union[Category, str]]):
        self.container_visible = False
        self._panels: Dict[Category, bool] = {
            Category.parse(category): True for category in categories
        }

    @classmethod
    def from_store(cls, store: CaptureStore) -> "PanelVisibility":
        """Build the state for the panels a store would render."""
        return cls(category for category, events in store.items() if events)

    @property
    def panels(self) -> List[Category]:
        return list(self._panels)

    def visible_panels(self) -> List[Category]:
        return [category for category, shown in self._panels.items() if shown]

    def is_visible(self, category: Union[Category, str]) -> bool:
        return self._panels.get(Category.parse(category), False)

    def toggle_all(self) -> None:
        """Show the container with every panel, or hide the container."""
        if not self.container_visible:
            self.container_visible = True
            for category in self._panels:
                self._panels[category] = True
        else:
            self.container_visible = False

    def toggle_one(self, category: Union[Category, str]) -> Optional[Category]:
        """
        Switch between "only this category" and "every category".

        Returns:
            The targeted category, or None if it has no panel
        """
        target = Category.parse(category)
        if target not in self._panels:
            return None

        only_target_visible = all(
            not shown
            for other, shown in self._panels.items()
            if other is not target
        )

        if not only_target_visible:
            for other in self._panels:
                self._panels[other] = other is target
        else:
            for other in self._panels:
                self._panels[other] = True
        return target
