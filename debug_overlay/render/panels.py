"""
Panel and Indicator Rendering.

Turns the contents of a capture store into the on-page markup: the
status indicator with its per-category toggles, and the panel container
listing every captured event. All values are escaped by the template
environment.
"""

from __future__ import annotations

import logging
from typing import Dict, Mapping, Optional, Union

from ..debug.events import Category
from ..debug.store import CaptureStore
from ..util.const import ID_CONTAINER, ID_INDICATOR
from ..util.template_parser import template_parse
from .templates import INDICATOR, PANELS, SCRIPTS, STYLES

logger = logging.getLogger(__name__)

COUNTER_CLASSES = (
    (Category.ERRORS, "error"),
    (Category.WARNINGS, "warning"),
    (Category.NOTICES, "notice"),
)


def normalize_counts(counts: Mapping[Union[Category, str], int]) -> Dict[Category, int]:
    """Accept counts keyed by Category or category name; fill in zeros."""
    normalized = {category: 0 for category in Category}
    for key, value in counts.items():
        normalized[Category.parse(key)] = int(value or 0)
    return normalized


def counter_class(counts: Mapping[Category, int]) -> str:
    """Pick the indicator style: error, then warning, then notice, else dumps."""
    for category, css_class in COUNTER_CLASSES:
        if counts.get(category, 0) > 0:
            return css_class
    return "dumps"


class PanelRenderer:
    """
    Renders the overlay markup.

    Example:
        renderer = PanelRenderer()
        head = renderer.render_head()
        indicator = renderer.render_indicator(store.counts())
        panels = renderer.render_panels(store)
    """

    def render_head(self) -> str:
        """Styles and the client-side toggle script."""
        return STYLES + SCRIPTS

    def render_indicator(
        self,
        counts: Mapping[Union[Category, str], int],
    ) -> Optional[str]:
        """
        Render the clickable counter and its per-category entries.

        Args:
            counts: Event count per category

        Returns:
            Markup, or None when nothing was captured
        """
        counts = normalize_counts(counts)
        total = sum(counts.values())
        if total == 0:
            return None

        entries = [
            {"category": category.value, "label": category.label, "count": count}
            for category, count in counts.items()
            if count > 0
        ]
        return template_parse(INDICATOR, {
            "indicator_id": ID_INDICATOR,
            "color_class": counter_class(counts),
            "total": total,
            "entries": entries,
        })

    def render_panels(self, store: Optional[CaptureStore]) -> str:
        """
        Render one panel per non-empty category.

        Args:
            store: The request's capture store (None renders an empty container)

        Returns:
            The container markup
        """
        panels = []
        if store is not None:
            for category, events in store.items():
                if events:
                    panels.append((category.value, [e.to_dict() for e in events]))

        logger.debug("Rendering %d debug panels", len(panels))
        return template_parse(PANELS, {"container_id": ID_CONTAINER, "panels": panels})

    def render_footer(self, store: Optional[CaptureStore]) -> str:
        """Panels followed by the indicator (if any)."""
        counts = store.counts() if store is not None else {}
        indicator = self.render_indicator(counts) or ""
        return self.render_panels(store) + indicator
