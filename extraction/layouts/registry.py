"""Name → Layout lookup, built once at startup and injected where needed."""

import logging
from typing import Optional

from extraction.layouts.base import Layout
from extraction.layouts.cemig import build_cemig_layout

logger = logging.getLogger(__name__)


class LayoutRegistry:
    def __init__(self) -> None:
        self._layouts: dict[str, Layout] = {}

    def register(self, layout: Layout) -> None:
        """Add a layout; an existing layout with the same name is replaced."""
        if layout.name in self._layouts:
            logger.warning(
                f"Layout {layout.name} already registered, overwriting",
                extra={"layout": layout.name},
            )
        self._layouts[layout.name] = layout
        logger.info(
            f"Layout {layout.name} v{layout.version} registered",
            extra={"layout": layout.name},
        )

    def get(self, name: str) -> Optional[Layout]:
        return self._layouts.get(name)

    def has(self, name: str) -> bool:
        return name in self._layouts

    def names(self) -> list[str]:
        return list(self._layouts)

    def __len__(self) -> int:
        return len(self._layouts)


def build_default_registry() -> LayoutRegistry:
    registry = LayoutRegistry()
    registry.register(build_cemig_layout())
    return registry
