"""Reusable element template: a named prototype subtree."""
from dataclasses import dataclass
from typing import Optional

from models.ui_node import UiNode


@dataclass
class UiElementTemplate:
    """Template that stamps out copies of a prototype node.

    An empty display_name falls back to the prototype's name.
    """
    display_name: str = ""
    prototype: Optional[UiNode] = None

    def __post_init__(self):
        if not self.display_name and self.prototype is not None:
            self.display_name = self.prototype.name

    def instantiate(self) -> UiNode:
        """Return a detached deep copy of the prototype with fresh ids.

        Raises:
            ValueError: if the template has no prototype
        """
        if self.prototype is None:
            raise ValueError(f"Template '{self.display_name}' has no prototype")
        return self.prototype.clone()
