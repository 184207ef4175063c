"""Per-request render state and the capability tags execute against.

Tags never reach into arbitrary objects: they receive whatever the render
bound under the reserved scope key and only act on it when it satisfies
``LayoutScope``. ``RenderScope`` is the implementation the layout loop
creates for every top-level page render.
"""

from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable

from wren.templating.blocks import BlockAggregator, BlockFragment


@runtime_checkable
class LayoutScope(Protocol):
    """What the ``layout``, ``block`` and ``section`` tags may do."""

    def set_layout(self, name: str) -> None: ...

    def disable_layout(self, disabled: bool) -> None: ...

    def append_block(self, name: str, fragment: BlockFragment) -> None: ...

    def blocks_for(self, name: str) -> tuple[BlockFragment, ...]: ...


@dataclass(slots=True)
class RenderScope:
    """Mutable state for one top-level page render.

    Created when the render starts, dropped when it returns or raises.

    Attributes:
        bindings: View data handed to every template in the chain. The
            layout loop adds the reserved scope and content keys.
        layout: Pending layout name, ``None`` when undeclared.
        layout_disabled: When true after a step, the chain ends there.
        blocks: Fragments contributed so far in this chain.
    """

    bindings: dict[str, Any] = field(default_factory=dict)
    layout: str | None = None
    layout_disabled: bool = False
    blocks: BlockAggregator = field(default_factory=BlockAggregator)

    def set_layout(self, name: str) -> None:
        self.layout = name

    def disable_layout(self, disabled: bool) -> None:
        self.layout_disabled = disabled

    def append_block(self, name: str, fragment: BlockFragment) -> None:
        self.blocks.append(name, fragment)

    def blocks_for(self, name: str) -> tuple[BlockFragment, ...]:
        return self.blocks.collect_sorted(name)
