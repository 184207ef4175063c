"""Block fragments collected across one render chain.

Every ``{% block name %}`` execution appends a ``BlockFragment`` under its
name. ``{% section name %}`` later reads them back through
``collect_sorted()``: highest score first, equal scores in the order the
blocks executed.

The aggregator belongs to exactly one ``RenderScope`` and is never shared
between threads, so it carries no lock. Parallel sub-renders feeding one
scope would need to serialize ``append()``.
"""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class BlockFragment:
    """Rendered body of one ``block`` tag execution.

    Attributes:
        content: The rendered body, copied out of the render buffer.
        score: Priority; higher renders first. Defaults to 0.
    """

    content: str
    score: int = 0


class BlockAggregator:
    """Block name to fragments, in execution order."""

    __slots__ = ("_blocks",)

    def __init__(self) -> None:
        self._blocks: dict[str, list[BlockFragment]] = {}

    def append(self, name: str, fragment: BlockFragment) -> None:
        self._blocks.setdefault(name, []).append(fragment)

    def fragments(self, name: str) -> tuple[BlockFragment, ...]:
        """Fragments for *name* in execution order."""
        return tuple(self._blocks.get(name, ()))

    def collect_sorted(self, name: str) -> tuple[BlockFragment, ...]:
        """Fragments for *name* by descending score.

        ``sorted`` is stable, so ties keep execution order. The stored
        list is never reordered, which makes repeated calls return the
        same sequence.
        """
        return tuple(sorted(self._blocks.get(name, ()), key=lambda f: -f.score))

    def names(self) -> tuple[str, ...]:
        return tuple(self._blocks)

    def __contains__(self, name: object) -> bool:
        return bool(self._blocks.get(name)) if isinstance(name, str) else False

    def __len__(self) -> int:
        return sum(len(frags) for frags in self._blocks.values())

    def __repr__(self) -> str:
        counts = ", ".join(f"{name}={len(frags)}" for name, frags in self._blocks.items())
        return f"<BlockAggregator {counts}>"
