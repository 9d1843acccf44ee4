"""Abstract base class for all per-cell bit sources."""

from abc import ABC, abstractmethod


class BitSource(ABC):
    """Base class for the oscillator register inside an entropy cell.

    A source owns ``length`` one-bit stages (index 0 = first stage) and is
    advanced in two steps per clock period: :meth:`clock` at the rising
    edge, then :meth:`settle` for whatever happens between edges. The cell's
    output synchronizer samples :attr:`top` at the next edge.

    Every source must declare metadata and implement ``clock`` and
    ``settle``.
    """

    name: str = "unnamed"
    description: str = ""
    deterministic: bool = False

    def __init__(self, length: int) -> None:
        self.length = length
        self._stages = [0] * length

    @property
    def register(self) -> tuple[int, ...]:
        return tuple(self._stages)

    @property
    def top(self) -> int:
        return self._stages[-1]

    @abstractmethod
    def clock(self, enable: int, stage_enables: tuple[int, ...]) -> None:
        """Rising clock edge.

        Parameters
        ----------
        enable:
            Cell enable input as seen *before* the edge.
        stage_enables:
            Per-stage enable bits as seen *before* the edge.
        """
        ...

    @abstractmethod
    def settle(self, enable: int, stage_enables: tuple[int, ...]) -> None:
        """Evolve between clock edges using the values seen *after* the edge.

        A low ``enable`` clears every stage asynchronously.
        """
        ...

    def reset(self) -> None:
        self._stages = [0] * self.length

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name!r} length={self.length}>"
