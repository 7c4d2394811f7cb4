"""Abstract base class for label compilation targets.

Each target (currently only ZPL) implements ``CompilerTarget`` and
produces a ``CompilerOutput`` holding the protocol text.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from zplc.model.nodes import LabelDesign


@dataclass
class CompilerOutput:
    """Result of compiling a label design.

    Parameters
    ----------
    text:
        Newline-joined protocol commands, ready for a printer transport.
    metadata:
        Arbitrary key/value pairs emitted by the compiler, such as the
        page size and element counts.
    command_count:
        Number of command lines in ``text``.
    skipped_count:
        Elements that produced no commands (grid guides and dropped
        barcodes).
    """

    text: str
    metadata: dict[str, object] = field(default_factory=dict)
    command_count: int = 0
    skipped_count: int = 0

    def summary(self) -> str:
        """Return a one-line human-readable summary of this output."""
        return (
            f"Generated {self.command_count} command(s), "
            f"skipped {self.skipped_count} element(s)"
        )


class CompilerTarget(ABC):
    """Abstract base class for design-to-protocol compilation targets.

    Subclasses must implement :meth:`name` and :meth:`compile`.

    The contract for :meth:`compile` is:

    * **Idempotent**: identical inputs always produce identical outputs.
    * **Pure**: no side effects (no file I/O, no network calls).
    * **Total**: returns a ``CompilerOutput`` for any valid design.
      Substitute placeholders rather than raising for sparse input.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Unique short name for this target, e.g. ``"zpl"``."""

    @abstractmethod
    def compile(
        self,
        design: "LabelDesign",
        bindings: Mapping[str, object] | None = None,
    ) -> CompilerOutput:
        """Compile a ``LabelDesign`` to ``CompilerOutput``.

        Parameters
        ----------
        design:
            The page geometry and ordered element list.
        bindings:
            Values for dynamic fields, keyed by field key.

        Returns
        -------
        CompilerOutput
            The protocol text and metadata.
        """
