"""Label compiler: transforms label designs into printer protocol text.

Public API
----------
The stable surface is the ``compile`` function and the ``CompilerOutput``
dataclass.  Everything else inside the compiler subpackage is private.

Example
-------
::

    from zplc import load_design
    from zplc.compiler import compile as zpl_compile

    design = load_design("shipping.yaml")
    output = zpl_compile(design, {"ct_number": "CT00000001234"})

    Path("label.zpl").write_text(output.text)
    print(output.summary())
"""
from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from zplc.compiler.base import CompilerOutput, CompilerTarget
from zplc.compiler.zpl_target import ZplTarget

if TYPE_CHECKING:
    from zplc.model.nodes import LabelDesign

_REGISTRY: dict[str, type[CompilerTarget]] = {
    "zpl": ZplTarget,
}


def compile(  # noqa: A001
    design: "LabelDesign",
    bindings: Mapping[str, object] | None = None,
    target: str = "zpl",
    **options: Any,
) -> CompilerOutput:
    """Compile a ``LabelDesign`` into printer protocol text.

    Parameters
    ----------
    design:
        The page geometry and ordered element list.
    bindings:
        Values for dynamic fields, keyed by field key.
    target:
        The compilation target.  Currently only ``"zpl"`` is supported.
    **options:
        Keyword arguments forwarded to the target constructor, e.g.
        ``catalog`` or ``copies``.

    Returns
    -------
    CompilerOutput
        The protocol text plus metadata.

    Raises
    ------
    ValueError
        If ``target`` is not a registered compiler target.
    """
    if target not in _REGISTRY:
        available = ", ".join(sorted(_REGISTRY))
        raise ValueError(
            f"Unknown compiler target {target!r}. Available targets: {available}"
        )
    compiler_cls = _REGISTRY[target]
    compiler = compiler_cls(**options)
    return compiler.compile(design, bindings)


def available_targets() -> list[str]:
    """Return the list of registered compiler target names."""
    return sorted(_REGISTRY)


__all__ = [
    "compile",
    "available_targets",
    "CompilerOutput",
    "CompilerTarget",
    "ZplTarget",
]
