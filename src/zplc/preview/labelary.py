"""Client for the Labelary ZPL rendering API.

The compiler never calls this service.  It exists so callers (and the
``zplc preview`` command) can turn compiled ZPL into a PNG or PDF for
on-screen review.  Labelary takes the print density in dots per
millimetre and the label size in inches as path segments, and the ZPL
as the request body::

    POST /v1/printers/{dpmm}dpmm/labels/{width}x{height}/{index}/

Failures surface as ``PreviewError``; they are never swallowed because a
missing preview is visible to the user.
"""
from __future__ import annotations

import logging
from types import TracebackType

import httpx

from zplc.compiler.primitives import MM_PER_INCH
from zplc.model.nodes import PageGeometry, ZplcError

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.labelary.com/v1"


class PreviewError(ZplcError):
    """Raised when the rendering service cannot produce a preview.

    Parameters
    ----------
    message:
        Human-readable description of the failure.
    status_code:
        HTTP status returned by the service, or ``None`` for transport
        errors.
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


def dots_per_mm(dpi: int) -> int:
    """Return the Labelary density code for *dpi* (203 → 8, 300 → 12)."""
    return round(dpi / MM_PER_INCH)


def _format_inches(value: float) -> str:
    return f"{value:.2f}".rstrip("0").rstrip(".")


class LabelaryClient:
    """Synchronous Labelary client.

    Parameters
    ----------
    base_url:
        API root, without a trailing slash.
    timeout:
        Request timeout in seconds.
    client:
        Optional pre-built ``httpx.Client`` (used by tests to inject a
        mock transport).  A client passed in is not closed by ``close``.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 10.0,
        client: httpx.Client | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._owns_client = client is None
        self._client = client or httpx.Client(timeout=timeout)

    def __enter__(self) -> "LabelaryClient":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def url_for(
        self, width_in: float, height_in: float, dpi: int, index: int = 0
    ) -> str:
        """Return the render endpoint for a label size and density."""
        size = f"{_format_inches(width_in)}x{_format_inches(height_in)}"
        return f"{self._base_url}/printers/{dots_per_mm(dpi)}dpmm/labels/{size}/{index}/"

    def render(
        self,
        zpl: str,
        width_in: float,
        height_in: float,
        dpi: int = 203,
        index: int = 0,
        accept: str = "image/png",
    ) -> bytes:
        """Render *zpl* and return the image bytes.

        Parameters
        ----------
        zpl:
            Compiled protocol text.
        width_in, height_in:
            Label size in inches.
        dpi:
            Printer resolution.
        index:
            Which label of a multi-label document to render.
        accept:
            Response media type, ``"image/png"`` or ``"application/pdf"``.

        Raises
        ------
        PreviewError
            On transport failure or a non-2xx response.
        """
        if width_in <= 0 or height_in <= 0:
            raise ValueError("label width and height must be positive")
        url = self.url_for(width_in, height_in, dpi, index)
        logger.debug("Requesting preview from %s", url)
        try:
            response = self._client.post(
                url,
                content=zpl.encode("utf-8"),
                headers={
                    "Accept": accept,
                    "Content-Type": "application/x-www-form-urlencoded",
                },
            )
        except httpx.HTTPError as exc:
            raise PreviewError(f"Preview request failed: {exc}") from exc

        if not response.is_success:
            detail = response.text.strip()[:200]
            raise PreviewError(
                f"Preview service returned {response.status_code}: {detail}",
                status_code=response.status_code,
            )
        return response.content

    def render_page(self, zpl: str, page: PageGeometry, **kwargs: object) -> bytes:
        """Render *zpl* for a page given in device dots."""
        return self.render(
            zpl,
            page.width_dots / page.dpi,
            page.height_dots / page.dpi,
            page.dpi,
            **kwargs,  # type: ignore[arg-type]
        )
