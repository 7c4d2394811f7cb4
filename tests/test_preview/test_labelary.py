"""Tests for zplc.preview.labelary, using an in-process mock transport."""
from __future__ import annotations

from pathlib import Path

import httpx
import pytest
from click.testing import CliRunner

import zplc.preview
from zplc.cli.main import cli
from zplc.model.nodes import PageGeometry
from zplc.preview.labelary import LabelaryClient, PreviewError, dots_per_mm

PNG = b"\x89PNG\r\n\x1a\nfake"


def _client(handler: object) -> LabelaryClient:
    transport = httpx.MockTransport(handler)  # type: ignore[arg-type]
    return LabelaryClient("https://labelary.test/v1/", client=httpx.Client(transport=transport))


class TestDensity:
    @pytest.mark.parametrize(("dpi", "dpmm"), [(152, 6), (203, 8), (300, 12), (600, 24)])
    def test_dots_per_mm(self, dpi: int, dpmm: int) -> None:
        assert dots_per_mm(dpi) == dpmm


class TestLabelaryClient:
    def test_url(self) -> None:
        client = LabelaryClient("https://labelary.test/v1/")
        try:
            assert (
                client.url_for(4, 6, 203)
                == "https://labelary.test/v1/printers/8dpmm/labels/4x6/0/"
            )
            assert client.url_for(3.94, 1.97, 300, 1).endswith("/12dpmm/labels/3.94x1.97/1/")
        finally:
            client.close()

    def test_render_posts_zpl(self) -> None:
        seen: dict[str, object] = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["body"] = request.content
            seen["accept"] = request.headers["accept"]
            return httpx.Response(200, content=PNG)

        with _client(handler) as client:
            image = client.render("^XA^XZ", 4, 6)
        assert image == PNG
        assert seen["url"] == "https://labelary.test/v1/printers/8dpmm/labels/4x6/0/"
        assert seen["body"] == b"^XA^XZ"
        assert seen["accept"] == "image/png"

    def test_render_page(self, page: PageGeometry) -> None:
        urls: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            urls.append(str(request.url))
            return httpx.Response(200, content=b"%PDF")

        with _client(handler) as client:
            assert client.render_page("^XA^XZ", page, accept="application/pdf") == b"%PDF"
        assert urls[0].endswith("/8dpmm/labels/4x6/0/")

    def test_error_status(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(400, text="ERROR: Invalid label size")

        with _client(handler) as client, pytest.raises(PreviewError) as info:
            client.render("^XA^XZ", 4, 6)
        assert info.value.status_code == 400
        assert "Invalid label size" in str(info.value)

    def test_redirect_status(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(
                301,
                content=b"<html>moved</html>",
                headers={"Location": "https://elsewhere.test/"},
            )

        with _client(handler) as client, pytest.raises(PreviewError) as info:
            client.render("^XA^XZ", 4, 6)
        assert info.value.status_code == 301

    def test_transport_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        with _client(handler) as client, pytest.raises(PreviewError) as info:
            client.render("^XA^XZ", 4, 6)
        assert info.value.status_code is None

    def test_bad_size(self) -> None:
        with _client(lambda r: httpx.Response(200)) as client, pytest.raises(ValueError):
            client.render("^XA^XZ", 0, 6)

    def test_injected_client_left_open(self) -> None:
        http = httpx.Client(transport=httpx.MockTransport(lambda r: httpx.Response(200)))
        LabelaryClient(client=http).close()
        assert not http.is_closed
        http.close()


class TestPreviewCommand:
    @pytest.fixture()
    def design_file(self, tmp_path: Path) -> Path:
        path = tmp_path / "label.yaml"
        path.write_text(
            "page: {width_dots: 812, height_dots: 1218}\n"
            "elements: [{kind: text, text: Hi}]\n",
            encoding="utf-8",
        )
        return path

    def test_writes_image(
        self, monkeypatch: pytest.MonkeyPatch, design_file: Path, tmp_path: Path
    ) -> None:
        bodies: list[bytes] = []

        def handler(request: httpx.Request) -> httpx.Response:
            bodies.append(request.content)
            return httpx.Response(200, content=PNG)

        monkeypatch.setattr(
            zplc.preview, "LabelaryClient", lambda *a, **kw: _client(handler)
        )
        out = tmp_path / "label.png"
        result = CliRunner().invoke(cli, ["preview", str(design_file), "-o", str(out)])
        assert result.exit_code == 0, result.output
        assert out.read_bytes() == PNG
        assert b"^FDHi^FS" in bodies[0]

    def test_failure_exits(
        self, monkeypatch: pytest.MonkeyPatch, design_file: Path, tmp_path: Path
    ) -> None:
        monkeypatch.setattr(
            zplc.preview,
            "LabelaryClient",
            lambda *a, **kw: _client(lambda r: httpx.Response(503, text="busy")),
        )
        out = tmp_path / "label.png"
        result = CliRunner().invoke(cli, ["preview", str(design_file), "-o", str(out)])
        assert result.exit_code == 1
        assert not out.exists()
