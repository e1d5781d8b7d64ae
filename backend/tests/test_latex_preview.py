"""LaTeX preview endpoint and the tectonic wrapper."""

import subprocess
from pathlib import Path

import pytest

from app.api.endpoints import latex
from app.services import latex_preview
from app.services.latex_preview import PreviewError, render_pdf, safe_filename, sanitize_for_preview


class TestHelpers:
    @pytest.mark.parametrize("raw,expected", [
        ("My Resume v2", "My_Resume_v2"),
        ("  ../../etc/passwd ", "etcpasswd"),
        ("", "template"),
        ("***", "template"),
        ("a" * 120, "a" * 80),
    ])
    def test_safe_filename(self, raw, expected):
        assert safe_filename(raw) == expected

    def test_sanitize_drops_glyph_lines(self):
        source = "\\documentclass{article}\n\\input{glyphtounicode}\n\\pdfgentounicode=1\nbody"
        assert sanitize_for_preview(source) == "\\documentclass{article}\nbody"

    def test_sanitize_leaves_clean_source(self):
        source = "\\documentclass{article}\nbody\n"
        assert sanitize_for_preview(source) == source


class TestRenderPdf:
    def test_success(self, monkeypatch):
        seen = {}

        def fake_run(command, **kwargs):
            seen["command"] = command
            seen["env"] = kwargs["env"]
            tex_path = Path(command[3])
            seen["source"] = tex_path.read_text(encoding="utf-8")
            (tex_path.parent / "input.pdf").write_bytes(b"%PDF-1.5 fake")
            return subprocess.CompletedProcess(command, 0, "", "")

        monkeypatch.setattr(latex_preview.subprocess, "run", fake_run)

        pdf = render_pdf("\\documentclass{article}\n\\input{glyphtounicode}\nHello")

        assert pdf == b"%PDF-1.5 fake"
        assert seen["command"][1] == "--web-bundle"
        assert seen["command"][4] == "--outdir"
        assert "TECTONIC_CACHE_DIR" in seen["env"]
        assert "glyphtounicode" not in seen["source"]

    def test_compiler_error(self, monkeypatch):
        def failing(command, **kwargs):
            raise subprocess.CalledProcessError(1, command, output="", stderr="! Undefined control sequence.")

        monkeypatch.setattr(latex_preview.subprocess, "run", failing)

        with pytest.raises(PreviewError, match="Tectonic failed: ! Undefined control sequence."):
            render_pdf("\\bogus")

    def test_missing_output(self, monkeypatch):
        monkeypatch.setattr(
            latex_preview.subprocess, "run",
            lambda command, **kwargs: subprocess.CompletedProcess(command, 0, "", ""),
        )

        with pytest.raises(PreviewError, match="PDF output not found."):
            render_pdf("\\documentclass{article}")

    def test_missing_binary(self, monkeypatch):
        def missing(command, **kwargs):
            raise FileNotFoundError(2, "No such file or directory", "tectonic")

        monkeypatch.setattr(latex_preview.subprocess, "run", missing)

        with pytest.raises(PreviewError):
            render_pdf("\\documentclass{article}")


class TestPreviewEndpoint:
    def test_returns_pdf(self, client, user_headers, monkeypatch):
        monkeypatch.setattr(latex, "render_pdf", lambda content: b"%PDF-fake")

        response = client.post(
            "/api/latex/preview",
            json={"content": "\\documentclass{article}", "name": "My CV"},
            headers=user_headers,
        )

        assert response.status_code == 200
        assert response.content == b"%PDF-fake"
        assert response.headers["content-type"] == "application/pdf"
        assert response.headers["content-disposition"] == 'inline; filename="My_CV.pdf"'
        assert response.headers["cache-control"] == "no-store"

    def test_requires_content(self, client, user_headers):
        response = client.post("/api/latex/preview", json={"content": "  "}, headers=user_headers)
        assert response.status_code == 400

    def test_requires_session(self, client):
        response = client.post("/api/latex/preview", json={"content": "x"})
        assert response.status_code == 401

    def test_tectonic_failure_is_500(self, client, user_headers, monkeypatch):
        def failing(content):
            raise PreviewError("Tectonic failed: boom")

        monkeypatch.setattr(latex, "render_pdf", failing)

        response = client.post("/api/latex/preview", json={"content": "x"}, headers=user_headers)

        assert response.status_code == 500
        assert response.json()["detail"] == "Tectonic failed: boom"
