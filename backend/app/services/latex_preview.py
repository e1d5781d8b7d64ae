"""
LaTeX to PDF rendering for template previews, via the tectonic binary.
"""

import logging
import os
import re
import subprocess
import tempfile
from pathlib import Path

from app.core.config import settings

logger = logging.getLogger(__name__)

# pdfTeX-only glyph mapping commands break tectonic's XeTeX engine
_UNSUPPORTED_MARKERS = ("glyphtounicode", "pdfgentounicode", "pdfglyphtounicode")


class PreviewError(Exception):
    """Raised when tectonic fails or produces no PDF."""


def safe_filename(raw_name: str, fallback: str = "template") -> str:
    name = re.sub(r"\s+", "_", (raw_name or "").strip())
    name = re.sub(r"[^a-zA-Z0-9_-]", "", name)[:80]
    return name or fallback


def sanitize_for_preview(source: str) -> str:
    """Drop lines that mention glyph-to-unicode commands."""
    if not any(marker in source for marker in _UNSUPPORTED_MARKERS):
        return source
    kept = [
        line for line in source.splitlines()
        if not any(marker in line.lower() for marker in _UNSUPPORTED_MARKERS)
    ]
    return "\n".join(kept)


def render_pdf(content: str) -> bytes:
    """
    Compile a LaTeX document and return the PDF bytes.

    Blocking; call from a sync endpoint so FastAPI runs it in the threadpool.
    """
    with tempfile.TemporaryDirectory(prefix="latex-preview-") as workdir:
        tex_path = Path(workdir) / "input.tex"
        tex_path.write_text(sanitize_for_preview(content), encoding="utf-8")

        env = dict(os.environ)
        env["TECTONIC_CACHE_DIR"] = os.path.join(tempfile.gettempdir(), "tectonic-cache")

        command = [
            settings.TECTONIC_BIN,
            "--web-bundle",
            settings.TECTONIC_BUNDLE_URL,
            str(tex_path),
            "--outdir",
            workdir,
        ]
        logger.info(f"Rendering preview with {settings.TECTONIC_BIN} in {workdir}")
        try:
            subprocess.run(
                command,
                check=True,
                capture_output=True,
                text=True,
                timeout=settings.LATEX_PREVIEW_TIMEOUT,
                env=env,
            )
        except subprocess.CalledProcessError as e:
            detail = e.stderr or e.stdout
            logger.error(f"Tectonic exited with {e.returncode}")
            raise PreviewError(f"Tectonic failed: {detail}" if detail else "Tectonic compilation failed.")
        except subprocess.TimeoutExpired:
            raise PreviewError(f"Tectonic timed out after {settings.LATEX_PREVIEW_TIMEOUT} seconds.")
        except OSError as e:
            # Binary missing or not executable
            raise PreviewError(str(e) or "Tectonic compilation failed.")

        pdf_path = Path(workdir) / "input.pdf"
        if not pdf_path.exists():
            raise PreviewError("PDF output not found.")
        return pdf_path.read_bytes()
