from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import Response
import logging

from app.core.auth import get_current_user
from app.db import models
from app.schemas.latex import PreviewRequest
from app.services.latex_preview import PreviewError, render_pdf, safe_filename

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/preview")
def preview_latex(
    request: PreviewRequest,
    current_user: models.User = Depends(get_current_user),
) -> Response:
    """Compile a template to PDF for inline preview."""
    content = (request.content or "").strip()
    if not content:
        raise HTTPException(status_code=400, detail="Template content is required.")

    filename = safe_filename(request.name or "")
    try:
        pdf = render_pdf(content)
    except PreviewError as e:
        logger.error(f"Preview failed for user {current_user.id}: {str(e)[:200]}")
        raise HTTPException(status_code=500, detail=str(e))

    return Response(
        content=pdf,
        media_type="application/pdf",
        headers={
            "Content-Disposition": f'inline; filename="{filename}.pdf"',
            "Cache-Control": "no-store",
        },
    )
