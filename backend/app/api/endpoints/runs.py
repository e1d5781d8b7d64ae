from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from typing import Any, List

from app.core.auth import get_current_user
from app.db.database import get_db
from app.db import models
from app.schemas.run import RunResponse

router = APIRouter()


@router.get("", response_model=List[RunResponse])
def read_runs(
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> Any:
    """Generation history, newest first."""
    return db.query(models.Run).filter(
        models.Run.user_id == current_user.id
    ).order_by(models.Run.created_at.desc(), models.Run.id.desc()).all()


@router.delete("/{run_id}", response_model=RunResponse)
def delete_run(
    run_id: int,
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> Any:
    run = db.query(models.Run).filter(
        models.Run.id == run_id,
        models.Run.user_id == current_user.id,
    ).first()
    if not run:
        raise HTTPException(status_code=404, detail="Run not found.")

    deleted = RunResponse.model_validate(run)
    db.delete(run)
    db.commit()
    return deleted
