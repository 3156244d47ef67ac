from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.orm import Session

from personnel_directory.db.session import get_db

router = APIRouter(tags=["health"])


@router.get("/health")
def health(db: Session = Depends(get_db)):
    # Pool checkout + round trip; exhaustion surfaces as 503 via the error handlers
    db.execute(text("SELECT 1"))
    return {"status": "ok", "database": "connected"}
