from sqlalchemy import select
from sqlalchemy.orm import Session

from app.db.models import Specialization


def specialization_exists(db: Session, specialization_id: int) -> bool:
    return db.scalar(select(Specialization.id).where(Specialization.id == specialization_id)) is not None
