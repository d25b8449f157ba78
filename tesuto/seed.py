"""Начальные данные: репетитор по умолчанию и два предмета с темами."""
import logging

from sqlmodel import Session

from .crud.subject import get_subject_by_id, create_subject
from .crud.user import upsert_user_by_email
from .db import engine, init_db
from .models import Role

logger = logging.getLogger(__name__)

DEFAULT_TUTOR = {
    "email": "sarah.johnson@tesuto.edu",
    "name": "Sarah Johnson",
    "avatar": "https://api.dicebear.com/7.x/avataaars/svg?seed=Sarah",
}

DEFAULT_SUBJECTS = [
    {
        "subject_id": "math-default",
        "name": "Mathematics",
        "description": "Core mathematics curriculum including algebra, geometry, and calculus",
        "icon": "📐",
        "color": "#3B82F6",
        "topics": ["Algebra", "Geometry", "Trigonometry", "Calculus", "Statistics & Probability"],
    },
    {
        "subject_id": "physics-default",
        "name": "Physics",
        "description": "Fundamental physics covering mechanics, thermodynamics, and electromagnetism",
        "icon": "⚛️",
        "color": "#8B5CF6",
        "topics": ["Mechanics", "Thermodynamics", "Electromagnetism", "Optics", "Waves & Sound", "Modern Physics"],
    },
]


def seed_all(session: Session) -> dict:
    """Идемпотентно создаёт данные по умолчанию, возвращает сводку"""
    tutor = upsert_user_by_email(session, role=Role.TUTOR, **DEFAULT_TUTOR)
    created = []
    for data in DEFAULT_SUBJECTS:
        if get_subject_by_id(session, data["subject_id"]):
            continue
        subject = create_subject(session, tutor_id=tutor.id, **data)
        created.append(subject.name)
        logger.info(f"Seeded subject {subject.name}")
    return {"tutor_id": tutor.id, "created_subjects": created}


def main():
    logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s")
    init_db()
    with Session(engine) as session:
        summary = seed_all(session)
    logger.info(f"Seeding complete: tutor {summary['tutor_id']}, new subjects {summary['created_subjects']}")


if __name__ == "__main__":
    main()
