# Слой доступа к данным
from .user import list_users, get_user_by_id, get_user_by_email, upsert_user_by_email
from .subject import (
    list_subjects, get_subject_by_id, create_subject, update_subject, delete_subject,
    add_topic, delete_topic
)
from .assignment import (
    list_assignments, get_assignment_by_id, create_assignment, update_assignment,
    delete_assignment, add_problems
)

__all__ = [
    "list_users",
    "get_user_by_id",
    "get_user_by_email",
    "upsert_user_by_email",
    "list_subjects",
    "get_subject_by_id",
    "create_subject",
    "update_subject",
    "delete_subject",
    "add_topic",
    "delete_topic",
    "list_assignments",
    "get_assignment_by_id",
    "create_assignment",
    "update_assignment",
    "delete_assignment",
    "add_problems",
]
