"""
Business logic for interview opportunities and their applications.

Applications are stored in ``interview_submissions``, one per user and
interview.  Admin review moves an application through the submission
state machine, stamps the reviewer and notifies the applicant.
"""

import logging
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from ..core.db import Database
from ..core.errors import NotFoundError
from ..core.filters import Op, SelectQuery, fetch_page
from ..core.states import SUBMISSION_STATES
from .activity_service import ActivityService, ActivityType
from .catalogue_service import CatalogueService
from .email_service import EmailService

logger = logging.getLogger(__name__)

SUBMISSION_VIEW = (
    "(SELECT s.*, i.title AS interview_title, i.company AS company "
    "FROM interview_submissions s JOIN interviews i ON i.id = s.interview_id)"
)


class InterviewField(str, Enum):
    ID = "id"
    TITLE = "title"
    COMPANY = "company"
    DESCRIPTION = "description"
    LOCATION = "location"
    DATE = "date"
    STATUS = "status"
    IS_PUBLISHED = "is_published"
    CREATED_AT = "created_at"


class SubmissionField(str, Enum):
    ID = "id"
    USER_ID = "user_id"
    INTERVIEW_ID = "interview_id"
    STATUS = "status"
    NAME = "name"
    EMAIL = "email"
    POSITION = "position"
    INTERVIEW_TITLE = "interview_title"
    CREATED_AT = "created_at"


class InterviewService(CatalogueService):
    """Service for interviews and interview submissions."""

    table = "interviews"
    label = "Interview"
    fields = InterviewField
    members_table = "interview_submissions"
    member_key = "interview_id"
    counter = "registrations"
    search_columns = ("title", "company", "description", "location")
    json_columns = ("positions",)
    nullable_columns = ("image", "slots")

    @classmethod
    async def list_submissions(
        cls,
        db: Database,
        interview_id: Optional[int] = None,
        user_id: Optional[int] = None,
        status: Optional[str] = None,
        search: Optional[str] = None,
        limit: int = 20,
        offset: int = 0,
    ) -> Tuple[List[Dict[str, Any]], int]:
        if status:
            SUBMISSION_STATES.parse(status)
        query = (
            SelectQuery(SUBMISSION_VIEW, SubmissionField)
            .where_if(SubmissionField.INTERVIEW_ID, Op.EQ, interview_id)
            .where_if(SubmissionField.USER_ID, Op.EQ, user_id)
            .where_if(SubmissionField.STATUS, Op.EQ, status)
            .search(
                [SubmissionField.NAME, SubmissionField.EMAIL, SubmissionField.POSITION, SubmissionField.INTERVIEW_TITLE],
                search,
            )
            .order_by(SubmissionField.CREATED_AT, descending=True)
            .order_by(SubmissionField.ID, descending=True)
        )
        with db.connection() as conn:
            return fetch_page(conn, query, limit, offset)

    @classmethod
    async def get_submission(cls, db: Database, submission_id: int) -> Dict[str, Any]:
        with db.connection() as conn:
            row = conn.execute(f"SELECT * FROM {SUBMISSION_VIEW} WHERE id = ?", (submission_id,)).fetchone()
        if not row:
            raise NotFoundError("Submission not found")
        return dict(row)

    @classmethod
    async def review_submission(
        cls,
        db: Database,
        submission_id: int,
        new_status: str,
        actor: Dict[str, Any],
        admin_notes: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Apply an admin decision to an application."""
        with db.transaction() as conn:
            row = conn.execute(
                "SELECT status FROM interview_submissions WHERE id = ?", (submission_id,)
            ).fetchone()
            if not row:
                raise NotFoundError("Submission not found")
            state = SUBMISSION_STATES.check(row["status"], new_status)
            conn.execute(
                """
                UPDATE interview_submissions
                SET status = ?, admin_notes = COALESCE(?, admin_notes), reviewed_by = ?,
                    reviewed_at = CURRENT_TIMESTAMP, updated_at = CURRENT_TIMESTAMP
                WHERE id = ?
                """,
                (state.value, admin_notes, actor.get("user_id"), submission_id),
            )
            conn.execute(
                "UPDATE user_registrations SET status = ? WHERE submission_id = ?",
                (state.value, submission_id),
            )
        submission = await cls.get_submission(db, submission_id)
        logger.info("Submission %s set to %s by user %s", submission_id, state.value, actor.get("user_id"))
        await ActivityService.record(
            db,
            actor.get("user_id"),
            ActivityType.SUBMISSION_REVIEWED.value,
            f"Application {submission_id} marked {state.value}",
            resource_type="interview_submission",
            resource_id=submission_id,
            metadata={"from": row["status"], "to": state.value},
        )
        if state.value != row["status"]:
            EmailService.submission_status_changed(
                submission["email"],
                submission["name"],
                submission["interview_title"],
                state.value,
                admin_notes,
            )
        return submission
