"""
Team Service - invitations, membership and post-completion rating requests.

HOW IT WORKS:
1. A project owner invites a registered user -> one PENDING JOIN_REQUEST
2. The invited user accepts (membership row created, request deleted)
   or rejects (request deleted)
3. When the project is completed, every member is asked to rate every
   other member -> one RATING_REQUEST per ordered (rater, ratee) pair

Every public method takes the caller's email explicitly and runs as a single
transaction. Failures are raised as app.core.errors types.

SELF-HEALING:
A request that is no longer PENDING, or an invite for someone who already
joined, is deleted before the error is raised. That deletion is committed,
so retrying the same request id ends in "Request not found".
"""

import logging
from typing import Callable, ContextManager, List, Optional, Tuple, Union

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.errors import (
    ConflictError, ConvergeError, ForbiddenError, InvalidArgumentError, InvalidStateError, NotFoundError
)
from app.db.database import get_db_session
from app.models.profile import Teammate
from app.models.project import Project
from app.models.team import JoinRequest, RatingRequest, TeamMembership
from app.services.store_service import (
    ProfileStore, ProjectStore, TeamMembershipStore, TeamRequestStore
)

logger = logging.getLogger(__name__)

SessionFactory = Callable[[], ContextManager[Session]]


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


class TeamService:
    """
    Single authority for membership and request state.

    Holds no state between calls; everything lives in the database.
    """

    def __init__(self, session_factory: SessionFactory = get_db_session):
        self.session_factory = session_factory

    # ============================================================
    # INVITE
    # ============================================================

    def issue_invite(self, project_id: int, target_email: str, caller_email: str) -> JoinRequest:
        """
        Invite `target_email` to the project. Only the owner may invite.

        Idempotent while a request is outstanding: the existing PENDING
        JOIN_REQUEST is returned instead of creating a second one.
        """
        target = normalize_email(target_email)
        if not target:
            raise InvalidArgumentError("Member email required")

        try:
            with self.session_factory() as db:
                return self._issue_invite(db, project_id, target, caller_email)
        except IntegrityError:
            # A concurrent call inserted the same pending invite first
            with self.session_factory() as db:
                existing = TeamRequestStore(db).find_pending_join(project_id, target)
            if existing is None:
                raise
            logger.info("Invite race on project %s for %s resolved to request %s",
                        project_id, target, existing.request_id)
            return existing

    def _issue_invite(self, db: Session, project_id: int, target: str, caller_email: str) -> JoinRequest:
        project = ProjectStore(db).get(project_id)
        if project is None:
            raise NotFoundError("Project not found")

        if normalize_email(caller_email) != normalize_email(project.owner_email):
            raise ForbiddenError("Only project owner can send teammate requests")

        if normalize_email(caller_email) == target:
            raise InvalidArgumentError("Cannot send request to yourself")

        if ProfileStore(db).find_by_email(target) is None:
            raise NotFoundError(f"No registered user found with email: {target}")

        if TeamMembershipStore(db).exists(project_id, target):
            raise ConflictError("User already a teammate")

        requests = TeamRequestStore(db)
        existing = requests.find_pending_join(project_id, target)
        if existing is not None:
            return existing

        request = requests.insert_join(project, caller_email, target)
        logger.info("Project %s: %s invited %s (request %s)",
                    project_id, caller_email, target, request.request_id)
        return request

    # ============================================================
    # ACCEPT / REJECT
    # ============================================================

    def accept_request(self, request_id: int, acting_email: str) -> TeamMembership:
        """
        Accept a pending join request as its target.

        The membership insert and the request delete commit together or not at all.
        """
        try:
            with self.session_factory() as db:
                membership, failure = self._accept(db, request_id, acting_email)
        except IntegrityError:
            # Lost a race with a concurrent accept for the same membership
            with self.session_factory() as db:
                gone = TeamRequestStore(db).get(request_id) is None
            if gone:
                raise NotFoundError("Request not found")
            raise ConflictError("User already a teammate")

        if failure is not None:
            raise failure
        return membership

    def _accept(
        self, db: Session, request_id: int, acting_email: str
    ) -> Tuple[Optional[TeamMembership], Optional[ConvergeError]]:
        requests = TeamRequestStore(db)
        members = TeamMembershipStore(db)

        request, failure = self._load_actionable(requests, request_id, acting_email)
        if failure is not None:
            return None, failure

        if not isinstance(request, JoinRequest):
            raise InvalidArgumentError("Only team invitations can be accepted")

        if members.exists(request.project_id, request.target_email):
            requests.delete(request_id)
            logger.info("Request %s discarded: %s already on project %s",
                        request_id, request.target_email, request.project_id)
            return None, ConflictError("User already a teammate")

        membership = members.insert(request.project_id, request.target_email)
        if not requests.delete(request_id, only_if_pending=True):
            # Someone else consumed the request after we read it
            raise NotFoundError("Request not found")

        logger.info("Request %s accepted: %s joined project %s",
                    request_id, request.target_email, request.project_id)
        return membership, None

    def reject_request(self, request_id: int, acting_email: str) -> None:
        """Reject a join request, or dismiss a rating request, as its target."""
        with self.session_factory() as db:
            requests = TeamRequestStore(db)
            request, failure = self._load_actionable(requests, request_id, acting_email)
            if failure is None:
                requests.delete(request_id)
                logger.info("Request %s (%s) rejected by %s", request_id, request.type, acting_email)
        if failure is not None:
            raise failure

    def _load_actionable(
        self, requests: TeamRequestStore, request_id: int, acting_email: str
    ) -> Tuple[Union[JoinRequest, RatingRequest], Optional[ConvergeError]]:
        """
        Fetch a request the caller may act on.

        Missing -> NotFoundError, not the target -> ForbiddenError (both raised).
        A non-pending request is deleted and InvalidStateError is returned, so the
        caller can commit the deletion before raising it.
        """
        request = requests.get(request_id)
        if request is None:
            raise NotFoundError("Request not found")

        if not request.is_pending:
            requests.delete(request_id)
            logger.info("Request %s discarded: status %s", request_id, request.status.value)
            return request, InvalidStateError("Request is not pending")

        if normalize_email(acting_email) != normalize_email(request.target_email):
            raise ForbiddenError("Only the requested user can act on this request")

        return request, None

    # ============================================================
    # LISTING
    # ============================================================

    def list_incoming_requests(self, for_email: str) -> List[Union[JoinRequest, RatingRequest]]:
        """All requests addressed to `for_email`, any status and type."""
        with self.session_factory() as db:
            return TeamRequestStore(db).list_for_target(for_email)

    def list_teammates(self, project_id: int, db: Optional[Session] = None) -> List[Teammate]:
        """
        Confirmed members joined with their profile fields.
        Members without a profile come back with only email and a null name.
        """
        if db is None:
            with self.session_factory() as session:
                return self.list_teammates(project_id, db=session)

        profiles = ProfileStore(db)
        teammates = []
        for membership in TeamMembershipStore(db).list_for_project(project_id):
            profile = profiles.find_by_email(membership.member_email)
            if profile is None:
                teammates.append(Teammate(email=membership.member_email, added_at=membership.added_at))
                continue
            teammates.append(Teammate(
                email=profile.email,
                name=profile.name,
                profile_id=profile.profile_id,
                year=profile.year,
                department=profile.department,
                institution=profile.institution,
                availability=profile.availability,
                added_at=membership.added_at,
            ))
        return teammates

    # ============================================================
    # COMPLETION FAN-OUT
    # ============================================================

    def create_rating_requests(self, db: Session, project: Project) -> List[RatingRequest]:
        """
        Ask every member of a completed project to rate every other member.

        Members are the owner plus confirmed teammates; N members with profiles
        give N*(N-1) requests. Members without a profile are skipped. A pair that
        already has a PENDING rating request is not requested again, so running
        this twice for the same project creates nothing new.

        Runs inside the caller's transaction (the one that completed the project).
        """
        if not project.is_completed:
            return []

        emails = [project.owner_email]
        emails += [m.member_email for m in TeamMembershipStore(db).list_for_project(project.project_id)]

        profiles = ProfileStore(db)
        members = []
        seen = set()
        for email in emails:
            key = normalize_email(email)
            if key in seen:
                continue
            seen.add(key)
            profile = profiles.find_by_email(email)
            if profile is not None:
                members.append(profile)

        requests = TeamRequestStore(db)
        created = []
        for rater in members:
            for ratee in members:
                if rater.email == ratee.email:
                    continue
                if requests.pending_rating_exists(project.project_id, rater.email, ratee.email):
                    continue
                created.append(requests.insert_rating(project, rater.email, ratee.email, ratee.name or ""))

        logger.info("Project %s completed: %d rating requests for %d members",
                    project.project_id, len(created), len(members))
        return created


_team_service: Optional[TeamService] = None


def get_team_service() -> TeamService:
    """Get or create the shared TeamService (singleton pattern)"""
    global _team_service
    if _team_service is None:
        _team_service = TeamService()
    return _team_service
