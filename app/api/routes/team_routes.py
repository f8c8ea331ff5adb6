"""
Teammate Routes

POST /projects/{project_id}/teammates - Owner invites a user by email
GET /projects/teammates/requests - Requests addressed to me (invites and rating prompts)
POST /projects/teammates/requests/{request_id}/accept - Accept an invite
POST /projects/teammates/requests/{request_id}/reject - Reject an invite / dismiss a rating prompt
"""

from typing import List

from fastapi import APIRouter, Depends

from app.core.auth import get_current_user
from app.core.errors import parse_id
from app.services.team_service import TeamService, get_team_service
from app.schemas.schemas import (
    InviteRequest, TeamRequestResponse, MembershipResponse, MessageResponse, ErrorResponse
)

router = APIRouter(prefix="/projects", tags=["Teammates"])

ERRORS = {code: {"model": ErrorResponse} for code in (400, 401, 403, 404, 409)}


@router.post("/{project_id}/teammates", response_model=TeamRequestResponse, status_code=201, responses=ERRORS)
async def invite_teammate(
    project_id: str,
    body: InviteRequest,
    user: dict = Depends(get_current_user),
    teams: TeamService = Depends(get_team_service),
):
    """
    Send a teammate request. Only the project owner may invite.
    Repeating the call while the invite is pending returns the same request.
    """
    pid = parse_id(project_id, "project id")
    request = teams.issue_invite(pid, body.email, user["email"])
    return TeamRequestResponse.from_request(request)


@router.get("/teammates/requests", response_model=List[TeamRequestResponse])
async def list_incoming_requests(
    user: dict = Depends(get_current_user),
    teams: TeamService = Depends(get_team_service),
):
    """All requests addressed to the caller. Filtering by type/status is up to the client."""
    return [TeamRequestResponse.from_request(r) for r in teams.list_incoming_requests(user["email"])]


@router.post("/teammates/requests/{request_id}/accept", response_model=MembershipResponse, responses=ERRORS)
async def accept_request(
    request_id: str,
    user: dict = Depends(get_current_user),
    teams: TeamService = Depends(get_team_service),
):
    """Accept a pending invite; the caller joins the project team."""
    rid = parse_id(request_id, "request id")
    membership = teams.accept_request(rid, user["email"])
    return MembershipResponse.from_membership(membership)


@router.post("/teammates/requests/{request_id}/reject", response_model=MessageResponse, responses=ERRORS)
async def reject_request(
    request_id: str,
    user: dict = Depends(get_current_user),
    teams: TeamService = Depends(get_team_service),
):
    rid = parse_id(request_id, "request id")
    teams.reject_request(rid, user["email"])
    return MessageResponse(message="Request rejected")
