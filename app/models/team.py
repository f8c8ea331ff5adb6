"""
Team membership and team request models.

Requests share one table but are two distinct shapes: a JoinRequest is an
owner's invitation, a RatingRequest is a system prompt to rate a teammate.
Rows are decoded into the right variant by `request_from_row`, so only
RatingRequest ever carries ratee fields.
"""

from datetime import datetime
from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field, TypeAdapter

SYSTEM_REQUESTER = "System"


class RequestStatus(str, Enum):
    pending = "PENDING"
    accepted = "ACCEPTED"
    rejected = "REJECTED"


class RequestType(str, Enum):
    join_request = "JOIN_REQUEST"
    rating_request = "RATING_REQUEST"


class TeamMembership(BaseModel):
    team_id: int
    project_id: int
    member_email: str
    added_at: datetime


class _RequestBase(BaseModel):
    request_id: int
    project_id: int
    project_title: str = ""
    requester_email: str
    target_email: str
    status: RequestStatus = RequestStatus.pending
    created_at: datetime
    updated_at: datetime

    @property
    def is_pending(self) -> bool:
        return self.status == RequestStatus.pending


class JoinRequest(_RequestBase):
    type: Literal["JOIN_REQUEST"] = "JOIN_REQUEST"


class RatingRequest(_RequestBase):
    type: Literal["RATING_REQUEST"] = "RATING_REQUEST"
    ratee_email: str
    ratee_name: str = ""


TeamRequest = Annotated[Union[JoinRequest, RatingRequest], Field(discriminator="type")]

_team_request_adapter = TypeAdapter(TeamRequest)


def request_from_row(row: dict) -> Union[JoinRequest, RatingRequest]:
    data = {k: v for k, v in row.items() if v is not None}
    data.setdefault("type", RequestType.join_request.value)
    if data["type"] != RequestType.rating_request.value:
        data.pop("ratee_email", None)
        data.pop("ratee_name", None)
    return _team_request_adapter.validate_python(data)
