from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

TicketStatus = Literal["new", "pending", "closed"]
BlockType = Literal["academic", "hostel"]
SubBlock = Literal["AB1", "AB2"]
WorkType = Literal["electrical", "plumbing", "carpentry"]
ReporterRole = Literal["student", "staff"]
UserRole = Literal["student", "staff", "admin"]

TICKET_STATUSES: tuple[str, ...] = ("new", "pending", "closed")


class SessionUser(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    role: UserRole


class TicketDraft(BaseModel):
    """Everything the reporter supplies. Field contents are not checked here."""

    model_config = ConfigDict(populate_by_name=True)

    user_id: str = Field(alias="userId")
    user_name: str = Field(alias="userName")
    user_role: ReporterRole = Field(alias="userRole")
    block_type: BlockType = Field(alias="blockType")
    sub_block: Optional[SubBlock] = Field(default=None, alias="subBlock")
    work_type: WorkType = Field(alias="workType")
    description: str
    floor_no: str = Field(alias="floorNo")
    wing: str

    @model_validator(mode="after")
    def _sub_block_only_for_academic(self) -> "TicketDraft":
        if self.block_type == "academic" and self.sub_block is None:
            raise ValueError("academic tickets need a sub-block")
        if self.block_type != "academic":
            self.sub_block = None
        return self

    @classmethod
    def for_user(cls, user: SessionUser, **fields: Any) -> "TicketDraft":
        if user.role == "admin":
            raise ValueError("admin sessions cannot raise tickets")
        return cls(user_id=user.id, user_name=user.name, user_role=user.role, **fields)


class Ticket(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: str
    user_id: str = Field(alias="userId")
    user_name: str = Field(alias="userName")
    user_role: ReporterRole = Field(alias="userRole")
    block_type: BlockType = Field(alias="blockType")
    sub_block: Optional[SubBlock] = Field(default=None, alias="subBlock")
    work_type: WorkType = Field(alias="workType")
    description: str
    floor_no: str = Field(alias="floorNo")
    wing: str
    status: TicketStatus
    assigned_worker: Optional[str] = Field(default=None, alias="assignedWorker")
    resolved_photo: Optional[str] = Field(default=None, alias="resolvedPhoto")
    review: Optional[str] = None
    created_at: str = Field(alias="createdAt")
    updated_at: str = Field(alias="updatedAt")

    @model_validator(mode="after")
    def _sub_block_matches_block(self) -> "Ticket":
        if (self.block_type == "academic") != (self.sub_block is not None):
            raise ValueError("subBlock must be set exactly when blockType is academic")
        return self

    def to_record(self) -> Dict[str, Any]:
        # unset optionals are left out of the stored record entirely
        return self.model_dump(by_alias=True, exclude_none=True)


class LoadResult(BaseModel):
    outcome: Literal["loaded", "empty", "corrupt_recovered"]
    count: int = 0
    error: str | None = None

    @staticmethod
    def loaded(count: int) -> "LoadResult":
        return LoadResult(outcome="loaded", count=count)

    @staticmethod
    def empty() -> "LoadResult":
        return LoadResult(outcome="empty")

    @staticmethod
    def corrupt_recovered(error: str) -> "LoadResult":
        return LoadResult(outcome="corrupt_recovered", error=error)


class MutationResult(BaseModel):
    status: Literal["applied", "not_found", "rejected"]
    ticket_id: str
    ticket: Ticket | None = None
    reason: str | None = None

    @property
    def applied(self) -> bool:
        return self.status == "applied"

    @staticmethod
    def ok(ticket: Ticket) -> "MutationResult":
        return MutationResult(status="applied", ticket_id=ticket.id, ticket=ticket)

    @staticmethod
    def not_found(ticket_id: str) -> "MutationResult":
        return MutationResult(status="not_found", ticket_id=ticket_id, reason="ticket_not_found")

    @staticmethod
    def rejected(ticket: Ticket, reason: str) -> "MutationResult":
        return MutationResult(status="rejected", ticket_id=ticket.id, ticket=ticket, reason=reason)


def tickets_to_records(tickets: List[Ticket]) -> List[Dict[str, Any]]:
    return [t.to_record() for t in tickets]
