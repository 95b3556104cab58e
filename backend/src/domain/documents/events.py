"""Broker event payloads exchanged with other operator services

Payloads are JSON with camelCase field names on the wire. Models accept
either the wire alias or the Python field name.
"""

import json
from typing import List, Literal, Optional, Type, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from .errors import EventPayloadError


EventT = TypeVar("EventT", bound="BrokerEvent")


class BrokerEvent(BaseModel):
    """Base class for broker payloads."""

    model_config = ConfigDict(populate_by_name=True)

    def to_bytes(self) -> bytes:
        return self.model_dump_json(by_alias=True, exclude_none=True).encode("utf-8")

    @classmethod
    def from_bytes(cls: Type[EventT], payload: bytes) -> EventT:
        """Parse a payload, raising EventPayloadError when it is malformed."""
        try:
            return cls.model_validate_json(payload)
        except (PydanticValidationError, json.JSONDecodeError, UnicodeDecodeError) as e:
            raise EventPayloadError(f"malformed {cls.__name__} payload", cause=e) from e


class AuthenticationRequestedEvent(BrokerEvent):
    """Published when a document is sent for authentication."""

    owner_id: int = Field(alias="idCitizen")
    url_document: str = Field(alias="urlDocument")
    document_title: str = Field(alias="documentTitle")
    document_id: str = Field(alias="documentId")
    message_id: Optional[str] = Field(default=None, alias="messageId")


class AuthenticationCompletedEvent(BrokerEvent):
    """Received when the external service finished authenticating a document."""

    document_id: str = Field(alias="documentId")
    owner_id: int = Field(alias="idCitizen")
    authenticated: bool
    message: str = ""
    authenticated_at: Optional[str] = Field(default=None, alias="authenticatedAt")
    message_id: Optional[str] = Field(default=None, alias="messageId")


class UserTransferredEvent(BrokerEvent):
    """Received when a citizen moved to another operator; all documents go."""

    owner_id: int = Field(alias="idCitizen")


class DocumentDownloadRequestedEvent(BrokerEvent):
    """Received with pre-signed URLs to download and store for a citizen."""

    owner_id: int = Field(alias="idCitizen")
    urls: List[str] = Field(default_factory=list)


class DocumentsReadyEvent(BrokerEvent):
    """Published after a download batch finished."""

    owner_id: int = Field(alias="idCitizen")
    status: Literal["success", "failure"]
    message: Optional[str] = None
