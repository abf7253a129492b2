"""Request and response models for the HTTP surface."""

from typing import Dict, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class DisplayRow(BaseModel):
    """One Atlas Local container as shown in the extension table."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., description="Runtime container ID")
    name: str = Field(..., description="Display name of the container")
    status: str = Field(..., description="Status text reported by the runtime")
    version: str = Field(default="", description="Value of the image 'version' label")
    connection_string: Optional[str] = Field(
        None,
        alias="connectionString",
        description="MongoDB connection string, absent when no port is exported",
    )


class LaunchRequest(BaseModel):
    """Options for launching a new Atlas Local container."""

    model_config = ConfigDict(populate_by_name=True)

    name: Optional[str] = Field(None, description="Container name and hostname")
    port: Optional[str] = Field(None, description="Host port to publish 27017 on")
    username: Optional[str] = Field(None, description="Root username")
    password: Optional[str] = Field(None, description="Root password")
    auth_choice: Optional[Literal["auth", "skip"]] = Field(
        None,
        alias="authChoice",
        description="Whether to configure root credentials; inferred when omitted",
    )

    @field_validator("port", mode="before")
    @classmethod
    def _port_as_text(cls, value):
        if value is None or isinstance(value, str):
            return value
        return str(value)

    @property
    def use_authentication(self) -> bool:
        """Whether credentials should be configured for the container."""
        if self.auth_choice is not None:
            return self.auth_choice == "auth"
        return bool((self.username or "").strip() or (self.password or "").strip())


class MessageResponse(BaseModel):
    """Plain message response."""

    message: str = Field(..., description="Status message")


class ErrorResponse(BaseModel):
    """Error response returned for failed requests."""

    message: str = Field(..., description="Error text")
    errors: Optional[Dict[str, str]] = Field(
        None, description="Validation messages keyed by field name"
    )
