"""Pydantic schemas for API request/response validation."""

from typing import Optional

from pydantic import BaseModel, Field

from ..domain.entities import Notification, SubmissionOutcome
from ..use_cases.session import VppView


class LicenseAppDTO(BaseModel):
    """App Store app as listed in the view."""

    app_store_id: str
    name: str
    icon_url: str = ""
    latest_version: Optional[str] = None
    platform: Optional[str] = None
    selected: bool = False


class VppViewResponse(BaseModel):
    """Response for the license view."""

    team_id: int
    state: str
    description: str
    title: Optional[str] = None
    message: Optional[str] = None
    link_url: Optional[str] = None
    link_text: Optional[str] = None
    apps: list[LicenseAppDTO] = Field(default_factory=list)
    submit_disabled: bool = True

    @classmethod
    def from_view(cls, team_id: int, view: VppView) -> "VppViewResponse":
        return cls(
            team_id=team_id,
            state=view.state.value,
            description=view.description,
            title=view.title,
            message=view.message,
            link_url=view.link_url,
            link_text=view.link_text,
            apps=[
                LicenseAppDTO(
                    app_store_id=item.app.id,
                    name=item.app.display_name,
                    icon_url=item.app.icon_url,
                    latest_version=item.app.latest_version,
                    platform=item.app.platform,
                    selected=item.selected,
                )
                for item in view.items
            ],
            submit_disabled=view.submit_disabled,
        )


class AssignRequest(BaseModel):
    """Request to add an App Store app to a team."""

    team_id: int = Field(..., ge=0, description="Team receiving the app")
    app_store_id: str = Field(..., min_length=1, description="App Store id of the license")


class NotificationDTO(BaseModel):
    level: str
    message: str

    @classmethod
    def from_notification(cls, notification: Notification) -> "NotificationDTO":
        return cls(level=notification.level.value, message=notification.message)


class AssignResponse(BaseModel):
    """Result of an assignment request."""

    outcome: str
    app_name: Optional[str] = None
    notifications: list[NotificationDTO] = Field(default_factory=list)
    redirect_url: Optional[str] = None
    exited: bool = True

    @classmethod
    def from_outcome(
        cls,
        outcome: SubmissionOutcome,
        notifications: list[Notification],
        redirect_url: Optional[str],
        exited: bool,
    ) -> "AssignResponse":
        return cls(
            outcome=outcome.kind.value,
            app_name=outcome.app_name,
            notifications=[NotificationDTO.from_notification(n) for n in notifications],
            redirect_url=redirect_url,
            exited=exited,
        )
