"""Responses of the mutating operations."""

from typing import List

from pydantic import BaseModel, Field


class MessageResponse(BaseModel):
    message: str


class RerunOutcome(MessageResponse):
    """What a re-run actually changed.

    ``refreshed`` lists the data points saved, ``skipped`` the questions the
    classifier could not map to a data point, ``failed`` the data points whose
    record could not be stored.
    """

    refreshed: List[str] = Field(default_factory=list)
    skipped: List[str] = Field(default_factory=list)
    failed: List[str] = Field(default_factory=list)
