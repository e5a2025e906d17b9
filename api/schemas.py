"""Pydantic models for wizard and recommendation request/response schemas."""

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, Field

from core.models import Recommendation, WizardState


class RecommendationResponse(BaseModel):
    """Response model for a computed recommendation."""

    professional_bodies: list[str] = Field(
        ..., description="Deduplicated professional bodies, most specific source first"
    )
    fedip_level: str = Field(..., description="FEDIP level for the chosen role")

    model_config = {
        "json_schema_extra": {
            "example": {
                "professional_bodies": ["BCS, The Chartered Institute for IT"],
                "fedip_level": "Senior Practitioner",
            }
        }
    }

    @classmethod
    def from_recommendation(cls, recommendation: Recommendation) -> "RecommendationResponse":
        return cls(
            professional_bodies=list(recommendation.professional_bodies),
            fedip_level=recommendation.fedip_level,
        )


class WizardStateResponse(BaseModel):
    """Response model for the wizard after a transition."""

    step: int = Field(..., ge=0, le=3, description="Current step (0-3)")
    question: str = Field(..., description="Question shown at the current step")
    options: list[str] = Field(default_factory=list, description="Choices at the current step")
    answers: dict[int, str] = Field(default_factory=dict, description="Recorded answers by step")
    result: Optional[RecommendationResponse] = Field(
        default=None, description="Recommendation once the role step is answered"
    )

    @classmethod
    def from_state(
        cls, state: WizardState, question: str, options: list[str]
    ) -> "WizardStateResponse":
        return cls(
            step=state.step,
            question=question,
            options=options,
            answers=dict(state.answers),
            result=(
                RecommendationResponse.from_recommendation(state.result)
                if state.result is not None
                else None
            ),
        )


class SubscriptionRequest(BaseModel):
    """Body sent to the email-subscription endpoint."""

    email: str = Field(..., pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$", description="Subscriber email")
    professional_bodies: list[str] = Field(default_factory=list)
    fedip_level: str
    answers: dict[str, str] = Field(default_factory=dict, description="Answers keyed by step number")
    submitted_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
