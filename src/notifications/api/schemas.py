"""Pydantic request/response models for the Notifications API.

API schemas are separate from internal services (anti-corruption pattern).
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


# ---------------------------------------------------------------------------
# Request Models
# ---------------------------------------------------------------------------
class OrderConfirmationRequest(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    order_id: str | None = Field(default=None, examples=["c0a8012e-..."])


# ---------------------------------------------------------------------------
# Response Models
# ---------------------------------------------------------------------------
class OrderConfirmationResponse(BaseModel):
    success: bool = True
    data: dict
    message: str


class EmailPreviewResponse(BaseModel):
    subject: str
    body: str
    html_body: str
