from pydantic import BaseModel, ConfigDict, Field


class PaymentConfirmedRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    session_id: str = Field(alias="sessionId", min_length=1)
    slug: str = Field(min_length=1)
    inputs: dict[str, str | int | float] = Field(default_factory=dict)
    customer_email: str | None = Field(default=None, alias="customerEmail")

    def string_inputs(self) -> dict[str, str]:
        return {key: str(value) for key, value in self.inputs.items()}


class PaymentAcceptedResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    accepted: bool
    session_id: str = Field(serialization_alias="sessionId")
    trace_id: str | None = Field(default=None, serialization_alias="traceId")
    duplicate: bool = False
