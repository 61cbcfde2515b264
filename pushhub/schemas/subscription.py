"""Public push subscription schemas."""

from pydantic import BaseModel, ConfigDict, Field, field_validator


class SubscriptionKeys(BaseModel):
    """Encryption keys from the browser's PushSubscription."""

    p256dh: str = Field(..., min_length=1, max_length=200)
    auth: str = Field(..., min_length=1, max_length=100)


class SubscriptionInfo(BaseModel):
    """The browser's PushSubscription JSON (``subscription.toJSON()``)."""

    model_config = ConfigDict(extra="ignore")

    endpoint: str = Field(..., min_length=1, max_length=1000)
    keys: SubscriptionKeys

    @field_validator("endpoint")
    @classmethod
    def check_endpoint(cls, value: str) -> str:
        endpoint = value.strip()
        if not endpoint.startswith("https://"):
            raise ValueError("Only https:// push service endpoints are accepted")
        return endpoint


class SubscribeRequest(BaseModel):
    """Subscription registration sent by an embedding website."""

    subscription: SubscriptionInfo
    client_id: int
    domain: str | None = Field(None, max_length=253)


class SubscribeResponse(BaseModel):
    """Result of registering a subscription."""

    success: bool = True
    message: str
    subscription_id: int


class UnsubscribeRequest(BaseModel):
    """Remove a subscription by endpoint."""

    endpoint: str = Field(..., min_length=1, max_length=1000)
    client_id: int


class VapidPublicKeyResponse(BaseModel):
    """VAPID public key used by browsers to create subscriptions."""

    public_key: str
