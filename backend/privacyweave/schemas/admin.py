from privacyweave.schemas.common import CamelModel


class EmailTestRequest(CamelModel):
    email_type: str | None = None


class SendTestResponse(CamelModel):
    success: bool
    message: str


class EmailConfigResponse(CamelModel):
    configured: bool
    service: str
    user: str
    recipients: list[str]
    missing_variables: list[str]


class WhatsAppConfigResponse(CamelModel):
    configured: bool
    account_sid: str
    phone_number: str
    recipient_number: str
    missing_variables: list[str]

