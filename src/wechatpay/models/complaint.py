"""Complaint handling models."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from ..core.models import EncryptedResource


class ComplaintOrderInfo(BaseModel):
    transaction_id: str = ""
    out_trade_no: str = ""
    amount: int = 0


class Complaint(BaseModel):
    """A user complaint against the merchant."""

    complaint_id: str = ""
    complaint_time: Optional[datetime] = None
    complaint_detail: str = ""
    complainted_mchid: str = ""
    complaint_state: str = Field(default="", description="PENDING, PROCESSING or PROCESSED")
    payer_phone: str = Field(default="", description="Complainant phone, RSA-OAEP encrypted on the wire")
    payer_openid: str = ""
    complaint_order_info: list[ComplaintOrderInfo] = Field(default_factory=list)
    complaint_full_refunded: bool = False
    incoming_user_response: bool = False
    user_complaint_times: int = 0


class ComplaintReply(BaseModel):
    data: list[Complaint] = Field(default_factory=list)
    offset: int = 0
    limit: int = 0
    total_count: int = 0


class NegotiationHistory(BaseModel):
    log_id: str = ""
    operator: str = ""
    operate_time: str = ""
    operate_type: str = ""
    operate_details: str = ""
    image_list: list[str] = Field(default_factory=list)


class NegotiationHistoryReply(BaseModel):
    data: list[NegotiationHistory] = Field(default_factory=list)
    offset: int = 0
    limit: int = 0
    total_count: int = 0


class ComplaintResponse(BaseModel):
    """Merchant reply to a complaint."""

    complainted_mchid: str
    response_content: str
    response_images: Optional[list[str]] = None


class ComplaintNotifyConfig(BaseModel):
    """Complaint notification callback URL."""

    mchid: Optional[str] = None
    url: Optional[str] = None


class ComplaintEvent(BaseModel):
    """Complaint notification callback, with the decrypted resource merged in."""

    id: str = ""
    create_time: Optional[datetime] = None
    event_type: str = Field(default="", description="COMPLAINT.CREATE, COMPLAINT.STATE_CHANGE, ...")
    resource_type: str = ""
    summary: str = ""
    resource: Optional[EncryptedResource] = None

    complaint_id: str = ""
    action_type: str = ""
