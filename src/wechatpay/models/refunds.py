"""Refund models."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class RefundsAmount(BaseModel):
    """Refund amount information, in cents."""

    refund: int = Field(description="Refund amount, at most the amount paid")
    total: int = Field(description="Total of the original order")
    currency: str = Field(default="CNY")

    payer_total: Optional[int] = None
    payer_refund: Optional[int] = None
    settlement_refund: Optional[int] = None
    settlement_total: Optional[int] = None
    discount_refund: Optional[int] = None


class RefundsGoodsDetail(BaseModel):
    merchant_goods_id: str
    wechatpay_goods_id: Optional[str] = None
    goods_name: Optional[str] = None
    unit_price: int
    refund_amount: int
    refund_quantity: int


class RefundsReq(BaseModel):
    """Refund request body. One of transaction_id or out_trade_no is required."""

    transaction_id: Optional[str] = None
    out_trade_no: Optional[str] = None
    out_refund_no: str = Field(description="Merchant refund number, unique per merchant")
    reason: Optional[str] = None
    notify_url: Optional[str] = None
    funds_account: Optional[str] = None
    amount: RefundsAmount
    goods_detail: Optional[list[RefundsGoodsDetail]] = None


class PromotionDetail(BaseModel):
    promotion_id: str = ""
    scope: str = ""
    type: str = ""
    amount: int = 0
    refund_amount: int = 0
    goods_detail: Optional[list[RefundsGoodsDetail]] = None


class RefundsOrder(BaseModel):
    """Refund as returned by the refund endpoint."""

    refund_id: str = ""
    out_refund_no: str = ""
    transaction_id: str = ""
    out_trade_no: str = ""
    channel: str = ""
    user_received_account: str = ""
    success_time: Optional[datetime] = None
    create_time: Optional[datetime] = None
    status: str = Field(default="", description="SUCCESS, CLOSED, PROCESSING, ABNORMAL")
    funds_account: str = ""
    amount: Optional[RefundsAmount] = None
    promotion_detail: list[PromotionDetail] = Field(default_factory=list)
