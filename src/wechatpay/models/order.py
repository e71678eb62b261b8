"""Order query models."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class Amount(BaseModel):
    """Order amount, in cents."""

    total: int = Field(default=0, description="Order total")
    payer_total: int = Field(default=0, description="Amount paid by the payer")
    currency: Optional[str] = Field(default=None, description="Currency, CNY for domestic merchants")
    payer_currency: str = Field(default="", description="Payer currency")


class Payer(BaseModel):
    openid: str = ""


class StoreInfo(BaseModel):
    id: str = ""
    name: Optional[str] = None
    area_code: Optional[str] = None
    address: Optional[str] = None


class SceneInfo(BaseModel):
    payer_client_ip: str = ""
    device_id: Optional[str] = None
    store_info: Optional[StoreInfo] = None


class PromotionGoods(BaseModel):
    goods_id: str = ""
    quantity: int = 0
    unit_price: int = 0
    discount_amount: int = 0
    goods_remark: str = ""


class Promotion(BaseModel):
    """Discount applied to a payment."""

    coupon_id: str = ""
    name: str = ""
    scope: str = ""
    type: str = ""
    amount: int = 0
    stock_id: str = ""
    wechatpay_contribute: int = 0
    merchant_contribute: int = 0
    other_contribute: int = 0
    currency: str = ""
    goods_detail: list[PromotionGoods] = Field(default_factory=list)


class TradeQuery(BaseModel):
    """A payment transaction as returned by the order query endpoints."""

    appid: str = ""
    mchid: str = ""
    out_trade_no: str = ""
    transaction_id: str = ""
    trade_type: str = ""
    trade_state: str = Field(default="", description="SUCCESS, REFUND, NOTPAY, CLOSED, ...")
    trade_state_desc: str = ""
    bank_type: str = ""
    attach: str = ""
    success_time: Optional[datetime] = None
    payer: Payer = Field(default_factory=Payer)
    amount: Amount = Field(default_factory=Amount)
    scene_info: Optional[SceneInfo] = None
    promotion_detail: Optional[list[Promotion]] = None
