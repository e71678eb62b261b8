"""Typed request and response payloads."""

from .bill import Bill
from .complaint import (
    Complaint,
    ComplaintEvent,
    ComplaintNotifyConfig,
    ComplaintOrderInfo,
    ComplaintReply,
    ComplaintResponse,
    NegotiationHistory,
    NegotiationHistoryReply,
)
from .order import Amount, Payer, Promotion, PromotionGoods, SceneInfo, StoreInfo, TradeQuery
from .refunds import (
    PromotionDetail,
    RefundsAmount,
    RefundsGoodsDetail,
    RefundsOrder,
    RefundsReq,
)

__all__ = [
    "Amount",
    "Bill",
    "Complaint",
    "ComplaintEvent",
    "ComplaintNotifyConfig",
    "ComplaintOrderInfo",
    "ComplaintReply",
    "ComplaintResponse",
    "NegotiationHistory",
    "NegotiationHistoryReply",
    "Payer",
    "Promotion",
    "PromotionDetail",
    "PromotionGoods",
    "RefundsAmount",
    "RefundsGoodsDetail",
    "RefundsOrder",
    "RefundsReq",
    "SceneInfo",
    "StoreInfo",
    "TradeQuery",
]
