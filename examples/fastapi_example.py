#!/usr/bin/env python3
"""FastAPI Integration Example - Receiving complaint notifications."""

from pathlib import Path

from fastapi import Depends, FastAPI

from wechatpay import WechatPay, WechatPayConfig
from wechatpay.integrations.fastapi import require_complaint_notification
from wechatpay.models.complaint import ComplaintEvent

config = WechatPayConfig.from_yaml(Path(__file__).parent / "wechatpay.yaml")
client = WechatPay.from_config(config)

# Create FastAPI app
app = FastAPI(title="Merchant Callbacks")


@app.on_event("startup")
def load_platform_certificates():
    client.update_certificates()


# Notification endpoint - signature verified, resource decrypted
@app.post("/wechatpay/complaints")
async def complaint_callback(
    event: ComplaintEvent = Depends(require_complaint_notification(client)),
):
    """Receive a complaint notification."""
    if event.action_type == "CREATE_COMPLAINT":
        complaint = client.get_complaint(event.complaint_id)
        print(f"New complaint {complaint.complaint_id}: {complaint.complaint_detail}")
    return {"code": "SUCCESS", "message": "成功"}


def main():
    print("=== FastAPI Integration Example ===\n")
    print("Endpoints:")
    print("  POST /wechatpay/complaints  - Complaint notification callback\n")
    print("Register the callback URL once:")
    print("  client.create_complaint_notification('https://merchant.example.com/wechatpay/complaints')\n")
    print("To run:")
    print("  uvicorn fastapi_example:app --reload\n")


if __name__ == "__main__":
    # For demo purposes - in production use uvicorn
    main()
