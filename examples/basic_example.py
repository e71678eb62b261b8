#!/usr/bin/env python3
"""
Basic example demonstrating the wechatpay workflow:
1. Load merchant settings and key material from YAML
2. Download and trust the current platform certificates
3. Query an order and refund it
4. Work through this month's complaints

Expects a ``wechatpay.yaml`` next to this file:

    mchid: "1900000001"
    api_v3_key: "<32 character API v3 key>"
    private_key_path: certs/apiclient_key.pem
    certificate_path: certs/apiclient_cert.pem
"""

import logging
import sys
from datetime import date
from pathlib import Path

from wechatpay import ProviderError, WechatPay, WechatPayConfig, WechatPayError


def main():
    logging.basicConfig(level=logging.INFO)
    print("=== WeChat Pay API v3 - Basic Example ===\n")

    # ============================================================================
    # STEP 1: Load configuration
    # ============================================================================
    print("1. Loading merchant configuration...")
    config = WechatPayConfig.from_yaml(Path(__file__).parent / "wechatpay.yaml")
    print(f"   ✓ Merchant: {config.mchid}\n")

    with WechatPay.from_config(config) as client:
        # ========================================================================
        # STEP 2: Refresh platform certificates
        # ========================================================================
        print("2. Downloading platform certificates...")
        inserted = client.update_certificates()
        print(f"   ✓ New certificates: {inserted}")
        print(f"   - Trusted serials: {client.certificates.serial_numbers()}\n")

        # ========================================================================
        # STEP 3: Query an order
        # ========================================================================
        out_trade_no = sys.argv[1] if len(sys.argv) > 1 else "1217752501201407033233368018"
        print(f"3. Querying order {out_trade_no}...")
        try:
            order = client.order_query_by_out_trade_no(out_trade_no)
        except ProviderError as e:
            print(f"   ✗ Provider rejected the query: {e.code} {e.provider_message}\n")
            return
        print(f"   ✓ State: {order.trade_state}")
        print(f"   - Paid: {order.amount.payer_total} (total {order.amount.total})\n")

        # ========================================================================
        # STEP 4: Refund it
        # ========================================================================
        if order.trade_state == "SUCCESS":
            print("4. Refunding the amount paid...")
            refund = client.refund_by_out_trade_no(out_trade_no, reason="example refund")
            print(f"   ✓ Refund {refund.out_refund_no}: {refund.status}\n")

        # ========================================================================
        # STEP 5: Complaints
        # ========================================================================
        print("5. Listing complaints of this month...")
        today = date.today()
        for complaint in client.list_complaints(today.replace(day=1), today):
            print(f"   - {complaint.complaint_id} [{complaint.complaint_state}]")
            print(f"     {complaint.complaint_detail}")
            if complaint.complaint_state == "PENDING":
                try:
                    client.respond_complaint(complaint.complaint_id, "We are looking into it.")
                except WechatPayError as e:
                    print(f"     ✗ Could not respond: {e}")

    print("\n=== Example Complete ===")


if __name__ == "__main__":
    main()
