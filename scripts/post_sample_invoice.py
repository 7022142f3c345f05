"""
Post a sample salon invoice through the invoice GL engine.

Creates an invoice for a haircut and a colour treatment, then records its
payment. Transactions are printed as JSON instead of being sent to a ledger.

Usage:
    python scripts/post_sample_invoice.py --customer CUST-001 --payment-method CARD
"""

import argparse
import json
import logging
import uuid
from datetime import date, timedelta
from pathlib import Path
from typing import Any, Dict

import sys
sys.path.append(str(Path(__file__).resolve().parents[1]))

from gl_core.observability.logging import configure_logging, get_logger
from invoice_gl import (
    InvoiceGLError,
    InvoicePostingService,
    TransactionPoster,
    calculate_aging_bucket,
)

logger = get_logger("scripts.post_sample_invoice")


SAMPLE_LINE_ITEMS = [
    {"description": "Haircut & Style", "quantity": 1, "unit_amount": "450.00", "line_amount": "450.00", "service_ref": "SVC-HAIRCUT"},
    {"description": "Colour Treatment", "quantity": 1, "unit_amount": "300.00", "line_amount": "300.00", "service_ref": "SVC-COLOUR"},
]


class ConsolePoster(TransactionPoster):
    """Prints each transaction payload and returns a generated id."""

    def post_transaction(self, payload: Dict[str, Any]) -> str:
        transaction_id = f"TXN-{uuid.uuid4().hex[:12].upper()}"
        print(json.dumps({"transaction_id": transaction_id, **payload}, indent=2))
        return transaction_id


def main():
    parser = argparse.ArgumentParser(description="Post a sample invoice and its payment")
    parser.add_argument("--organization-id", default="ORG-SALON-DEMO")
    parser.add_argument("--customer", default="CUST-001")
    parser.add_argument("--payment-method", default="CARD")
    parser.add_argument("--module", default="SALON", help="Smart-code module segment")
    parser.add_argument("--json-logs", action="store_true")
    args = parser.parse_args()

    configure_logging(level=logging.INFO, json_format=args.json_logs)

    service = InvoicePostingService(
        poster=ConsolePoster(),
        organization_id=args.organization_id,
        module=args.module,
    )

    due_date = date.today() + timedelta(days=30)

    try:
        invoice = service.create_invoice(
            customer_ref=args.customer,
            line_items=SAMPLE_LINE_ITEMS,
            total_amount="750.00",
            due_date=due_date,
            reference="INV-DEMO-0001",
        )
        logger.info(f"Invoice aging: {calculate_aging_bucket(due_date).value}")

        service.record_payment(
            invoice_ref=invoice.transaction_id,
            customer_ref=args.customer,
            payment_amount="750.00",
            payment_method=args.payment_method,
            reference="RCP-DEMO-0001",
        )
    except InvoiceGLError as e:
        raise SystemExit(f"{e.kind.value}: {e.message}")


if __name__ == "__main__":
    main()
