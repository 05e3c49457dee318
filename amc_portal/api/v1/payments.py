"""/v1/clients/{client_id}/payments - payments received from a client"""

import logging
from typing import List
from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from amc_portal.api.v1.schemas import PaymentCreate, PaymentResponse
from amc_portal.api.dependencies import get_request_id, load_client
from amc_portal.infrastructure.database.session import get_db
from amc_portal.infrastructure.database.models import Payment
from amc_portal.infrastructure.database.repositories import PaymentRepository

router = APIRouter()


def to_payment_response(db_payment: Payment) -> PaymentResponse:
    return PaymentResponse(
        id=str(db_payment.id),
        client_id=str(db_payment.client_id),
        amount_paid=db_payment.amount_paid,
        payment_date=db_payment.payment_date,
    )


@router.post("/clients/{client_id}/payments", response_model=PaymentResponse, status_code=201)
def create_payment(client_id: str, request_body: PaymentCreate, request: Request, db: Session = Depends(get_db)):
    db_client = load_client(db, client_id)

    db_payment = PaymentRepository(db).create_payment(
        client_id=db_client.id,
        amount_paid=request_body.amount_paid,
        payment_date=request_body.payment_date,
    )
    db.commit()

    logging.info(
        "Payment recorded",
        extra={"request_id": get_request_id(request), "client_id": client_id, "amount_paid": request_body.amount_paid},
    )
    return to_payment_response(db_payment)


@router.get("/clients/{client_id}/payments", response_model=List[PaymentResponse])
def list_payments(client_id: str, db: Session = Depends(get_db)):
    db_client = load_client(db, client_id)
    return [to_payment_response(p) for p in PaymentRepository(db).list_for_client(db_client.id)]
