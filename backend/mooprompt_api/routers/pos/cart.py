"""
Cart pricing for the customer ordering screen.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from mooprompt_api.services.domain.order_service import OrderService
from shared.infrastructure.db import get_db
from shared.utils.pos_schemas import CartQuoteOutput, CartQuoteRequest


router = APIRouter(prefix="/api/cart", tags=["cart"])


@router.post("/quote", response_model=CartQuoteOutput)
def quote_cart(body: CartQuoteRequest, db: Session = Depends(get_db)) -> CartQuoteOutput:
    """
    Price a cart with current menu prices.

    Lines for the same item, item type and note are merged; buffet
    items included in the session's package are priced at zero.
    """
    return OrderService(db).quote(body.session_id, body.items)
