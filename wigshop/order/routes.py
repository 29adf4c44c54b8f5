# wigshop/order/routes.py
from datetime import datetime

from ..services import shop
from ..utils.api import ok, err
from . import bp

@bp.get("/<order_id>")
def get_order(order_id):
    o = shop().tracker.get(order_id)
    if not o: return err("order not found", 404)
    return ok("order", o.as_api(today=datetime.now()))
