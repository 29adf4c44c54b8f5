# wigshop/services/order_repository.py
import threading
from copy import deepcopy

from sqlalchemy.exc import IntegrityError

from ..extensions import db
from ..model import Order, OrderRecord


class InMemoryOrderRepository:
    """
    Process-local order store. Contents are lost on restart.

    Flask may serve requests on several threads, so every access goes
    through one lock and callers only ever see copies.
    """

    def __init__(self):
        self._orders: dict[str, Order] = {}
        self._lock = threading.Lock()

    def get(self, order_id):
        with self._lock:
            o = self._orders.get(order_id)
            return deepcopy(o) if o else None

    def put_if_absent(self, order: Order) -> bool:
        with self._lock:
            if order.id in self._orders:
                return False
            self._orders[order.id] = deepcopy(order)
            return True

    def save(self, order: Order):
        with self._lock:
            self._orders[order.id] = deepcopy(order)

    def delete(self, order_id) -> bool:
        with self._lock:
            return self._orders.pop(order_id, None) is not None

    def all(self):
        with self._lock:
            return [deepcopy(o) for o in self._orders.values()]

    def __len__(self):
        with self._lock:
            return len(self._orders)


class SqlOrderRepository:
    """Order store backed by Flask-SQLAlchemy; needs an app context."""

    def get(self, order_id):
        rec = db.session.get(OrderRecord, order_id)
        return rec.to_order() if rec else None

    def put_if_absent(self, order: Order) -> bool:
        if db.session.get(OrderRecord, order.id) is not None:
            return False
        db.session.add(OrderRecord.from_order(order))
        try:
            db.session.commit()
        except IntegrityError:
            # a concurrent delivery of the same event won the insert
            db.session.rollback()
            return False
        return True

    def save(self, order: Order):
        rec = db.session.get(OrderRecord, order.id)
        if rec is None:
            db.session.add(OrderRecord.from_order(order))
        else:
            rec.update_from(order)
        db.session.commit()

    def delete(self, order_id) -> bool:
        rec = db.session.get(OrderRecord, order_id)
        if rec is None:
            return False
        db.session.delete(rec)
        db.session.commit()
        return True

    def all(self):
        rows = OrderRecord.query.order_by(OrderRecord.order_date.asc()).all()
        return [r.to_order() for r in rows]

    def __len__(self):
        return OrderRecord.query.count()
