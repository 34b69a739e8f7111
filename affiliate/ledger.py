"""
Storage for affiliates and their transactions.

The affiliate program lives in the remote entity store when one is configured and reachable,
with the local database as the fallback for every operation. Callers only see the Ledger
interface and the AffiliateRecord / TransactionRecord tuples it returns.
"""
import abc
import functools
import logging
from datetime import datetime
from decimal import Decimal
from typing import Callable, NamedTuple, Optional

from django.conf import settings
from django.core.exceptions import ObjectDoesNotExist
from django.db import DatabaseError, transaction
from django.db.models.signals import post_delete, post_save
from django.utils.dateparse import parse_datetime

from affiliate.exceptions import LedgerError
from affiliate.models import Affiliate, AffiliateTransaction
from entitystore.client import EntityStoreClient
from entitystore.exceptions import EntityStoreError
from entitystore.signals import entity_changed

log = logging.getLogger(__name__)

AFFILIATE_FIELDS = (
    "code",
    "name",
    "email",
    "discount_percent",
    "is_active",
    "total_points",
    "total_commission",
    "total_orders",
    "total_revenue",
    "notes",
)
TRANSACTION_FIELDS = (
    "affiliate_code",
    "affiliate_name",
    "affiliate_email",
    "order_number",
    "order_total",
    "commission_amount",
    "points_earned",
    "customer_email",
    "reason",
    "status",
)
DECIMAL_FIELDS = {
    "total_points",
    "total_commission",
    "total_revenue",
    "order_total",
    "commission_amount",
    "points_earned",
}
# The remote Affiliate entity prefixes the contact fields
REMOTE_AFFILIATE_FIELD_NAMES = {"name": "affiliate_name", "email": "affiliate_email"}


class AffiliateRecord(NamedTuple):
    """An affiliate as stored by any ledger backend"""

    id: str
    code: str
    name: str
    email: str
    discount_percent: int
    is_active: bool
    total_points: Decimal
    total_commission: Decimal
    total_orders: int
    total_revenue: Decimal
    notes: str
    created_on: Optional[datetime]


class TransactionRecord(NamedTuple):
    """An affiliate transaction as stored by any ledger backend"""

    id: str
    affiliate_code: str
    affiliate_name: str
    affiliate_email: str
    order_number: str
    order_total: Decimal
    commission_amount: Decimal
    points_earned: Decimal
    customer_email: str
    reason: str
    status: str
    created_on: Optional[datetime]
    # False while the amounts of an order transaction are not yet in the affiliate totals
    totals_applied: bool = True


# Subscribers are called with (event, record_id) where event is "create", "update" or "delete"
ChangeCallback = Callable[[str, str], None]


class Ledger(abc.ABC):
    """Interface to the affiliate and transaction store"""

    name = None

    @abc.abstractmethod
    def list_affiliates(self) -> list[AffiliateRecord]:
        """All affiliates, newest first"""

    @abc.abstractmethod
    def get_affiliate(self, affiliate_id) -> Optional[AffiliateRecord]:
        """A single affiliate, or None"""

    @abc.abstractmethod
    def create_affiliate(self, fields) -> AffiliateRecord:
        """Store a new affiliate"""

    @abc.abstractmethod
    def update_affiliate(self, affiliate_id, fields) -> AffiliateRecord:
        """Change some fields of an affiliate"""

    @abc.abstractmethod
    def delete_affiliate(self, affiliate_id):
        """Delete an affiliate"""

    @abc.abstractmethod
    def list_transactions(self, affiliate_code=None) -> list[TransactionRecord]:
        """All transactions, or those of one affiliate code, newest first"""

    @abc.abstractmethod
    def get_transaction(self, transaction_id) -> Optional[TransactionRecord]:
        """A single transaction, or None"""

    @abc.abstractmethod
    def get_transaction_by_order_number(
        self, order_number
    ) -> Optional[TransactionRecord]:
        """The transaction recorded for an order number, or None"""

    @abc.abstractmethod
    def create_transaction(self, fields) -> TransactionRecord:
        """Store a new transaction"""

    @abc.abstractmethod
    def update_transaction(self, transaction_id, fields) -> TransactionRecord:
        """Change some fields of a transaction"""

    @abc.abstractmethod
    def subscribe_affiliates(self, callback: ChangeCallback) -> Callable[[], None]:
        """Call callback on every affiliate change until the returned function is called"""

    @abc.abstractmethod
    def subscribe_transactions(self, callback: ChangeCallback) -> Callable[[], None]:
        """Call callback on every transaction change until the returned function is called"""

    def add_to_affiliate_totals(
        self, affiliate_id, *, points=0, commission=0, orders=0, revenue=0
    ) -> AffiliateRecord:
        """
        Add amounts to an affiliate's running totals. This is a plain read-modify-write, so
        concurrent updates to the same affiliate are last-write-wins.
        """
        affiliate = self.get_affiliate(affiliate_id)
        if affiliate is None:
            raise LedgerError(f"Affiliate {affiliate_id} does not exist")
        return self.update_affiliate(
            affiliate_id,
            {
                "total_points": affiliate.total_points + Decimal(points),
                "total_commission": affiliate.total_commission + Decimal(commission),
                "total_orders": affiliate.total_orders + orders,
                "total_revenue": affiliate.total_revenue + Decimal(revenue),
            },
        )

    def get_recorded_accrual(self, order_number) -> Optional[TransactionRecord]:
        """The transaction recorded for an order, used to keep accruals idempotent"""
        return self.get_transaction_by_order_number(order_number)

    def record_accrual(self, affiliate_id, fields) -> TransactionRecord:
        """
        Store the transaction for an order and add its amounts to the affiliate's totals.

        The transaction is stored with totals_applied=False and only marked once the totals have
        been added, so an accrual interrupted in between can be finished with complete_accrual().
        """
        affiliate_transaction = self.create_transaction(
            {**fields, "totals_applied": False}
        )
        return self.complete_accrual(affiliate_id, affiliate_transaction)

    def complete_accrual(self, affiliate_id, affiliate_transaction) -> TransactionRecord:
        """Add the amounts of a stored transaction to the affiliate's totals and mark it applied"""
        self.add_to_affiliate_totals(
            affiliate_id,
            points=affiliate_transaction.points_earned,
            commission=affiliate_transaction.commission_amount,
            orders=1,
            revenue=affiliate_transaction.order_total,
        )
        return self.update_transaction(affiliate_transaction.id, {"totals_applied": True})


def _affiliate_record(affiliate):
    """Convert an Affiliate to an AffiliateRecord"""
    return AffiliateRecord(
        id=str(affiliate.id),
        created_on=affiliate.created_on,
        **{field: getattr(affiliate, field) for field in AFFILIATE_FIELDS},
    )


def _transaction_record(affiliate_transaction):
    """Convert an AffiliateTransaction to a TransactionRecord"""
    return TransactionRecord(
        id=str(affiliate_transaction.id),
        created_on=affiliate_transaction.created_on,
        **{field: getattr(affiliate_transaction, field) for field in TRANSACTION_FIELDS},
    )


def _local_id(record_id):
    """Ids from other backends never match a local row"""
    record_id = str(record_id)
    return int(record_id) if record_id.isdigit() else None


class LocalLedger(Ledger):
    """Ledger backed by the local database"""

    name = "local"

    def list_affiliates(self):
        return [
            _affiliate_record(affiliate)
            for affiliate in Affiliate.objects.order_by("-created_on", "-id")
        ]

    def get_affiliate(self, affiliate_id):
        affiliate = Affiliate.objects.filter(id=_local_id(affiliate_id)).first()
        return _affiliate_record(affiliate) if affiliate else None

    def create_affiliate(self, fields):
        return _affiliate_record(Affiliate.objects.create(**fields))

    def update_affiliate(self, affiliate_id, fields):
        with transaction.atomic():
            affiliate = Affiliate.objects.select_for_update().get(
                id=_local_id(affiliate_id)
            )
            for field, value in fields.items():
                setattr(affiliate, field, value)
            affiliate.save()
        return _affiliate_record(affiliate)

    def delete_affiliate(self, affiliate_id):
        Affiliate.objects.get(id=_local_id(affiliate_id)).delete()

    def list_transactions(self, affiliate_code=None):
        transactions = AffiliateTransaction.objects.order_by("-created_on", "-id")
        if affiliate_code is not None:
            transactions = transactions.filter(affiliate_code__iexact=affiliate_code)
        return [_transaction_record(txn) for txn in transactions]

    def get_transaction(self, transaction_id):
        txn = AffiliateTransaction.objects.filter(id=_local_id(transaction_id)).first()
        return _transaction_record(txn) if txn else None

    def get_transaction_by_order_number(self, order_number):
        txn = AffiliateTransaction.objects.filter(order_number=order_number).first()
        return _transaction_record(txn) if txn else None

    def create_transaction(self, fields):
        return _transaction_record(AffiliateTransaction.objects.create(**fields))

    def update_transaction(self, transaction_id, fields):
        with transaction.atomic():
            txn = AffiliateTransaction.objects.select_for_update().get(
                id=_local_id(transaction_id)
            )
            for field, value in fields.items():
                setattr(txn, field, value)
            txn.save()
        return _transaction_record(txn)

    def add_to_affiliate_totals(
        self, affiliate_id, *, points=0, commission=0, orders=0, revenue=0
    ):
        with transaction.atomic():
            affiliate = Affiliate.objects.select_for_update().get(
                id=_local_id(affiliate_id)
            )
            affiliate.total_points += Decimal(points)
            affiliate.total_commission += Decimal(commission)
            affiliate.total_orders += orders
            affiliate.total_revenue += Decimal(revenue)
            affiliate.save()
        return _affiliate_record(affiliate)

    def record_accrual(self, affiliate_id, fields):
        # One database transaction, so local transactions are always applied
        with transaction.atomic():
            affiliate_transaction = self.create_transaction(fields)
            self.add_to_affiliate_totals(
                affiliate_id,
                points=affiliate_transaction.points_earned,
                commission=affiliate_transaction.commission_amount,
                orders=1,
                revenue=affiliate_transaction.order_total,
            )
        return affiliate_transaction

    @staticmethod
    def _subscribe_model(model_cls, callback):
        """Relay post_save/post_delete of a model to a callback"""

        def on_save(sender, instance, created, **kwargs):  # noqa: ARG001
            callback("create" if created else "update", str(instance.id))

        def on_delete(sender, instance, **kwargs):  # noqa: ARG001
            callback("delete", str(instance.id))

        post_save.connect(on_save, sender=model_cls, weak=False)
        post_delete.connect(on_delete, sender=model_cls, weak=False)

        def unsubscribe():
            post_save.disconnect(on_save, sender=model_cls)
            post_delete.disconnect(on_delete, sender=model_cls)

        return unsubscribe

    def subscribe_affiliates(self, callback):
        return self._subscribe_model(Affiliate, callback)

    def subscribe_transactions(self, callback):
        return self._subscribe_model(AffiliateTransaction, callback)


def _parse_remote_value(field, value):
    """Convert a JSON value from the entity store to the type used in records"""
    if field in DECIMAL_FIELDS:
        return Decimal(str(value or 0))
    if field in ("discount_percent", "total_orders"):
        return int(value or 0)
    if field == "is_active":
        return bool(value)
    return value if value is not None else ""


def _parse_remote_datetime(value):
    """Parse an ISO 8601 timestamp from the entity store"""
    return parse_datetime(value) if value else None


def _serialize_remote_fields(fields, field_names=None):
    """Convert record values to JSON-compatible values keyed by the remote field names"""
    field_names = field_names or {}
    return {
        field_names.get(field, field): float(value)
        if isinstance(value, Decimal)
        else value
        for field, value in fields.items()
    }


class RemoteLedger(Ledger):
    """Ledger backed by the remote entity store"""

    name = "remote"

    def __init__(self, client=None):
        self.client = client or EntityStoreClient()
        self.affiliate_entity = settings.ENTITY_STORE_AFFILIATE_ENTITY
        self.transaction_entity = settings.ENTITY_STORE_TRANSACTION_ENTITY

    def _affiliate_record(self, data):
        return AffiliateRecord(
            id=str(data["id"]),
            created_on=_parse_remote_datetime(data.get("created_date")),
            **{
                field: _parse_remote_value(
                    field, data.get(REMOTE_AFFILIATE_FIELD_NAMES.get(field, field))
                )
                for field in AFFILIATE_FIELDS
            },
        )

    def _transaction_record(self, data):
        return TransactionRecord(
            id=str(data["id"]),
            created_on=_parse_remote_datetime(data.get("created_date")),
            # Rows written before the flag existed were applied in full
            totals_applied=data.get("totals_applied") is not False,
            **{
                field: _parse_remote_value(field, data.get(field))
                for field in TRANSACTION_FIELDS
            },
        )

    def probe(self):
        """
        Verify that the entity store is reachable and knows the affiliate entity

        Raises:
            EntityStoreError: If it isn't
        """
        self.client.list(self.affiliate_entity, limit=1)

    def list_affiliates(self):
        return [
            self._affiliate_record(data)
            for data in self.client.list(self.affiliate_entity, sort="-created_date")
        ]

    def get_affiliate(self, affiliate_id):
        data = self.client.get(self.affiliate_entity, affiliate_id)
        return self._affiliate_record(data) if data else None

    def create_affiliate(self, fields):
        return self._affiliate_record(
            self.client.create(
                self.affiliate_entity,
                _serialize_remote_fields(fields, REMOTE_AFFILIATE_FIELD_NAMES),
            )
        )

    def update_affiliate(self, affiliate_id, fields):
        return self._affiliate_record(
            self.client.update(
                self.affiliate_entity,
                affiliate_id,
                _serialize_remote_fields(fields, REMOTE_AFFILIATE_FIELD_NAMES),
            )
        )

    def delete_affiliate(self, affiliate_id):
        self.client.delete(self.affiliate_entity, affiliate_id)

    def list_transactions(self, affiliate_code=None):
        filters = {} if affiliate_code is None else {"affiliate_code": affiliate_code}
        return [
            self._transaction_record(data)
            for data in self.client.list(
                self.transaction_entity, sort="-created_date", **filters
            )
        ]

    def get_transaction(self, transaction_id):
        data = self.client.get(self.transaction_entity, transaction_id)
        return self._transaction_record(data) if data else None

    def get_transaction_by_order_number(self, order_number):
        results = self.client.list(
            self.transaction_entity, limit=1, order_number=order_number
        )
        return self._transaction_record(results[0]) if results else None

    def create_transaction(self, fields):
        return self._transaction_record(
            self.client.create(
                self.transaction_entity, _serialize_remote_fields(fields)
            )
        )

    def update_transaction(self, transaction_id, fields):
        return self._transaction_record(
            self.client.update(
                self.transaction_entity,
                transaction_id,
                _serialize_remote_fields(fields),
            )
        )

    @staticmethod
    def _subscribe_entity(subscribed_entity, callback):
        """Relay entity store change notifications for one entity to a callback"""

        def on_change(sender, entity_name, event, data, **kwargs):  # noqa: ARG001
            if entity_name == subscribed_entity:
                callback(event, str(data.get("id", "")))

        entity_changed.connect(on_change, weak=False)
        return functools.partial(entity_changed.disconnect, on_change)

    def subscribe_affiliates(self, callback):
        return self._subscribe_entity(self.affiliate_entity, callback)

    def subscribe_transactions(self, callback):
        return self._subscribe_entity(self.transaction_entity, callback)


class FallbackLedger(Ledger):
    """
    Ledger which tries the primary backend for every operation and falls back to the other
    one if the primary raises an EntityStoreError
    """

    name = "fallback"

    def __init__(self, *, primary, fallback):
        self.primary = primary
        self.fallback = fallback

    def _call(self, method_name, *args, **kwargs):
        try:
            return getattr(self.primary, method_name)(*args, **kwargs)
        except EntityStoreError:
            log.exception(
                "%s ledger failed on %s, falling back to the %s ledger",
                self.primary.name,
                method_name,
                self.fallback.name,
            )
        # Records read from the primary have ids the fallback may not know
        try:
            return getattr(self.fallback, method_name)(*args, **kwargs)
        except (DatabaseError, EntityStoreError, ObjectDoesNotExist) as exc:
            raise LedgerError(
                f"Unable to {method_name.replace('_', ' ')} in either ledger: {exc}"
            ) from exc

    def list_affiliates(self):
        return self._call("list_affiliates")

    def get_affiliate(self, affiliate_id):
        return self._call("get_affiliate", affiliate_id)

    def create_affiliate(self, fields):
        return self._call("create_affiliate", fields)

    def update_affiliate(self, affiliate_id, fields):
        return self._call("update_affiliate", affiliate_id, fields)

    def delete_affiliate(self, affiliate_id):
        return self._call("delete_affiliate", affiliate_id)

    def list_transactions(self, affiliate_code=None):
        return self._call("list_transactions", affiliate_code=affiliate_code)

    def get_transaction(self, transaction_id):
        return self._call("get_transaction", transaction_id)

    def get_transaction_by_order_number(self, order_number):
        return self._call("get_transaction_by_order_number", order_number)

    def create_transaction(self, fields):
        return self._call("create_transaction", fields)

    def update_transaction(self, transaction_id, fields):
        return self._call("update_transaction", transaction_id, fields)

    def add_to_affiliate_totals(self, affiliate_id, **amounts):
        return self._call("add_to_affiliate_totals", affiliate_id, **amounts)

    def get_recorded_accrual(self, order_number):
        """
        Look for an order's transaction in both backends. The primary must answer, since an
        accrual it holds is invisible to the fallback and would be recorded a second time.
        """
        try:
            recorded = self.primary.get_recorded_accrual(order_number)
        except EntityStoreError as exc:
            raise LedgerError(
                f"Unable to check whether order {order_number} was already recorded: {exc}"
            ) from exc
        if recorded is not None:
            return recorded
        try:
            return self.fallback.get_recorded_accrual(order_number)
        except (DatabaseError, EntityStoreError) as exc:
            raise LedgerError(
                f"Unable to check whether order {order_number} was already recorded: {exc}"
            ) from exc

    def record_accrual(self, affiliate_id, fields):
        return self._call("record_accrual", affiliate_id, fields)

    def complete_accrual(self, affiliate_id, affiliate_transaction):
        return self._call("complete_accrual", affiliate_id, affiliate_transaction)

    def _subscribe_both(self, method_name, callback):
        unsubscribers = [
            getattr(self.primary, method_name)(callback),
            getattr(self.fallback, method_name)(callback),
        ]

        def unsubscribe():
            for unsubscriber in unsubscribers:
                unsubscriber()

        return unsubscribe

    def subscribe_affiliates(self, callback):
        return self._subscribe_both("subscribe_affiliates", callback)

    def subscribe_transactions(self, callback):
        return self._subscribe_both("subscribe_transactions", callback)


_change_listeners = []
_unsubscribers = []


def register_change_listener(listener):
    """
    Register a function to be called as listener(kind, event, record_id) whenever an affiliate
    ("affiliate") or transaction ("transaction") changes in the selected ledger
    """
    if listener not in _change_listeners:
        _change_listeners.append(listener)
    return listener


def _select_ledger():
    """Probe the entity store and pick the backend to use"""
    local = LocalLedger()
    if not settings.ENTITY_STORE_BASE_URL:
        log.info("No entity store configured, affiliate data is kept in the local database")
        return local
    remote = RemoteLedger()
    try:
        remote.probe()
    except EntityStoreError:
        log.warning(
            "Entity store at %s is not usable, affiliate data is kept in the local database",
            settings.ENTITY_STORE_BASE_URL,
            exc_info=True,
        )
        return local
    log.info("Affiliate data is kept in the entity store at %s", settings.ENTITY_STORE_BASE_URL)
    return FallbackLedger(primary=remote, fallback=local)


@functools.lru_cache(maxsize=None)
def get_ledger():
    """
    Get the ledger for this process. The entity store is probed only once; use reset_ledger()
    to probe again.

    Returns:
        Ledger: The selected ledger
    """
    ledger = _select_ledger()
    for listener in _change_listeners:
        _unsubscribers.append(
            ledger.subscribe_affiliates(functools.partial(listener, "affiliate"))
        )
        _unsubscribers.append(
            ledger.subscribe_transactions(functools.partial(listener, "transaction"))
        )
    return ledger


def reset_ledger():
    """Forget the selected ledger so the next get_ledger() call probes again"""
    while _unsubscribers:
        _unsubscribers.pop()()
    get_ledger.cache_clear()
