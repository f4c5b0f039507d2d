from infra.db.billing.mapper import billing_record_from_orm, billing_record_to_orm
from infra.db.billing.repository import SqlAlchemyBillingRecordRepository

__all__ = [
    "billing_record_to_orm",
    "billing_record_from_orm",
    "SqlAlchemyBillingRecordRepository",
]
