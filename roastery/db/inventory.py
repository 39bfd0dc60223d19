from sqlalchemy import CheckConstraint, Column, Date, Integer, Numeric, String

from .database import Base


class InventoryLot(Base):
    """One delivery of raw, unroasted beans"""
    __tablename__ = "inventory"

    id = Column(Integer, primary_key=True, autoincrement=True)
    vendor_product_code = Column(String, nullable=False, index=True)
    date_arrival = Column(Date, nullable=False)
    quantity_kg = Column(Numeric(10, 3), nullable=False, default=0)

    __table_args__ = (
        CheckConstraint("quantity_kg >= 0", name="ck_inventory_quantity_kg_non_negative"),
    )

    @property
    def to_schema(self):
        return {
            "id": self.id,
            "vendor_product_code": self.vendor_product_code,
            "date_arrival": self.date_arrival,
            "quantity_kg": self.quantity_kg,
        }
