from sqlalchemy import CheckConstraint, Column, DateTime, Integer, Numeric, String, Text

from .database import Base


class CatalogItem(Base):
    """One sellable lot of bagged coffee"""
    __tablename__ = "catalog"

    id = Column(Integer, primary_key=True, autoincrement=True)
    product_code = Column(String, nullable=False, index=True)
    quantity = Column(Integer, nullable=False, default=0)  # bags on hand
    price = Column(Numeric(10, 2), nullable=False)
    time_roasted = Column(DateTime, nullable=False, index=True)  # naive UTC
    roasting_notes = Column(Text, nullable=False, default="")
    img = Column(String, nullable=True)

    __table_args__ = (
        CheckConstraint("quantity >= 0", name="ck_catalog_quantity_non_negative"),
        CheckConstraint("price >= 0", name="ck_catalog_price_non_negative"),
    )

    @property
    def to_schema(self):
        return {
            "id": self.id,
            "product_code": self.product_code,
            "quantity": self.quantity,
            "price": self.price,
            "time_roasted": self.time_roasted,
            "roasting_notes": self.roasting_notes,
            "img": self.img,
        }
