"""Product catalog model."""

from sqlalchemy import Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import BaseModel


class Product(BaseModel):
    """A product in the catalog."""

    __tablename__ = "products"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    # asdecimal=False keeps prices as floats end to end (JSON has no decimal type)
    price: Mapped[float] = mapped_column(Numeric(10, 2, asdecimal=False), nullable=False)

    def __repr__(self) -> str:
        return f"<Product {self.id} {self.name!r}>"
