from datetime import datetime
from sqlalchemy import Integer, String, DateTime, Boolean, ForeignKey, Numeric, Text, UniqueConstraint
from sqlalchemy.orm import relationship, Mapped, mapped_column

from coffee_pos.db.base import Base


# helpers
now = datetime.utcnow


class Product(Base):
    __tablename__ = "products"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    name: Mapped[str] = mapped_column(String(255))
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    image: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    price: Mapped[float] = mapped_column(Numeric(10, 2))
    discount: Mapped[float] = mapped_column(Numeric(5, 2), default=0)  # percent, 0-100
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=now)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=now, onupdate=now)

    sizes: Mapped[list["Size"]] = relationship("Size", back_populates="product", cascade="all, delete-orphan")
    sugars: Mapped[list["Sugar"]] = relationship("Sugar", back_populates="product", cascade="all, delete-orphan")
    ices: Mapped[list["Ice"]] = relationship("Ice", back_populates="product", cascade="all, delete-orphan")
    extra_shots: Mapped[list["ExtraShot"]] = relationship("ExtraShot", back_populates="product", cascade="all, delete-orphan")


class Size(Base):
    __tablename__ = "sizes"
    __table_args__ = (
        UniqueConstraint("product_id", "size_name", name="uq_sizes_product_name"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    product_id: Mapped[int] = mapped_column(ForeignKey("products.id", ondelete="CASCADE"), index=True)
    size_name: Mapped[str] = mapped_column(String(64))
    price_modifier: Mapped[float] = mapped_column(Numeric(10, 2), default=0)
    full_price: Mapped[float | None] = mapped_column(Numeric(10, 2), nullable=True)  # price + modifier, display only
    created_at: Mapped[datetime] = mapped_column(DateTime, default=now)

    product: Mapped[Product] = relationship("Product", back_populates="sizes")


class Sugar(Base):
    __tablename__ = "sugars"
    __table_args__ = (
        UniqueConstraint("product_id", "name", name="uq_sugars_product_name"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    product_id: Mapped[int] = mapped_column(ForeignKey("products.id", ondelete="CASCADE"), index=True)
    name: Mapped[str] = mapped_column(String(64))  # e.g. "0", "50", "100"
    created_at: Mapped[datetime] = mapped_column(DateTime, default=now)

    product: Mapped[Product] = relationship("Product", back_populates="sugars")


class Ice(Base):
    __tablename__ = "ices"
    __table_args__ = (
        UniqueConstraint("product_id", "name", name="uq_ices_product_name"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    product_id: Mapped[int] = mapped_column(ForeignKey("products.id", ondelete="CASCADE"), index=True)
    name: Mapped[str] = mapped_column(String(64))
    created_at: Mapped[datetime] = mapped_column(DateTime, default=now)

    product: Mapped[Product] = relationship("Product", back_populates="ices")


class ExtraShot(Base):
    __tablename__ = "extra_shots"
    __table_args__ = (
        UniqueConstraint("product_id", "name", name="uq_extra_shots_product_name"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    product_id: Mapped[int] = mapped_column(ForeignKey("products.id", ondelete="CASCADE"), index=True)
    name: Mapped[str] = mapped_column(String(64))
    price_modifier: Mapped[float] = mapped_column(Numeric(10, 2), default=0)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=now)

    product: Mapped[Product] = relationship("Product", back_populates="extra_shots")


class Promotion(Base):
    __tablename__ = "promotions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(255))
    type: Mapped[str] = mapped_column(String(32))  # BUY_X_GET_Y|PERCENT_DISCOUNT|FIXED_DISCOUNT
    buy_quantity: Mapped[int | None] = mapped_column(Integer, nullable=True)
    free_quantity: Mapped[int | None] = mapped_column(Integer, nullable=True)
    discount: Mapped[float | None] = mapped_column(Numeric(10, 2), nullable=True)  # percent or fixed amount
    start_date: Mapped[datetime] = mapped_column(DateTime)  # stored as naive UTC
    end_date: Mapped[datetime] = mapped_column(DateTime)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=now)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=now, onupdate=now)
