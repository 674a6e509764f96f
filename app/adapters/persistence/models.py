"""SQLAlchemy ORM models — maps to PostgreSQL tables."""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.adapters.persistence.database import Base


class CountryModel(Base):
    __tablename__ = "countries"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    code: Mapped[str | None] = mapped_column(String(3), nullable=True)

    cities: Mapped[list["CityModel"]] = relationship(back_populates="country")


class CityModel(Base):
    __tablename__ = "cities"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    country_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("countries.id"), nullable=True
    )

    country: Mapped["CountryModel | None"] = relationship(back_populates="cities")


class CurrencyModel(Base):
    __tablename__ = "currencies"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    code: Mapped[str] = mapped_column(String(3), unique=True, nullable=False)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    symbol: Mapped[str | None] = mapped_column(String(10), nullable=True)


class OfficeModel(Base):
    __tablename__ = "offices"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    office_name: Mapped[str] = mapped_column(String(200), nullable=False)
    address: Mapped[str] = mapped_column(Text, nullable=False)
    latitude: Mapped[float | None] = mapped_column(Float, nullable=True)
    longitude: Mapped[float | None] = mapped_column(Float, nullable=True)
    city_id: Mapped[int | None] = mapped_column(Integer, ForeignKey("cities.id"), nullable=True)
    country_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("countries.id"), nullable=True
    )
    state: Mapped[str | None] = mapped_column(String(100), nullable=True)
    slug: Mapped[str | None] = mapped_column(String(200), unique=True, nullable=True)
    email: Mapped[str | None] = mapped_column(String(200), nullable=True)
    primary_phone_number: Mapped[str | None] = mapped_column(String(30), nullable=True)
    secondary_phone_number: Mapped[str | None] = mapped_column(String(30), nullable=True)
    third_phone_number: Mapped[str | None] = mapped_column(String(30), nullable=True)
    whatsapp_number: Mapped[str | None] = mapped_column(String(30), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    is_verified: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_featured: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, server_default=func.now()
    )

    city: Mapped["CityModel | None"] = relationship()
    country: Mapped["CountryModel | None"] = relationship()
    rates: Mapped[list["OfficeRateModel"]] = relationship(back_populates="office")
    working_hours: Mapped[list["WorkingHourModel"]] = relationship(back_populates="office")

    __table_args__ = (Index("idx_offices_lat_lon", "latitude", "longitude"),)


class OfficeRateModel(Base):
    __tablename__ = "office_rates"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    office_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("offices.id", ondelete="CASCADE"), nullable=False
    )
    base_currency_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("currencies.id"), nullable=False
    )
    target_currency_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("currencies.id"), nullable=False
    )
    buy_rate: Mapped[Decimal] = mapped_column(Numeric(12, 4), nullable=False)
    sell_rate: Mapped[Decimal] = mapped_column(Numeric(12, 4), nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, server_default=func.now()
    )

    office: Mapped["OfficeModel"] = relationship(back_populates="rates")
    base_currency: Mapped["CurrencyModel"] = relationship(foreign_keys=[base_currency_id])
    target_currency: Mapped["CurrencyModel"] = relationship(foreign_keys=[target_currency_id])

    __table_args__ = (
        Index("idx_office_rates_office", "office_id"),
        Index("idx_office_rates_pair", "base_currency_id", "target_currency_id"),
        CheckConstraint("buy_rate > 0", name="ck_office_rates_buy_positive"),
        CheckConstraint("sell_rate > 0", name="ck_office_rates_sell_positive"),
    )


class WorkingHourModel(Base):
    __tablename__ = "working_hours"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    office_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("offices.id", ondelete="CASCADE"), nullable=False
    )
    day_of_week: Mapped[str] = mapped_column(String(10), nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    # "HH:MM" strings; to_time earlier than from_time wraps past midnight
    from_time: Mapped[str | None] = mapped_column(String(5), nullable=True)
    to_time: Mapped[str | None] = mapped_column(String(5), nullable=True)
    has_break: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    break_from_time: Mapped[str | None] = mapped_column(String(5), nullable=True)
    break_to_time: Mapped[str | None] = mapped_column(String(5), nullable=True)

    office: Mapped["OfficeModel"] = relationship(back_populates="working_hours")

    __table_args__ = (
        UniqueConstraint("office_id", "day_of_week", name="uq_working_hours_office_day"),
    )
