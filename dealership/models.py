from sqlalchemy import (
    Boolean,
    Column,
    ForeignKey,
    Integer,
    String,
    DateTime,
    Date,
    Numeric,
)
from sqlalchemy.orm import declarative_base, relationship
from sqlalchemy.sql import func

Base = declarative_base()

class User(Base):
    __tablename__ = "users"
    id = Column(Integer, primary_key=True, autoincrement=True)
    role = Column(String(50), nullable=False, default="admin")
    username = Column(String(50), unique=True, index=True, nullable=False)
    email = Column(String(100), unique=True, index=True, nullable=False)
    hashed_password = Column(String(255), nullable=False)
    full_name = Column(String(100))
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

class Customer(Base):
    __tablename__ = "customers"
    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False)
    ident_document = Column(String(14), unique=True, nullable=False, index=True)
    email = Column(String(100))
    phone = Column(String(20))
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    cars = relationship("Car", back_populates="customer")

class Car(Base):
    __tablename__ = "cars"
    id = Column(Integer, primary_key=True, autoincrement=True)
    brand = Column(String(25), nullable=False, index=True)
    model = Column(String(25), nullable=False)
    color = Column(String(20), nullable=False)
    year_manufacture = Column(Integer, nullable=False)
    imported = Column(Boolean, nullable=False, default=False)
    plates = Column(String(8), unique=True, nullable=False, index=True)
    selling_date = Column(Date)
    selling_price = Column(Numeric(12, 2, asdecimal=False))
    customer_id = Column(Integer, ForeignKey("customers.id"))
    created_user_id = Column(Integer, ForeignKey("users.id"))
    updated_user_id = Column(Integer, ForeignKey("users.id"))
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    customer = relationship("Customer", back_populates="cars")
    created_user = relationship("User", foreign_keys=[created_user_id])
    updated_user = relationship("User", foreign_keys=[updated_user_id])
