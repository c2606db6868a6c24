"""
Database models for the analytics report tables.
"""
from sqlalchemy import Column, Integer, String, Float
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class TopSellingItem(Base):
    """Ranked food item popularity."""
    __tablename__ = 'top_items'

    id = Column(Integer, primary_key=True, autoincrement=True)
    item_id = Column(String(50))
    name = Column(String(100))
    quantity = Column(Integer)
    revenue = Column(Float)
    avg_price = Column(Float)


class ReportSummary(Base):
    """Totals and leading item of a popularity report."""
    __tablename__ = 'report_summary'

    id = Column(Integer, primary_key=True, autoincrement=True)
    total_quantity = Column(Integer)
    total_revenue = Column(Float)
    top_item_id = Column(String(50))
    top_item_name = Column(String(100))


class MonthlyRevenueRow(Base):
    """Paid order revenue per calendar month."""
    __tablename__ = 'monthly_revenue'

    id = Column(Integer, primary_key=True, autoincrement=True)
    label = Column(String(20))
    year = Column(Integer)
    month = Column(Integer)
    amount = Column(Float)


class TopCustomer(Base):
    """Customers ranked by order count."""
    __tablename__ = 'top_customers'

    id = Column(Integer, primary_key=True, autoincrement=True)
    customer_id = Column(String(50))
    name = Column(String(100))
    orders = Column(Integer)
    amount = Column(Float)
