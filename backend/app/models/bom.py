"""
Bill of Materials model
"""
from sqlalchemy import Column, Integer, String, JSON

from app.db.base import Base


class BOMComponent(Base):
    """
    One raw-material line of a variant's BOM.

    `quantity` keeps the value exactly as entered ("1 UNIT", 2, ...);
    `quantity_units` is the integer parsed from it when the line is written
    and is what stock deductions use. `seq` is the 1-based position within
    the variant and is kept dense.
    """
    __tablename__ = "bom_components"

    id = Column(Integer, primary_key=True, autoincrement=True)
    variant_key = Column(String(50), nullable=False, index=True)
    seq = Column(Integer, nullable=False)
    component_code = Column(String(100), nullable=True)
    component_name = Column(String(255), nullable=True)
    quantity = Column(JSON, nullable=True)
    quantity_units = Column(Integer, default=0, nullable=False)

    def __repr__(self):
        return f"<BOMComponent {self.variant_key}#{self.seq}: {self.component_code}>"
