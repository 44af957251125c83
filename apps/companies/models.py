from sqlmodel import SQLModel, Field
from sqlalchemy import CheckConstraint
from typing import Optional

class Company(SQLModel, table=True):
    __tablename__ = "companies"
    __table_args__ = (
        CheckConstraint("length(name) > 0", name="ck_companies_name_not_empty"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    # Sort key for listings; ties fall back to id
    name: str = Field(max_length=60, index=True)
    address: str = Field(max_length=60)
    country: str = Field(max_length=60)
