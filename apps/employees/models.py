from sqlmodel import SQLModel, Field
from sqlalchemy import CheckConstraint
from typing import Optional

class Employee(SQLModel, table=True):
    __tablename__ = "employees"
    __table_args__ = (
        CheckConstraint("age BETWEEN 1 AND 150", name="ck_employees_age_range"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(max_length=30)
    age: int
    position: str = Field(max_length=20)
    company_id: int = Field(foreign_key="companies.id", index=True)
