# app/models/user.py
"""
Users table: admins, fleet managers and employees.
Employees are the targets of vehicle assignments; admins and fleet managers
form the fleet team that receives compliance emails.
"""

from datetime import datetime
from sqlalchemy import Column, String, DateTime
from app.database import Base
from app.models.enums import UserRole, UserStatus
from app.utils.ids import generate_id


class User(Base):
    __tablename__ = "users"

    id = Column(String(32), primary_key=True, default=generate_id)
    name = Column(String(200), nullable=False)
    email = Column(String(200), nullable=False, index=True)
    role = Column(String(30), nullable=False, default=UserRole.EMPLOYEE, index=True)
    status = Column(String(20), nullable=False, default=UserStatus.ACTIVE)
    emp_id = Column(String(50), index=True)
    department = Column(String(100))
    created_at = Column(DateTime, default=datetime.utcnow)

    def __repr__(self):
        return f"<User {self.id} name={self.name} role={self.role}>"
