from sqlalchemy import Boolean, CheckConstraint, Column, DateTime, Integer, String, func

from farmledger.database import Base

ROLE_ADMIN = "admin"
ROLE_SUB_ADMIN = "sub_admin"
ROLE_FARMER = "farmer"


class User(Base):
    __tablename__ = "users"
    __table_args__ = (
        CheckConstraint("role IN ('admin', 'sub_admin', 'farmer')", name="ck_users_role"),
    )

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), nullable=False, unique=True, index=True)
    full_name = Column(String(200), nullable=False)
    role = Column(String(20), nullable=False, default=ROLE_FARMER)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, default=func.now(), nullable=False)
    updated_at = Column(DateTime, default=func.now(), onupdate=func.now(), nullable=False)
