from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Table
from sqlalchemy.orm import relationship
from datetime import datetime
from session_auth.core.database import Base
import enum


class UserStatusEnum(str, enum.Enum):
    ACTIVE = "active"
    LOCKED = "locked"
    DISABLED = "disabled"


role_user = Table(
    "sys_role_user",
    Base.metadata,
    Column("user_id", Integer, ForeignKey("sys_user.id", ondelete="CASCADE"), primary_key=True),
    Column("role_id", Integer, ForeignKey("sys_role.id", ondelete="CASCADE"), primary_key=True),
)

role_permission = Table(
    "sys_role_permission",
    Base.metadata,
    Column("role_id", Integer, ForeignKey("sys_role.id", ondelete="CASCADE"), primary_key=True),
    Column("permission_id", Integer, ForeignKey("sys_permission.id", ondelete="CASCADE"), primary_key=True),
)


class SysUser(Base):
    __tablename__ = "sys_user"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(64), unique=True, index=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    nickname = Column(String(64), nullable=True)
    email = Column(String(255), nullable=True)
    phone = Column(String(20), nullable=True)
    head_img_url = Column(String(255), nullable=True)

    status = Column(String(20), default=UserStatusEnum.ACTIVE.value, index=True, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    roles = relationship("SysRole", secondary=role_user, back_populates="users")

    def __repr__(self):
        return f"<SysUser {self.username}>"


class SysRole(Base):
    __tablename__ = "sys_role"

    id = Column(Integer, primary_key=True)
    name = Column(String(50), unique=True, nullable=False)
    description = Column(String(100), nullable=True)

    users = relationship("SysUser", secondary=role_user, back_populates="roles")
    permissions = relationship("Permission", secondary=role_permission, back_populates="roles")


class Permission(Base):
    __tablename__ = "sys_permission"

    id = Column(Integer, primary_key=True)
    parent_id = Column(Integer, default=0, nullable=False)
    name = Column(String(50), nullable=False)
    href = Column(String(1000), nullable=True)
    # 1 = menu, 2 = button/action
    type = Column(Integer, default=1, nullable=False)
    permission = Column(String(50), nullable=True)
    sort = Column(Integer, default=0, nullable=False)

    roles = relationship("SysRole", secondary=role_permission, back_populates="permissions")
