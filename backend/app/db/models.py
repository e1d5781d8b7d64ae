# File: backend/app/db/models.py
import uuid

from sqlalchemy import Boolean, Column, ForeignKey, Integer, String, Text, DateTime
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.db.database import Base

USER_ROLE_ID = 1
ADMIN_ROLE_ID = 2


def _new_user_id() -> str:
    return str(uuid.uuid4())


class Role(Base):
    __tablename__ = "roles"

    id = Column(Integer, primary_key=True)
    name = Column(String, unique=True, nullable=False)


class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=_new_user_id)
    name = Column(String, nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)
    password_hash = Column(String, nullable=False)
    role_id = Column(Integer, ForeignKey("roles.id"), nullable=False, default=USER_ROLE_ID)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    role = relationship("Role")
    templates = relationship("Template", back_populates="user")
    prompts = relationship("Prompt", back_populates="user")
    github_configs = relationship("GithubConfig", back_populates="user")
    openai_configs = relationship("OpenAiConfig", back_populates="user")
    runs = relationship("Run", back_populates="user")

    @property
    def is_admin(self) -> bool:
        return self.role_id == ADMIN_ROLE_ID


class Template(Base):
    __tablename__ = "templates"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    name = Column(String, nullable=False)
    content = Column(Text, nullable=False)  # LaTeX source
    is_default = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    user = relationship("User", back_populates="templates")


class Prompt(Base):
    __tablename__ = "prompts"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    name = Column(String, nullable=False)
    content = Column(Text, nullable=False)  # may contain {{JOB_DESCRIPTION}} / {{TEMPLATE}}
    is_default = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    user = relationship("User", back_populates="prompts")


class GithubConfig(Base):
    __tablename__ = "github_configs"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    name = Column(String, nullable=False)
    owner = Column(String, nullable=False)  # GitHub account or organisation
    repo = Column(String, nullable=False)
    token = Column(Text, nullable=False)  # encrypted
    is_default = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    user = relationship("User", back_populates="github_configs")


class OpenAiConfig(Base):
    __tablename__ = "openai_configs"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    name = Column(String, nullable=False)
    api_key = Column(Text, nullable=False)  # encrypted
    model = Column(String, nullable=False)
    is_default = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    user = relationship("User", back_populates="openai_configs")


class Run(Base):
    __tablename__ = "runs"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    job_description = Column(Text, nullable=False)
    template_id = Column(Integer, ForeignKey("templates.id"), nullable=True)
    prompt_id = Column(Integer, ForeignKey("prompts.id"), nullable=True)
    output_url = Column(Text, nullable=True)
    overleaf_url = Column(Text, nullable=True)
    status = Column(String, nullable=False, default="queued")  # "queued", "ready"
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    user = relationship("User", back_populates="runs")
    template = relationship("Template")
    prompt = relationship("Prompt")
