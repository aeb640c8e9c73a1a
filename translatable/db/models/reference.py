from sqlalchemy import Column, ForeignKey, Index, Integer, String, UniqueConstraint
from sqlalchemy.orm import relationship

from .base import Base


class TranslatableItem(Base):
    __tablename__ = 'translatable_table'
    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=True)

    locales = relationship(
        "TranslatableItemLocale",
        back_populates="item",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


class TranslatableItemLocale(Base):
    __tablename__ = 'translatable_table_locale'
    # Rows are addressed by (owner_id, locale); the surrogate key only exists for the ORM
    row_id = Column(Integer, primary_key=True, autoincrement=True)
    owner_id = Column(Integer, ForeignKey('translatable_table.id', ondelete='CASCADE'), nullable=False)
    locale = Column(String(16), nullable=False)
    attr_one = Column(String(255), nullable=True)
    attr_two = Column(String(255), nullable=True)
    attr_three = Column(String(255), nullable=True)

    item = relationship("TranslatableItem", back_populates="locales")

    __table_args__ = (
        UniqueConstraint('owner_id', 'locale', name='uq_translatable_table_locale_owner_locale'),
        Index('idx_translatable_table_locale_owner_id', 'owner_id'),
    )
