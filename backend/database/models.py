from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, Index
from sqlalchemy.orm import declarative_base, relationship
from sqlalchemy.sql import func

Base = declarative_base()


class Category(Base):
    """Named grouping for jokes. Names are unique case-insensitively."""
    __tablename__ = 'categories'

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Relationships
    jokes = relationship('Joke', back_populates='category', passive_deletes=True)

    __table_args__ = (
        Index('uq_categories_name_lower', func.lower(name), unique=True),
    )

    def __repr__(self):
        return f"<Category(id={self.id}, name={self.name})>"


class Joke(Base):
    """Setup/delivery pair belonging to exactly one category"""
    __tablename__ = 'jokes'

    id = Column(Integer, primary_key=True, autoincrement=True)
    setup = Column(Text, nullable=False)
    delivery = Column(Text, nullable=False)
    category_id = Column(Integer, ForeignKey('categories.id', ondelete='RESTRICT'), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Relationships
    category = relationship('Category', back_populates='jokes')

    __table_args__ = (
        Index('idx_joke_category_id', 'category_id', 'id'),
    )

    def __repr__(self):
        return f"<Joke(id={self.id}, category_id={self.category_id})>"
