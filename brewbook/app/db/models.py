from datetime import datetime
import enum

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    Integer,
    JSON,
    String,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import relationship

from brewbook.app.db.base import Base


class DrinkType(str, enum.Enum):
    COFFEE = "coffee"
    MATCHA = "matcha"
    UBE = "ube"
    TEA = "tea"


class Temperature(str, enum.Enum):
    HOT = "hot"
    ICED = "iced"


class Difficulty(str, enum.Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class Recipe(Base):
    __tablename__ = "recipes"

    id = Column(Integer, primary_key=True, index=True)
    author_id = Column(String, nullable=True, index=True)
    title = Column(String, nullable=False)
    description = Column(Text)
    type = Column(Enum(DrinkType, native_enum=False), nullable=False, default=DrinkType.COFFEE)
    temperature = Column(Enum(Temperature, native_enum=False), nullable=False, default=Temperature.HOT)
    tags = Column(JSON, nullable=False, default=list)
    ingredients = Column(JSON, nullable=False, default=list)
    steps = Column(JSON, nullable=False, default=list)
    difficulty = Column(Enum(Difficulty, native_enum=False), nullable=True)
    prep_time_minutes = Column(Integer)
    total_time_minutes = Column(Integer)
    servings = Column(Integer)
    equipment = Column(JSON, nullable=False, default=list)
    seasonal_tags = Column(JSON, nullable=False, default=list)
    flavor_profile = Column(JSON, nullable=False, default=list)
    image_url = Column(String)
    video_url = Column(String)
    created_at = Column(DateTime, default=datetime.utcnow, index=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    embedding = relationship(
        "RecipeEmbedding", back_populates="recipe", uselist=False, cascade="all, delete-orphan"
    )
    saves = relationship("SavedRecipe", back_populates="recipe", cascade="all, delete-orphan")


class RecipeEmbedding(Base):
    __tablename__ = "recipe_embeddings"

    id = Column(Integer, primary_key=True)
    recipe_id = Column(
        Integer, ForeignKey("recipes.id", ondelete="CASCADE"), nullable=False, unique=True, index=True
    )
    embedding = Column(JSON, nullable=False)
    content_for_embedding = Column(Text, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    recipe = relationship("Recipe", back_populates="embedding")


class ExternalSource(Base):
    __tablename__ = "external_sources"

    id = Column(Integer, primary_key=True)
    url = Column(String, nullable=False, unique=True, index=True)
    domain = Column(String, nullable=False, index=True)
    title = Column(String)
    excerpt = Column(Text)
    content_type = Column(String, nullable=False, default="other")
    robots_txt_allowed = Column(Boolean, nullable=False, default=True)
    last_scraped = Column(DateTime, nullable=False, server_default=func.now())


class RecipeGeneration(Base):
    __tablename__ = "recipe_generations"

    id = Column(Integer, primary_key=True)
    prompt = Column(Text, nullable=False)
    seed_recipe_id = Column(Integer, ForeignKey("recipes.id", ondelete="SET NULL"), nullable=True)
    generated_recipes = Column(JSON, nullable=False)
    model_used = Column(String, nullable=False)
    tokens_used = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, nullable=False, server_default=func.now())

    __table_args__ = (Index("ix_recipe_generations_seed", "seed_recipe_id"),)


class SavedRecipe(Base):
    """A user's bookmark on a recipe."""

    __tablename__ = "saved_recipes"

    id = Column(Integer, primary_key=True)
    user_id = Column(String, nullable=False, index=True)
    recipe_id = Column(Integer, ForeignKey("recipes.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    recipe = relationship("Recipe", back_populates="saves")

    __table_args__ = (UniqueConstraint("user_id", "recipe_id", name="uq_saved_recipes_user_recipe"),)
