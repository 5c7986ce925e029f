"""Favorite recipes persistence using SQLAlchemy.

Favorites are keyed by recipe name. The recipe itself is stored as an opaque
JSON document (its wire form); the table only knows id, name and timestamp.

Usage:
    store = FavoritesStore(config.DATABASE_URL)
    store.toggle(recipe)          # add or remove, returns new state
    for recipe in store.list_favorites():
        ...
"""

import uuid
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterator, Optional

from sqlalchemy import DateTime, String, Text, create_engine, delete, select
from sqlalchemy.orm import DeclarativeBase, Mapped, Session, mapped_column, sessionmaker

from fridgechef.models.models import Recipe
from fridgechef.utils.logger import logger


def _uuid() -> str:
    return str(uuid.uuid4())


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    pass


class FavoriteRecipe(Base):
    __tablename__ = "favorite_recipes"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    name: Mapped[str] = mapped_column(String(200), unique=True, index=True)
    timestamp: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)
    recipe_data: Mapped[str] = mapped_column(Text)


class FavoritesStore:
    """Create/delete/list favorite recipes.

    Args:
        database_url: SQLAlchemy URL, e.g. "sqlite:///fridgechef.db".
        echo: Log every SQL statement (debugging only).
    """

    def __init__(self, database_url: str, echo: bool = False) -> None:
        # Make sure the directory of a file-based SQLite database exists
        if database_url.startswith("sqlite:///") and database_url != "sqlite:///:memory:":
            Path(database_url.replace("sqlite:///", "", 1)).parent.mkdir(parents=True, exist_ok=True)

        self.engine = create_engine(database_url, echo=echo)
        self._session_factory = sessionmaker(bind=self.engine, autoflush=False, expire_on_commit=False)
        Base.metadata.create_all(self.engine)

    @contextmanager
    def session(self) -> Iterator[Session]:
        """Session that commits on success and rolls back on any exception."""
        session = self._session_factory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def add(self, recipe: Recipe) -> str:
        """Save a recipe as favorite, replacing any favorite with the same name.

        Returns:
            Id of the stored favorite.
        """
        with self.session() as session:
            session.execute(delete(FavoriteRecipe).where(FavoriteRecipe.name == recipe.name))
            favorite = FavoriteRecipe(name=recipe.name, recipe_data=recipe.model_dump_json(by_alias=True))
            session.add(favorite)
            session.flush()
            favorite_id = favorite.id

        logger.info(f"Saved favorite recipe {recipe.name!r}")
        return favorite_id

    def remove(self, name: str) -> bool:
        """Delete the favorite with this name. Returns True if one was deleted."""
        with self.session() as session:
            result = session.execute(delete(FavoriteRecipe).where(FavoriteRecipe.name == name))
            removed = result.rowcount > 0

        if removed:
            logger.info(f"Removed favorite recipe {name!r}")
        return removed

    def get(self, name: str) -> Optional[Recipe]:
        with self.session() as session:
            favorite = session.scalar(select(FavoriteRecipe).where(FavoriteRecipe.name == name))
            if favorite is None:
                return None
            return Recipe.model_validate_json(favorite.recipe_data)

    def is_favorite(self, name: str) -> bool:
        with self.session() as session:
            return session.scalar(select(FavoriteRecipe.id).where(FavoriteRecipe.name == name)) is not None

    def toggle(self, recipe: Recipe) -> bool:
        """Add the recipe if it is not a favorite yet, otherwise remove it.

        Returns:
            True if the recipe is a favorite after the call.
        """
        if self.is_favorite(recipe.name):
            self.remove(recipe.name)
            return False
        self.add(recipe)
        return True

    def list_favorites(self) -> list[Recipe]:
        """All favorite recipes, most recently saved first."""
        with self.session() as session:
            rows = session.scalars(
                select(FavoriteRecipe).order_by(FavoriteRecipe.timestamp.desc(), FavoriteRecipe.name)
            ).all()
            return [Recipe.model_validate_json(row.recipe_data) for row in rows]
