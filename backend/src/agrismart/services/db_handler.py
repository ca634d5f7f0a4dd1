from contextlib import contextmanager
from enum import Enum
from typing import Any, Dict, List, Optional
import logging

from sqlalchemy import case, func, or_

from agrismart.core.database import check_connection, create_db_engine, create_session_factory
from .models import Base, Crop, Task

logger = logging.getLogger(__name__)


class UpdateOutcome(str, Enum):
    """Résultat d'une mise à jour ciblant une ligne par son id."""
    UPDATED = "updated"
    NOT_FOUND = "not_found"


def _require(value: Any, field: str) -> None:
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValueError(f"{field} is required")


class FarmDatabase:
    """
    Store des cultures et des tâches (SQLAlchemy).

    Deux modes d'initialisation :
      1. db_url      → crée son propre engine (mode standalone, fermé par close())
      2. engine + session_factory → réutilise un engine existant

    Chaque opération ouvre sa propre session : une instruction, un commit.
    Les erreurs SQLAlchemy ne sont jamais avalées, elles remontent à l'appelant.
    """

    def __init__(self, db_url: str = None, *, engine=None, session_factory=None):
        """
        SÉCURITÉ : create_all() utilise checkfirst=True (défaut SQLAlchemy).
        Il ne crée que les tables MANQUANTES, sans DROP ni ALTER.
        """
        if engine is not None and session_factory is not None:
            self.engine = engine
            self.SessionLocal = session_factory
            self._owns_engine = False
        elif db_url:
            self.engine = create_db_engine(db_url)
            self.SessionLocal = create_session_factory(self.engine)
            self._owns_engine = True
        else:
            raise ValueError(
                "FarmDatabase: fournir db_url OU (engine + session_factory)"
            )

        Base.metadata.create_all(self.engine, checkfirst=True)
        logger.info("✅ FarmDatabase prêt (%s)", self.counts())

    def close(self) -> None:
        """Dispose l'engine s'il a été créé par ce store."""
        if self._owns_engine:
            self.engine.dispose()
            logger.info("🔒 FarmDatabase fermé.")

    @contextmanager
    def _get_session(self):
        """Fournit une session transactionnelle sécurisée."""
        session = self.SessionLocal()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    # --- CULTURES ---

    def create_crop(
        self,
        name: str,
        variety: Optional[str] = None,
        planted_date: Optional[str] = None,
    ) -> int:
        _require(name, "name")
        with self._get_session() as session:
            crop = Crop(name=name, variety=variety, planted_date=planted_date)
            session.add(crop)
            session.flush()
            logger.debug("Crop added id=%s name=%s", crop.id, name)
            return int(crop.id)

    def list_crops(self) -> List[Dict[str, Any]]:
        with self._get_session() as session:
            crops = session.query(Crop).order_by(Crop.id.asc()).all()
            return [c.to_dict() for c in crops]

    # --- TÂCHES ---

    def create_task(
        self,
        task_name: str,
        crop_id: Optional[int] = None,
        due_date: Optional[str] = None,
    ) -> int:
        # crop_id n'est pas vérifié : une référence orpheline est acceptée
        _require(task_name, "task_name")
        with self._get_session() as session:
            task = Task(crop_id=crop_id, task_name=task_name, due_date=due_date, completed=False)
            session.add(task)
            session.flush()
            logger.debug("Task added id=%s crop_id=%s due_date=%s", task.id, crop_id, due_date)
            return int(task.id)

    def list_tasks_with_crop_name(self) -> List[Dict[str, Any]]:
        """
        Tâches jointes (LEFT JOIN) au nom de leur culture.

        Ordre : tâches sans échéance (NULL ou "") d'abord, puis due_date
        croissante, puis id croissant. crop_name vaut None si la culture
        n'existe pas.
        """
        no_due_date = or_(Task.due_date.is_(None), Task.due_date == "")
        with self._get_session() as session:
            rows = (
                session.query(Task, Crop.name.label("crop_name"))
                .outerjoin(Crop, Task.crop_id == Crop.id)
                .order_by(case((no_due_date, 0), else_=1), Task.due_date.asc(), Task.id.asc())
                .all()
            )
            return [{**task.to_dict(), "crop_name": crop_name} for task, crop_name in rows]

    def set_task_completed(self, task_id: int, completed: bool) -> UpdateOutcome:
        with self._get_session() as session:
            task = session.get(Task, int(task_id))
            if task is None:
                logger.info("Task %s not found, completion unchanged", task_id)
                return UpdateOutcome.NOT_FOUND
            task.completed = bool(completed)
            logger.debug("Task %s completed=%s", task_id, task.completed)
            return UpdateOutcome.UPDATED

    # --- SANTÉ DU SYSTÈME ---

    def counts(self) -> Dict[str, int]:
        with self._get_session() as session:
            return {
                "crops": session.query(func.count(Crop.id)).scalar() or 0,
                "tasks": session.query(func.count(Task.id)).scalar() or 0,
            }

    def check_connection(self) -> bool:
        """Vérifie si la DB répond."""
        return check_connection(self.engine)
