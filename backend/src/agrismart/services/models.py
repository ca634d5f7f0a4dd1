"""
SQLAlchemy Models — Schéma de la ferme AgriSmart.

SOURCE UNIQUE DE VÉRITÉ pour le schéma ORM.
Utilisé par services/db_handler.py (FarmDatabase).
"""

from sqlalchemy import Boolean, Column, ForeignKey, Integer, String, Text
from sqlalchemy.orm import declarative_base

Base = declarative_base()

DEFAULT_CROP_STATUS = "growing"


class Crop(Base):
    """Culture plantée suivie par l'exploitation."""
    __tablename__ = "crops"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(Text, nullable=False)
    variety = Column(Text)
    # Dates stockées telles que reçues (ISO "YYYY-MM-DD" en pratique)
    planted_date = Column(String)
    status = Column(Text, nullable=False, default=DEFAULT_CROP_STATUS, server_default=DEFAULT_CROP_STATUS)

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "variety": self.variety,
            "planted_date": self.planted_date,
            "status": self.status,
        }


class Task(Base):
    """
    Tâche, éventuellement liée à une culture.

    crop_id est une clé étrangère déclarée mais non vérifiée :
    une référence vers une culture inexistante est tolérée.
    """
    __tablename__ = "tasks"

    id = Column(Integer, primary_key=True, autoincrement=True)
    crop_id = Column(Integer, ForeignKey("crops.id"), nullable=True)
    task_name = Column(Text, nullable=False)
    due_date = Column(String)
    completed = Column(Boolean, nullable=False, default=False, server_default="0")

    def to_dict(self):
        return {
            "id": self.id,
            "crop_id": self.crop_id,
            "task_name": self.task_name,
            "due_date": self.due_date,
            "completed": bool(self.completed),
        }
