"""AgriSmart — gestion de ferme (cultures, tâches) et conseil agronomique par IA."""

__version__ = "1.0.0"
