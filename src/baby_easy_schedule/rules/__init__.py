"""Formula catalog."""

from baby_easy_schedule.rules.catalog import FormulaCatalog

__all__ = ["FormulaCatalog"]
