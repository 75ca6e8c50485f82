"""Template manager: renderer catalog and project export."""

from src.manager.lib import (
    ROOT_REF,
    ExportContext,
    TemplateManager,
    entry_template,
    template_ref,
)

__all__ = [
    "TemplateManager",
    "ExportContext",
    "ROOT_REF",
    "entry_template",
    "template_ref",
]
