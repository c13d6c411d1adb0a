"""Service package exports."""

from __future__ import annotations

__all__ = ["agreement_seed", "agreement_templates", "signatures"]
