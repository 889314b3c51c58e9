"""
ui/views.py - Read-only field snapshots for a rendering layer

A FieldView bundles what a renderer needs to draw one field: current
value, options, loading flag, effective disabled state and the message
to show. Views are rebuilt on every read and never written back.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..core.enums import FieldStatus
from ..core.models import FieldConfig, FieldValue, Option


@dataclass(frozen=True)
class FieldView:
    """Derived render state of one field."""

    index: int
    label: str
    placeholder: str
    value: FieldValue
    multiple: bool
    options: List[Option] = field(default_factory=list)
    loading: bool = False
    disabled: bool = False
    error: Optional[str] = None
    status: FieldStatus = FieldStatus.IDLE

    @property
    def has_error(self) -> bool:
        return self.error is not None

    @classmethod
    def build(
        cls,
        config: FieldConfig,
        value: FieldValue,
        loading: bool,
        engine_disabled: bool,
        error: Optional[str],
        status: FieldStatus,
    ) -> "FieldView":
        """Combine engine state with the field's own display settings."""
        return cls(
            index=config.index,
            label=config.display_label,
            placeholder=config.display_placeholder,
            value=value,
            multiple=config.multiple,
            options=list(config.options),
            loading=loading,
            disabled=engine_disabled or config.disabled,
            # A fetch error wins over the field's static message
            error=error or config.error_message,
            status=status,
        )

    def to_dict(self) -> Dict[str, Any]:
        value: Any = self.value
        if isinstance(value, frozenset):
            value = sorted(value, key=str)
        return {
            "index": self.index,
            "label": self.label,
            "placeholder": self.placeholder,
            "value": value,
            "multiple": self.multiple,
            "options": [o.model_dump() for o in self.options],
            "loading": self.loading,
            "disabled": self.disabled,
            "error": self.error,
            "status": self.status.value,
        }
