"""
core/models.py - Field and option data model

Defines the option model returned by lookups, the per-field configuration
supplied once per cascade session, and the helpers that decide what counts
as an empty value for a field.
"""

from __future__ import annotations
from dataclasses import dataclass, field, replace
from typing import (
    Any,
    Awaitable,
    Callable,
    Dict,
    FrozenSet,
    Iterable,
    List,
    Optional,
    Protocol,
    Union,
    runtime_checkable,
)

from pydantic import BaseModel, ConfigDict, TypeAdapter, ValidationError

from .constants import DEFAULT_LABEL_TEMPLATE, DEFAULT_PLACEHOLDER
from ..exceptions import ConfigurationError


Scalar = Union[int, float, str]
FieldValue = Union[None, Scalar, FrozenSet[Scalar]]


class Option(BaseModel):
    """A single selectable choice within a field."""

    model_config = ConfigDict(frozen=True)

    value: Union[int, float, str]
    label: str


OptionList = List[Option]
FetchResult = Union[Iterable[Any], Awaitable[Iterable[Any]]]
FetchCallable = Callable[[Any], FetchResult]

_OPTION_LIST_ADAPTER = TypeAdapter(List[Option])


@runtime_checkable
class OptionSource(Protocol):
    """
    Lookup capability attached to a field.

    Implementations return the option list for a parent value, either
    directly or as an awaitable.
    """

    def fetch(self, parent_value: Any) -> FetchResult:
        ...


def parse_options(raw: Iterable[Any]) -> OptionList:
    """
    Validate a raw option sequence into Option instances.

    Accepts Option instances or mappings with ``value``/``label`` keys.

    Raises:
        pydantic.ValidationError: If an item does not have the option shape
        ConfigurationError: If two options share a value
    """
    items = [o.model_dump() if isinstance(o, Option) else o for o in raw]
    options = _OPTION_LIST_ADAPTER.validate_python(items)

    seen = set()
    for option in options:
        if option.value in seen:
            raise ConfigurationError(
                f"Duplicate option value {option.value!r} in option list"
            )
        seen.add(option.value)

    return options


def is_empty_value(value: Any) -> bool:
    """Unset scalars and empty selections are both empty."""
    if value is None:
        return True
    if isinstance(value, (set, frozenset, list, tuple)):
        return len(value) == 0
    return False


def _is_collection(value: Any) -> bool:
    return isinstance(value, (set, frozenset, list, tuple))


@dataclass
class FieldConfig:
    """Configuration for one position in the cascade."""

    index: int
    options: OptionList = field(default_factory=list)
    multiple: bool = False
    placeholder: Optional[str] = None
    label: Optional[str] = None
    fetch_options: Optional[Union[OptionSource, FetchCallable]] = None
    disabled: bool = False
    error_message: Optional[str] = None

    def __post_init__(self):
        if isinstance(self.index, bool) or not isinstance(self.index, int) or self.index < 0:
            raise ConfigurationError(f"Field index must be a non-negative int, got {self.index!r}")
        try:
            self.options = parse_options(self.options)
        except ValidationError as e:
            raise ConfigurationError(
                f"Malformed static options for field {self.index}: {e}",
                field_index=self.index,
            ) from e
        # Fail at construction rather than on the first pass
        self.fetcher()

    @property
    def has_fetcher(self) -> bool:
        return self.fetch_options is not None

    @property
    def display_label(self) -> str:
        return self.label or DEFAULT_LABEL_TEMPLATE.format(number=self.index + 1)

    @property
    def display_placeholder(self) -> str:
        return self.placeholder or DEFAULT_PLACEHOLDER

    def fetcher(self) -> Optional[FetchCallable]:
        """Return the lookup as a plain callable, whatever form it was given in."""
        if self.fetch_options is None:
            return None
        if callable(self.fetch_options):
            return self.fetch_options
        if isinstance(self.fetch_options, OptionSource):
            return self.fetch_options.fetch
        raise ConfigurationError(
            f"Field {self.index} fetch_options is neither callable nor an OptionSource",
            field_index=self.index,
        )

    def empty_value(self) -> FieldValue:
        return frozenset() if self.multiple else None

    def normalize_value(self, value: Any) -> FieldValue:
        """
        Coerce a value into the shape this field stores.

        Multiple-select fields store a frozenset; a bare scalar becomes a
        one-element set. Single-select fields reject collections.

        Raises:
            ConfigurationError: If the value shape does not fit the field
        """
        if value is None:
            return self.empty_value()

        if self.multiple:
            items = value if _is_collection(value) else [value]
            for item in items:
                if _is_collection(item) or isinstance(item, dict):
                    raise ConfigurationError(
                        f"Field {self.index} expects scalar selections, got {item!r}"
                    )
            return frozenset(items)

        if _is_collection(value) or isinstance(value, dict):
            raise ConfigurationError(
                f"Field {self.index} is single-select but received {type(value).__name__}"
            )
        return value

    def to_dict(self) -> Dict[str, Any]:
        return {
            "index": self.index,
            "options": [o.model_dump() for o in self.options],
            "multiple": self.multiple,
            "placeholder": self.placeholder,
            "label": self.label,
            "has_fetcher": self.has_fetcher,
            "disabled": self.disabled,
            "error_message": self.error_message,
        }


def prepare_fields(fields: Iterable[FieldConfig]) -> List[FieldConfig]:
    """
    Sort a field list by index and check it forms a contiguous chain.

    Returns copies, so option refreshes never write back into the
    caller's configuration objects.

    Raises:
        ConfigurationError: On an empty list, duplicate or missing indices
    """
    ordered = sorted(fields, key=lambda f: f.index)
    if not ordered:
        raise ConfigurationError("A cascade needs at least one field")

    indices = [f.index for f in ordered]
    if indices != list(range(len(ordered))):
        raise ConfigurationError(
            f"Field indices must be unique and contiguous from 0, got {indices}"
        )

    return [replace(f, options=list(f.options)) for f in ordered]
