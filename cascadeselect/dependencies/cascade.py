"""
dependencies/cascade.py - Cascade engine

Owns the ordered field chain and the value / loading / error vectors.
A value change resets every descendant, then a re-evaluation pass walks
the chain left to right and resolves options for each field whose parent
holds a value. Fetch failures are contained to the field they hit.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Iterable, List, Optional
import inspect
import logging
import time
import uuid

from ..cache import TTLCache
from ..core.constants import (
    DEFAULT_CACHE_TTL_SECONDS,
    DEFAULT_DEBOUNCE_SECONDS,
    DEFAULT_DESIGN_SYSTEM,
    DEFAULT_FETCH_ERROR_MESSAGE,
    DEFAULT_HISTORY_SIZE,
)
from ..core.enums import FieldStatus
from ..core.models import FieldConfig, FieldValue, is_empty_value, prepare_fields
from ..exceptions import ConfigurationError, OptionFetchError
from ..resolver import OptionResolver, make_cache_key
from ..ui.debounce import DebouncedNotifier
from ..ui.views import FieldView
from .invalidation import ChangeLog, ValueChangeEvent

logger = logging.getLogger("cascade.engine")


ValueSink = Callable[[List[FieldValue]], Any]
ErrorSink = Callable[[Exception], Any]


def _now() -> datetime:
    return datetime.now(timezone.utc)


# =============================================================================
# PASS RESULTS
# =============================================================================

@dataclass
class FieldResolution:
    """Outcome of one field's step within a re-evaluation pass."""
    index: int
    started_at: datetime = field(default_factory=_now)
    completed_at: Optional[datetime] = None

    cache_key: Optional[str] = None
    success: bool = False
    option_count: int = 0

    was_skipped: bool = False
    skip_reason: Optional[str] = None

    # Result arrived after a newer pass started and was not applied
    was_discarded: bool = False

    error: Optional[str] = None
    execution_time_ms: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "index": self.index,
            "started_at": self.started_at.isoformat(),
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
            "cache_key": self.cache_key,
            "success": self.success,
            "option_count": self.option_count,
            "was_skipped": self.was_skipped,
            "skip_reason": self.skip_reason,
            "was_discarded": self.was_discarded,
            "error": self.error,
            "execution_time_ms": self.execution_time_ms,
        }


@dataclass
class PassResult:
    """Result of one re-evaluation pass over the chain."""
    pass_id: str
    generation: int
    started_at: datetime
    completed_at: Optional[datetime] = None
    trigger_index: Optional[int] = None

    resolutions: Dict[int, FieldResolution] = field(default_factory=dict)

    resolved_count: int = 0
    failed_count: int = 0
    skipped_count: int = 0
    discarded_count: int = 0

    # A newer pass started before this one finished
    superseded: bool = False

    total_time_ms: int = 0

    @property
    def success(self) -> bool:
        return self.failed_count == 0

    def record(self, resolution: FieldResolution) -> None:
        self.resolutions[resolution.index] = resolution
        if resolution.was_discarded:
            self.discarded_count += 1
        elif resolution.was_skipped:
            self.skipped_count += 1
        elif resolution.success:
            self.resolved_count += 1
        else:
            self.failed_count += 1

    def get_summary(self) -> Dict[str, Any]:
        return {
            "pass_id": self.pass_id,
            "success": self.success,
            "resolved": self.resolved_count,
            "failed": self.failed_count,
            "skipped": self.skipped_count,
            "discarded": self.discarded_count,
            "superseded": self.superseded,
            "total_time_ms": self.total_time_ms,
        }

    def to_dict(self) -> Dict[str, Any]:
        return {
            "pass_id": self.pass_id,
            "generation": self.generation,
            "started_at": self.started_at.isoformat(),
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
            "trigger_index": self.trigger_index,
            "resolutions": {str(k): v.to_dict() for k, v in self.resolutions.items()},
            "resolved_count": self.resolved_count,
            "failed_count": self.failed_count,
            "skipped_count": self.skipped_count,
            "discarded_count": self.discarded_count,
            "superseded": self.superseded,
            "total_time_ms": self.total_time_ms,
        }


# =============================================================================
# CASCADE ENGINE
# =============================================================================

class CascadeEngine:
    """
    State machine for a chain of dependent choice fields.

    All mutation is expected on a single event loop. Passes suspend only
    while awaiting a lookup, and each pass is tagged with a generation so
    results that arrive after a newer pass started can be told apart.
    """

    def __init__(
        self,
        fields: Iterable[FieldConfig],
        on_change: Optional[ValueSink] = None,
        on_error: Optional[ErrorSink] = None,
        disabled: bool = False,
        design_system: str = DEFAULT_DESIGN_SYSTEM,
        cache: Optional[TTLCache] = None,
        resolver: Optional[OptionResolver] = None,
        cache_ttl_seconds: float = DEFAULT_CACHE_TTL_SECONDS,
        debounce_changes: bool = False,
        debounce_seconds: float = DEFAULT_DEBOUNCE_SECONDS,
        fetch_error_message: str = DEFAULT_FETCH_ERROR_MESSAGE,
        discard_superseded: bool = True,
        history_size: int = DEFAULT_HISTORY_SIZE,
    ):
        """
        Create a cascade session.

        Args:
            fields: Field configurations, any order, indices 0..N-1
            on_change: Receives a snapshot of the value vector; may be async
            on_error: Receives the underlying exception of a failed fetch; may be async
            disabled: Global flag disabling every field
            design_system: Opaque renderer selector, passed through untouched
            cache: Cache instance; a private one is created if omitted
            resolver: Resolver instance; built around the cache if omitted
            cache_ttl_seconds: TTL for a privately created cache
            debounce_changes: Route on_change through a DebouncedNotifier
            debounce_seconds: Quiet period for debounced delivery
            fetch_error_message: Message written to the error vector
            discard_superseded: Drop results of passes a newer pass replaced
            history_size: Number of value change events kept

        Raises:
            ConfigurationError: If the field list is empty or its indices
                are not unique and contiguous from 0
        """
        self._fields: List[FieldConfig] = prepare_fields(fields)
        size = len(self._fields)

        if resolver is not None:
            self._resolver = resolver
        else:
            self._resolver = OptionResolver(cache or TTLCache(ttl_seconds=cache_ttl_seconds))

        self._values: List[FieldValue] = [f.empty_value() for f in self._fields]
        self._loading: List[bool] = [False] * size
        self._errors: List[Optional[str]] = [None] * size

        # Generation of the pass that last raised each loading flag
        self._loading_owner: List[int] = [0] * size
        # Cache key of the options currently applied to each field
        self._applied_key: List[Optional[str]] = [None] * size

        self._generation = 0
        self._last_result: Optional[PassResult] = None

        self.disabled = disabled
        self.design_system = design_system
        self.fetch_error_message = fetch_error_message
        self.discard_superseded = discard_superseded

        self._on_change = on_change
        self._on_error = on_error
        self._notifier: Optional[DebouncedNotifier] = None
        if on_change is not None and debounce_changes:
            self._notifier = DebouncedNotifier(on_change, wait_seconds=debounce_seconds)

        self._change_log = ChangeLog(max_events=history_size)

    # -------------------------------------------------------------------------
    # State access
    # -------------------------------------------------------------------------

    def __len__(self) -> int:
        return len(self._fields)

    @property
    def fields(self) -> List[FieldConfig]:
        return list(self._fields)

    @property
    def values(self) -> List[FieldValue]:
        return list(self._values)

    @property
    def loading(self) -> List[bool]:
        return list(self._loading)

    @property
    def errors(self) -> List[Optional[str]]:
        return list(self._errors)

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def is_loading(self) -> bool:
        return any(self._loading)

    @property
    def resolver(self) -> OptionResolver:
        return self._resolver

    @property
    def cache(self) -> TTLCache:
        return self._resolver.cache

    @property
    def notifier(self) -> Optional[DebouncedNotifier]:
        return self._notifier

    @property
    def change_log(self) -> ChangeLog:
        return self._change_log

    @property
    def last_result(self) -> Optional[PassResult]:
        return self._last_result

    def options(self, index: int) -> List[Any]:
        self._check_index(index)
        return list(self._fields[index].options)

    def is_disabled(self, index: int) -> bool:
        """
        Field 0 is enabled unless the global flag is set. Any later field is
        also disabled while its parent has no value.
        """
        self._check_index(index)
        if self.disabled:
            return True
        if index == 0:
            return False
        return is_empty_value(self._values[index - 1])

    def status(self, index: int) -> FieldStatus:
        """Conceptual lifecycle state of one field."""
        self._check_index(index)
        if self._loading[index]:
            return FieldStatus.LOADING
        if self._errors[index] is not None:
            return FieldStatus.ERROR
        if index == 0 or not self._fields[index].has_fetcher:
            return FieldStatus.READY

        parent = self._values[index - 1]
        if is_empty_value(parent):
            return FieldStatus.IDLE
        if self._applied_key[index] == make_cache_key(index, parent):
            return FieldStatus.READY
        return FieldStatus.IDLE

    def view(self, index: int) -> FieldView:
        return FieldView.build(
            self._fields[index],
            value=self._values[index],
            loading=self._loading[index],
            engine_disabled=self.is_disabled(index),
            error=self._errors[index],
            status=self.status(index),
        )

    def views(self) -> List[FieldView]:
        return [self.view(i) for i in range(len(self._fields))]

    def cache_key_for(self, index: int) -> Optional[str]:
        """Key the next pass would use for index, or None without a parent value."""
        self._check_index(index)
        if index == 0 or is_empty_value(self._values[index - 1]):
            return None
        return make_cache_key(index, self._values[index - 1])

    # -------------------------------------------------------------------------
    # Mutation
    # -------------------------------------------------------------------------

    async def start(self) -> PassResult:
        """Run the session-start pass and publish the initial values."""
        await self._emit_values()
        return await self.refresh()

    async def set_value(self, index: int, new_value: Any) -> None:
        """
        Set one field's value, reset every descendant and re-resolve.

        The value vector is fully updated before the first suspension, so
        no stale descendant value is observable once this is called.

        Raises:
            ConfigurationError: If index is out of range or the value shape
                does not fit the field. State is left untouched.
        """
        self._check_index(index)
        value = self._fields[index].normalize_value(new_value)

        event = ValueChangeEvent(
            field_index=index,
            old_value=self._values[index],
            new_value=value,
            generation=self._generation + 1,
        )

        self._values[index] = value
        self._errors[index] = None

        for j in range(index + 1, len(self._fields)):
            if not is_empty_value(self._values[j]):
                event.cleared_values[j] = self._values[j]
            self._values[j] = self._fields[j].empty_value()
            self._errors[j] = None
            event.reset_fields.append(j)

        self._change_log.record(event)
        logger.debug(
            f"Field {index} set, {len(event.reset_fields)} descendants reset"
        )

        await self._emit_values()
        await self._run_pass(trigger_index=index)

    async def refresh(self) -> PassResult:
        """Re-run the pass without changing any value, e.g. after a cache flush."""
        return await self._run_pass(trigger_index=None)

    def clear_cache(self, key: Optional[str] = None) -> None:
        """Evict one cache key, or every entry when no key is given."""
        self._resolver.cache.clear(key)

    # -------------------------------------------------------------------------
    # Re-evaluation pass
    # -------------------------------------------------------------------------

    def _is_current(self, generation: int) -> bool:
        return generation == self._generation

    async def _run_pass(self, trigger_index: Optional[int]) -> PassResult:
        self._generation += 1
        generation = self._generation

        start = time.time()
        result = PassResult(
            pass_id=str(uuid.uuid4())[:8],
            generation=generation,
            started_at=_now(),
            trigger_index=trigger_index,
        )

        # Strictly ascending: a step never starts before the previous settled
        for index in range(1, len(self._fields)):
            if self.discard_superseded and not self._is_current(generation):
                result.superseded = True
                break
            result.record(await self._resolve_field(index, generation))

        if not self._is_current(generation):
            result.superseded = True

        result.completed_at = _now()
        result.total_time_ms = int((time.time() - start) * 1000)

        if result.superseded:
            logger.debug(f"Pass {result.pass_id} superseded by generation {self._generation}")
        else:
            self._last_result = result

        logger.info(
            f"Pass {result.pass_id} complete: "
            f"{result.resolved_count} resolved, "
            f"{result.failed_count} failed, "
            f"{result.skipped_count} skipped in {result.total_time_ms}ms"
        )
        return result

    async def _resolve_field(self, index: int, generation: int) -> FieldResolution:
        config = self._fields[index]
        resolution = FieldResolution(index=index)

        parent = self._values[index - 1]
        if is_empty_value(parent) or not config.has_fetcher:
            resolution.was_skipped = True
            resolution.skip_reason = "no parent value" if config.has_fetcher else "no fetcher"
            resolution.completed_at = _now()
            return resolution

        key = make_cache_key(index, parent)
        resolution.cache_key = key

        self._loading[index] = True
        self._loading_owner[index] = generation

        start = time.time()
        try:
            options = await self._resolver.resolve(config.fetcher(), parent, key)
        except OptionFetchError as e:
            resolution.error = str(e.original_error)
            if self._should_discard(generation):
                resolution.was_discarded = True
            else:
                self._errors[index] = self.fetch_error_message
            await self._report_error(e.original_error)
        else:
            if self._should_discard(generation):
                resolution.was_discarded = True
                logger.warning(f"Discarded superseded options for field {index} ({key})")
            else:
                config.options = options
                self._applied_key[index] = key
                self._errors[index] = None
                resolution.success = True
                resolution.option_count = len(options)
        finally:
            # A newer pass may own the flag by now
            if self._loading_owner[index] == generation:
                self._loading[index] = False

        resolution.execution_time_ms = int((time.time() - start) * 1000)
        resolution.completed_at = _now()
        return resolution

    def _should_discard(self, generation: int) -> bool:
        return self.discard_superseded and not self._is_current(generation)

    # -------------------------------------------------------------------------
    # Outbound notifications
    # -------------------------------------------------------------------------

    async def _emit_values(self) -> None:
        if self._on_change is None:
            return

        snapshot = list(self._values)
        if self._notifier is not None:
            self._notifier(snapshot)
            return

        try:
            result = self._on_change(snapshot)
            if inspect.isawaitable(result):
                await result
        except Exception as e:
            logger.error(f"on_change callback error: {e}")

    async def _report_error(self, error: Exception) -> None:
        if self._on_error is None:
            return
        try:
            result = self._on_error(error)
            if inspect.isawaitable(result):
                await result
        except Exception as e:
            logger.error(f"on_error callback error: {e}")

    def _check_index(self, index: int) -> None:
        if isinstance(index, bool) or not isinstance(index, int) or not 0 <= index < len(self._fields):
            raise ConfigurationError(
                f"Field index {index!r} out of range for {len(self._fields)} fields",
                field_index=index if isinstance(index, int) else None,
            )

    def to_dict(self) -> Dict[str, Any]:
        """Serialize session state for inspection."""
        return {
            "design_system": self.design_system,
            "disabled": self.disabled,
            "generation": self._generation,
            "fields": [v.to_dict() for v in self.views()],
            "last_pass": self._last_result.get_summary() if self._last_result else None,
            "cache": self._resolver.cache.get_stats(),
        }
