"""Debounced autosave of an in-progress nomination.

A ``DraftAutosaver`` drives one (user, category) editing session::

    IDLE --edit--> PENDING_SAVE --debounce elapsed--> SAVING --ok/failure--> IDLE

Every edit restarts the debounce timer. At most one persist call is in flight; a timer that
fires during a save is deferred and coalesced into one follow-up save, which only runs if
there are still unsaved edits. A failed save is logged and leaves the session dirty so the
next edit retries it. Close the session, awaiting ``close()``, before submitting it.
"""

import asyncio
import enum
import typing as t
from datetime import datetime

import structlog
from asgiref.sync import sync_to_async
from django.conf import settings
from django.utils import timezone

from accounts.models import NominatorUser
from nominations.models import FormConfiguration
from nominations.service import draft_service

logger = structlog.get_logger(__name__)

LoadDraft = t.Callable[[], t.Awaitable[t.Mapping[str, t.Any] | None]]
PersistDraft = t.Callable[[dict[str, t.Any]], t.Awaitable[t.Any]]


class AutosaveState(enum.StrEnum):
    IDLE = "idle"
    PENDING_SAVE = "pending_save"
    SAVING = "saving"


class DraftAutosaver:
    def __init__(
        self,
        load: LoadDraft,
        persist: PersistDraft,
        *,
        debounce_ms: int | None = None,
        log_context: dict[str, t.Any] | None = None,
    ) -> None:
        """Initialize the autosaver.

        Args:
            load: returns the persisted responses, or None when there is no draft.
            persist: stores a snapshot of the responses.
            debounce_ms: quiet period before a save, defaults to ``DRAFT_AUTOSAVE_DEBOUNCE_MS``.
            log_context: extra key/values bound to every log event.
        """
        self._load = load
        self._persist = persist
        debounce_ms = settings.DRAFT_AUTOSAVE_DEBOUNCE_MS if debounce_ms is None else debounce_ms
        self.debounce_seconds = debounce_ms / 1000
        self.values: dict[str, t.Any] = {}
        self.state = AutosaveState.IDLE
        self.dirty = False
        self.loaded = False
        self.closed = False
        self.last_saved_at: datetime | None = None
        self._timer: asyncio.TimerHandle | None = None
        self._save_task: asyncio.Task[None] | None = None
        self._rerun_requested = False
        self._log = logger.bind(**(log_context or {}))

    @classmethod
    def for_draft(
        cls, user: NominatorUser, category: FormConfiguration, *, debounce_ms: int | None = None
    ) -> "DraftAutosaver":
        """Autosaver backed by the draft of the user for the category."""

        async def load() -> dict[str, t.Any] | None:
            draft = await sync_to_async(draft_service.get_draft)(user, category)
            return dict(draft.responses) if draft is not None else None

        async def persist(responses: dict[str, t.Any]) -> None:
            await sync_to_async(draft_service.save_draft)(user, category, responses)

        return cls(
            load,
            persist,
            debounce_ms=debounce_ms,
            log_context={"user_id": str(user.id), "category_id": category.id},
        )

    async def load(self) -> None:
        """Pre-fill the values from the persisted draft.

        Edits made while loading are kept and win over the loaded values; saving only starts
        once the load has completed.
        """
        try:
            persisted = await self._load()
        except Exception:
            self._log.warning("draft_autosave_load_failed", exc_info=True)
            persisted = None
        if self.closed:
            return
        self.values = {**(persisted or {}), **self.values}
        self.loaded = True
        if self.dirty:
            self._schedule()

    def edit(self, question_id: str, value: t.Any) -> None:
        """Record a field change and restart the debounce timer."""
        if self.closed:
            return
        self.values[question_id] = value
        self.dirty = True
        if self.loaded:
            self._schedule()

    async def close(self) -> None:
        """End the session.

        A pending save is dropped. A save already in flight is awaited, so once this returns no
        write of this session can land after the draft is deleted by a submission. Its result no
        longer mutates the session.
        """
        self.closed = True
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        await self.wait_for_save()
        self.state = AutosaveState.IDLE

    async def wait_for_save(self) -> None:
        """Wait until the in-flight save, if any, has finished."""
        if self._save_task is not None:
            await asyncio.shield(self._save_task)

    def _schedule(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
        self._timer = asyncio.get_running_loop().call_later(self.debounce_seconds, self._on_timer)
        if self.state != AutosaveState.SAVING:
            self.state = AutosaveState.PENDING_SAVE

    def _on_timer(self) -> None:
        self._timer = None
        if self.closed:
            return
        if self._save_task is not None and not self._save_task.done():
            self._rerun_requested = True
            return
        self._save_task = asyncio.get_running_loop().create_task(self._save())

    async def _save(self) -> None:
        while True:
            self._rerun_requested = False
            snapshot = dict(self.values)
            self.dirty = False
            self.state = AutosaveState.SAVING
            try:
                await self._persist(snapshot)
            except Exception:
                self._log.warning("draft_autosave_failed", answer_count=len(snapshot), exc_info=True)
                if not self.closed:
                    self.dirty = True
                    self.state = AutosaveState.PENDING_SAVE if self._timer is not None else AutosaveState.IDLE
                return
            if self.closed:
                return
            self.last_saved_at = timezone.now()
            self._log.debug("draft_autosaved", answer_count=len(snapshot))
            if self._rerun_requested and self.dirty:
                continue
            self.state = AutosaveState.PENDING_SAVE if self._timer is not None else AutosaveState.IDLE
            return
