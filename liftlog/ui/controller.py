"""Per-client state owner used by the web UI."""

from __future__ import annotations

import logging
from typing import Mapping

from liftlog.auth.provider import AuthOutcome, IdentityProvider
from liftlog.workout.deletion import DeletionGuard, PendingDeletion
from liftlog.workout.model import Equipment, WorkoutSet
from liftlog.workout.session import SessionController
from liftlog.workout.store import EntryField, RoutineStore, WorkoutSets
from liftlog.workout.summary import WorkoutSummary

logger = logging.getLogger(__name__)


class UIController:
    def __init__(
        self,
        auth: IdentityProvider,
        store: RoutineStore | None = None,
        session: SessionController | None = None,
        callback_url: str | None = None,
    ) -> None:
        self._auth = auth
        self._store = store or RoutineStore()
        self._session = session or SessionController(self._store)
        self._deletions = DeletionGuard(self._store, self._session)
        self._callback_url = callback_url

    @property
    def store(self) -> RoutineStore:
        return self._store

    @property
    def session(self) -> SessionController:
        return self._session

    @property
    def workout_sets(self) -> WorkoutSets:
        return self._store.workout_sets

    @property
    def selected(self) -> WorkoutSet | None:
        return self._store.selected

    @property
    def pending_deletion(self) -> PendingDeletion | None:
        return self._deletions.pending

    # Authentication

    async def request_login(self, email: str) -> AuthOutcome:
        return await self._auth.request_passwordless_login(
            email, redirect_to=self._callback_url
        )

    async def register(self, name: str, email: str, accepted_terms: bool) -> AuthOutcome:
        if not accepted_terms:
            return AuthOutcome(ok=False, message="You must accept the terms and conditions")
        metadata = {"name": name.strip()} if name.strip() else None
        return await self._auth.request_passwordless_login(
            email, metadata=metadata, redirect_to=self._callback_url
        )

    async def handle_callback(self, params: Mapping[str, str]) -> AuthOutcome:
        return await self._auth.resolve_session_from_callback(params)

    async def is_signed_in(self) -> bool:
        try:
            return await self._auth.get_current_session() is not None
        except Exception as exc:
            logger.warning("Session check failed, treating as signed out: %s", exc)
            return False

    async def sign_out(self) -> None:
        self._session.close()
        try:
            await self._auth.end_session()
        except Exception as exc:
            logger.warning("Sign-out failed: %s", exc)

    # Routine edits

    def select(self, set_id: str) -> None:
        self._store.select(set_id)

    def add_workout_set(self, template_key: str | None = None) -> None:
        if template_key:
            self._store.add_workout_set_from_template(template_key)
        else:
            self._store.add_workout_set()

    def rename_workout_set(self, set_id: str, name: str) -> None:
        self._store.rename_workout_set(set_id, name)

    def add_exercise(self, set_id: str) -> None:
        self._store.add_exercise(set_id)

    def rename_exercise(self, set_id: str, exercise_id: str, name: str) -> None:
        self._store.rename_exercise(set_id, exercise_id, name)

    def set_equipment(self, set_id: str, exercise_id: str, label: str | None) -> None:
        self._store.set_exercise_equipment(set_id, exercise_id, Equipment.parse(label))

    def set_notes(self, set_id: str, exercise_id: str, notes: str | None) -> None:
        self._store.set_exercise_notes(set_id, exercise_id, notes)

    def add_set_entry(self, set_id: str, exercise_id: str) -> None:
        self._store.add_set_entry(set_id, exercise_id)

    def update_set_entry(
        self,
        set_id: str,
        exercise_id: str,
        entry_id: str,
        field: EntryField,
        value: object,
    ) -> None:
        self._store.update_set_entry_field(set_id, exercise_id, entry_id, field, value)

    def remove_set_entry(self, set_id: str, exercise_id: str, entry_id: str) -> None:
        self._store.remove_set_entry(set_id, exercise_id, entry_id)

    # Deletion confirmation

    def request_workout_set_deletion(self, set_id: str) -> PendingDeletion | None:
        return self._deletions.request_workout_set_deletion(set_id)

    def request_exercise_deletion(self, set_id: str, exercise_id: str) -> PendingDeletion:
        return self._deletions.request_exercise_deletion(set_id, exercise_id)

    def cancel_deletion(self) -> None:
        self._deletions.cancel()

    def confirm_deletion(self) -> None:
        self._deletions.confirm()

    # Live session

    def start_workout(self, set_id: str) -> bool:
        return self._session.start(set_id)

    def toggle_completion(self, set_id: str, exercise_id: str, entry_id: str) -> bool | None:
        return self._session.toggle_completion(set_id, exercise_id, entry_id)

    def finish_workout(self) -> WorkoutSummary | None:
        return self._session.finish()

    def dismiss_summary(self) -> None:
        self._session.dismiss_summary()

    def save_summary(self) -> str | None:
        return self._session.save_summary()

    @property
    def workout_running(self) -> bool:
        return self._session.state == "active"

    def close(self) -> None:
        self._session.close()
        self._deletions.cancel()
