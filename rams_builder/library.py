from __future__ import annotations

from typing import Iterable, Optional, Protocol

from rams_builder.exceptions import StorageError
from rams_builder.models.documents import LiftPlan, MasterDocument, RAMSDocument
from rams_builder.models.library import Library
from rams_builder.models.risk import SEED_HAZARDS, HazardTemplate


class LibraryStore(Protocol):
    """Persistence collaborator. Failures are raised as StorageError."""

    def load_library(self) -> Library:
        ...

    def save_library(self, library: Library) -> None:
        ...


class LibraryManager:
    """Owns the in-memory library and mirrors every change to the store.

    The in-memory library stays authoritative: a failed load falls back to
    the seed data and a failed save keeps the change in memory. Either
    failure is reported through ``error_message``.
    """

    def __init__(
        self,
        store: LibraryStore,
        seed: Iterable[HazardTemplate] = SEED_HAZARDS,
    ) -> None:
        self.store = store
        self._seed = tuple(seed)
        self.library = Library.seeded(self._seed)
        self.is_loaded = False
        self.error_message: Optional[str] = None

    def load(self) -> Library:
        try:
            loaded = self.store.load_library()
        except StorageError as exc:
            self.library = Library.seeded(self._seed)
            self.error_message = f"Failed to load local libraries: {exc}"
        else:
            if not loaded.hazards:
                loaded.hazards = list(self._seed)
            self.library = loaded
            self.error_message = None
        self.is_loaded = True
        return self.library

    def load_if_needed(self) -> Library:
        if not self.is_loaded:
            self.load()
        return self.library

    def save_hazard_template(self, hazard: HazardTemplate) -> bool:
        self.library.upsert_hazard(hazard)
        return self._persist()

    def save_master_document(self, master: MasterDocument) -> bool:
        self.library.upsert_master_document(master)
        return self._persist()

    def save_rams_document(self, rams: RAMSDocument) -> bool:
        self.library.upsert_rams_document(rams)
        return self._persist()

    def save_lift_plan(self, lift_plan: LiftPlan) -> bool:
        self.library.upsert_lift_plan(lift_plan)
        return self._persist()

    def _persist(self) -> bool:
        try:
            self.store.save_library(self.library)
        except StorageError as exc:
            self.error_message = f"Failed to save local libraries: {exc}"
            return False
        self.error_message = None
        return True
