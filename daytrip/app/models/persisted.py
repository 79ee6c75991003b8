"""Persisted-state models - the only user-mutable data that is stored."""

from pydantic import BaseModel, ConfigDict, TypeAdapter


class PersistedEntry(BaseModel):
    """Completion flag for one activity, keyed by activity id."""

    # Older blobs stored whole activity objects; only id/completed matter.
    model_config = ConfigDict(extra="ignore")

    id: str
    completed: bool


PersistedState = list[PersistedEntry]

persisted_state_adapter: TypeAdapter[list[PersistedEntry]] = TypeAdapter(list[PersistedEntry])
