"""Export JSON schemas for Activity and the persisted completion state."""

import json
from pathlib import Path

from daytrip.app.models import Activity, PersistedEntry


def main() -> None:
    """Export schemas to docs/schemas/."""
    schemas_dir = Path("docs/schemas")
    schemas_dir.mkdir(parents=True, exist_ok=True)

    # Export Activity schema
    activity_schema = Activity.model_json_schema()
    activity_path = schemas_dir / "Activity.schema.json"
    with open(activity_path, "w") as f:
        json.dump(activity_schema, f, indent=2)
    print(f"Exported Activity schema to {activity_path}")

    # Export persisted state schema (array of {id, completed})
    persisted_schema = {
        "type": "array",
        "items": PersistedEntry.model_json_schema(),
    }
    persisted_path = schemas_dir / "PersistedState.schema.json"
    with open(persisted_path, "w") as f:
        json.dump(persisted_schema, f, indent=2)
    print(f"Exported PersistedState schema to {persisted_path}")


if __name__ == "__main__":
    main()
