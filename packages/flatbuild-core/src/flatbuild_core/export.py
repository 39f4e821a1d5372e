"""JSON Schema export for the flatbuild project model.

Evaluators in other languages hand their result to flatbuild as a YAML or
JSON document; the exported schema lets them validate it before handing it
over, and gives editors autocomplete.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from flatbuild_core.schemas import ProjectModel

SCHEMA_DIALECT = "https://json-schema.org/draft/2020-12/schema"
PROJECT_MODEL_SCHEMA_ID = "https://flatbuild.dev/schemas/project-model.schema.json"


def export_project_model_schema(
    output_path: Path | str | None = None,
) -> dict[str, Any]:
    """Export the ProjectModel JSON Schema.

    Args:
        output_path: Optional path to write schema file. If provided,
            creates parent directories as needed.

    Returns:
        Dictionary containing the JSON Schema.

    Example:
        >>> schema = export_project_model_schema()
        >>> schema["title"]
        'ProjectModel'

        >>> # Export to file
        >>> export_project_model_schema(Path("schemas/project-model.schema.json"))
    """
    schema = ProjectModel.model_json_schema()

    schema["$schema"] = SCHEMA_DIALECT
    schema["$id"] = PROJECT_MODEL_SCHEMA_ID

    if "additionalProperties" not in schema:
        schema["additionalProperties"] = False

    if output_path is not None:
        _write_schema_file(schema, output_path)

    return schema


def _write_schema_file(schema: dict[str, Any], path: Path | str) -> None:
    """Write schema to JSON file.

    Args:
        schema: Schema dictionary to write.
        path: Output file path.
    """
    output_path = Path(path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(json.dumps(schema, indent=2))
