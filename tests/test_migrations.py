import ast
import importlib.util
from pathlib import Path

import pytest

from app.schemas.counseling import CreateCategoryRequest

VERSIONS = Path(__file__).resolve().parent.parent / "alembic" / "versions"
INITIAL_REVISION = VERSIONS / "3f1c9a2b7d40_add_counseling_and_profile_tables.py"


def load_revision(path):
    spec = importlib.util.spec_from_file_location(path.stem, path)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


@pytest.mark.parametrize("path", sorted(VERSIONS.glob("*.py")), ids=lambda p: p.stem)
def test_revisions_do_not_import_application_code(path):
    tree = ast.parse(path.read_text())
    imported = set()
    for node in ast.walk(tree):
        if isinstance(node, ast.ImportFrom) and node.module:
            imported.add(node.module.split(".")[0])
        elif isinstance(node, ast.Import):
            imported.update(alias.name.split(".")[0] for alias in node.names)

    assert "app" not in imported


def test_initial_revision_seeds_valid_categories():
    revision = load_revision(INITIAL_REVISION)

    names = [row["name"] for row in revision.SEED_CATEGORIES]
    assert len(names) == len(set(names)) == 7
    for row in revision.SEED_CATEGORIES:
        CreateCategoryRequest.model_validate(row)
