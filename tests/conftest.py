"""Test configuration utilities and shared fixtures."""

import shutil
import sys
from pathlib import Path

# Ensure the ``src`` directory is importable when tests are executed without an
# editable install.
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

import pytest  # noqa: E402

DATA_DIR = Path(__file__).resolve().parent / "data"


@pytest.fixture()
def data_dir() -> Path:
    """Directory holding the sample catalogs and whitelist sources."""

    return DATA_DIR


@pytest.fixture()
def catalog_dir(tmp_path: Path) -> Path:
    """Writable copy of the sample catalogs."""

    target = tmp_path / "po"
    target.mkdir()
    for path in DATA_DIR.glob("*.po"):
        shutil.copy(path, target / path.name)
    return target


@pytest.fixture()
def write_po(tmp_path: Path):
    """Return a helper writing a catalog with the given header and body."""

    def _write(
        name: str,
        body: str,
        *,
        plural_forms: str | None = "nplurals=2; plural=(n != 1);",
        language: str | None = None,
    ) -> Path:
        headers = ['msgid ""', 'msgstr ""', '"Content-Type: text/plain; charset=UTF-8\\n"']
        if language:
            headers.append(f'"Language: {language}\\n"')
        if plural_forms:
            headers.append(f'"Plural-Forms: {plural_forms}\\n"')
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text("\n".join(headers) + "\n\n" + body.strip() + "\n", encoding="utf-8")
        return path

    return _write
