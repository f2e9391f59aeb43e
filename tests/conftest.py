import textwrap
from pathlib import Path

import pytest

from tests.infrastructure.file_utils import write


@pytest.fixture
def plugin(tmp_path: Path) -> Path:
    """
    Minimal plugin tree:

        frontend/index.ts
        frontend/data.txt
        frontend/assets/logo.svg
        frontend/locales/{de,en,fr}.json
        frontend/locales/extra/it.json
    """
    root = tmp_path / "plugin"
    fe = root / "frontend"
    write(fe / "data.txt", "hello from disk\n")
    write(fe / "assets" / "logo.svg", "<svg xmlns=\"http://www.w3.org/2000/svg\"/>")
    write(fe / "locales" / "en.json", '{"hello": "Hello"}')
    write(fe / "locales" / "de.json", '{"hello": "Hallo"}')
    write(fe / "locales" / "fr.json", '{"hello": "Bonjour"}')
    write(fe / "locales" / "extra" / "it.json", '{"hello": "Ciao"}')
    write(fe / "index.ts", "export default function main() {}\n")
    return root


@pytest.fixture
def module(plugin: Path):
    """Factory writing module source next to the plugin assets."""
    def _make(code: str, name: str = "frontend/index.ts") -> Path:
        return write(plugin / name, textwrap.dedent(code).lstrip("\n"))
    return _make
