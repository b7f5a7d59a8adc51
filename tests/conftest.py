"""Shared fixtures and helpers for tests."""

from pathlib import Path

import pytest

from fusion_index.index import WorkspaceIndex

_REPO_ROOT = Path(__file__).parent.parent


# ---------------------------------------------------------------------------
# Auto-marker: tag tests as "unit" or "integration" based on directory
# ---------------------------------------------------------------------------


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    for item in items:
        test_path = Path(str(item.fspath))
        rel = test_path.relative_to(_REPO_ROOT / "tests")
        parts = rel.parts
        if parts and parts[0] == "integration":
            item.add_marker(pytest.mark.integration)
        else:
            item.add_marker(pytest.mark.unit)


# ---------------------------------------------------------------------------
# Fusion sources
# ---------------------------------------------------------------------------

CARD_SOURCE = """\
prototype(Vendor.Site:Card) < prototype(Neos.Fusion:Component) {
    @styleguide {
        title = 'Card'
        props {
            title = 'Hello'
            image {
                src = 'image.jpg'
                alt = ${'Alt ' + 'text'}
            }
            items = Neos.Fusion:DataStructure {
                0 = 'first'
            }
        }
    }

    title = null
    subtitle = ''
    link.href = null

    renderer = afx`
        <div>{props.title}</div>
    `
}
"""

BUTTON_SOURCE = """\
prototype(Vendor.Site:Button) {
    @styleguide {
        props {
            label = 'Click'
            label = 'Again'
            variant = 'primary'
        }
    }

    label = ''
}
"""


@pytest.fixture
def card_source() -> str:
    return CARD_SOURCE


@pytest.fixture
def button_source() -> str:
    return BUTTON_SOURCE


@pytest.fixture
def workspace_dir(tmp_path: Path) -> Path:
    """A workspace with two Fusion files and one unrelated file."""
    components = tmp_path / "Resources" / "Private" / "Fusion"
    components.mkdir(parents=True)
    (components / "Card.fusion").write_text(CARD_SOURCE, encoding="utf-8")
    (components / "Button.fusion").write_text(BUTTON_SOURCE, encoding="utf-8")
    (tmp_path / "README.md").write_text("prototype(Not:Indexed) {}\n", encoding="utf-8")
    return tmp_path


@pytest.fixture
def workspace(workspace_dir: Path) -> WorkspaceIndex:
    ws = WorkspaceIndex(workspace_dir)
    ws.initialize()
    return ws
