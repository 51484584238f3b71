"""
Pytest configuration for rtldoc
"""

import pytest
import logging
import sys
import zipfile
from pathlib import Path

from lxml import etree


W_NS = "http://schemas.openxmlformats.org/wordprocessingml/2006/main"

SETTINGS_REL = (
    '<Relationship Id="rId1" '
    'Type="http://schemas.openxmlformats.org/officeDocument/2006/relationships/settings" '
    'Target="settings.xml"/>'
)
SETTINGS_OVERRIDE = (
    '<Override PartName="/word/settings.xml" '
    'ContentType="application/vnd.openxmlformats-officedocument.wordprocessingml.settings+xml"/>'
)


def document_xml(body: str) -> str:
    """Wrap body content in a ``w:document`` part."""
    return (
        '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>\n'
        f'<w:document xmlns:w="{W_NS}"><w:body>{body}</w:body></w:document>'
    )


def content_types_xml(overrides: str = "") -> str:
    return (
        '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>\n'
        '<Types xmlns="http://schemas.openxmlformats.org/package/2006/content-types">'
        '<Default Extension="rels" ContentType="application/vnd.openxmlformats-package.relationships+xml"/>'
        '<Default Extension="xml" ContentType="application/xml"/>'
        '<Override PartName="/word/document.xml" '
        'ContentType="application/vnd.openxmlformats-officedocument.wordprocessingml.document.main+xml"/>'
        f'{overrides}</Types>'
    )


def document_rels_xml(relationships: str = "") -> str:
    return (
        '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>\n'
        '<Relationships xmlns="http://schemas.openxmlformats.org/package/2006/relationships">'
        f'{relationships}</Relationships>'
    )


@pytest.fixture(autouse=True)
def configure_logging():
    """Configure logging for tests to avoid file handler issues."""
    # Clear all existing handlers
    root_logger = logging.getLogger()
    root_logger.handlers.clear()

    # Set up console-only logging for tests
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(logging.WARNING)  # Only show warnings and errors during tests

    formatter = logging.Formatter(
        '%(name)s - %(levelname)s - %(message)s'
    )
    console_handler.setFormatter(formatter)

    root_logger.addHandler(console_handler)
    root_logger.setLevel(logging.WARNING)

    yield

    # Cleanup after test
    root_logger.handlers.clear()


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    import tempfile
    with tempfile.TemporaryDirectory() as temp_dir:
        yield Path(temp_dir)


@pytest.fixture
def sample_zip_content():
    """Create sample ZIP content for a minimal DOCX package."""
    return {
        '[Content_Types].xml': content_types_xml(),
        '_rels/.rels': '''<?xml version="1.0" encoding="UTF-8" standalone="yes"?>
<Relationships xmlns="http://schemas.openxmlformats.org/package/2006/relationships">
    <Relationship Id="rId1" Type="http://schemas.openxmlformats.org/officeDocument/2006/relationships/officeDocument" Target="word/document.xml"/>
</Relationships>''',
        'word/document.xml': document_xml('<w:p><w:r><w:t>Test paragraph</w:t></w:r></w:p>'),
        'word/_rels/document.xml.rels': document_rels_xml(),
    }


@pytest.fixture
def write_package(temp_dir):
    """Write a mapping of part name to content as a ZIP file in ``temp_dir``."""
    def _write(parts, name="template.docx"):
        path = temp_dir / name
        path.parent.mkdir(parents=True, exist_ok=True)
        with zipfile.ZipFile(path, 'w', zipfile.ZIP_DEFLATED) as zf:
            for part_name, content in parts.items():
                zf.writestr(part_name, content)
        return path
    return _write


@pytest.fixture
def make_docx(write_package, sample_zip_content):
    """
    Build a DOCX template from body XML.

    ``with_settings`` adds a settings part (optionally with custom content)
    referenced from the main document part.
    """
    def _make(body, name="template.docx", with_settings=False, settings_body=""):
        parts = dict(sample_zip_content)
        parts['word/document.xml'] = document_xml(body)
        if with_settings:
            parts['[Content_Types].xml'] = content_types_xml(SETTINGS_OVERRIDE)
            parts['word/_rels/document.xml.rels'] = document_rels_xml(SETTINGS_REL)
            parts['word/settings.xml'] = (
                '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>\n'
                f'<w:settings xmlns:w="{W_NS}">{settings_body}</w:settings>'
            )
        return write_package(parts, name)
    return _make


@pytest.fixture
def read_part():
    """Parse one XML part of a DOCX file."""
    def _read(path, part_name='word/document.xml'):
        with zipfile.ZipFile(path) as zf:
            return etree.fromstring(zf.read(part_name))
    return _read


# Configure pytest to ignore logging errors
def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )
    # Ignore logging errors during tests
    logging.raiseExceptions = False


def pytest_collection_modifyitems(config, items):
    """Add the unit marker to every test that is not an integration test."""
    for item in items:
        if "integration" not in item.keywords and "unit" not in item.keywords:
            item.add_marker(pytest.mark.unit)
