"""
Tests for WordDocument.

Loading, tree access, settings part handling and saving.
"""

import pytest
import zipfile

from rtldoc.models.document import WordDocument, paragraph_runs, paragraph_text, run_text
from rtldoc.utils.xml_utils import NAMESPACES, REL_TYPE_SETTINGS, qn


BODY = (
    '<w:p><w:r><w:t>Hello </w:t></w:r><w:r><w:t>world</w:t></w:r></w:p>'
    '<w:tbl><w:tr><w:tc><w:p><w:r><w:t>cell</w:t></w:r></w:p></w:tc></w:tr></w:tbl>'
)


class TestWordDocumentOpen:
    """Test loading documents."""

    def test_open_and_read_text(self, make_docx):
        with WordDocument.open(make_docx(BODY)) as document:
            assert document.main_part == "word/document.xml"
            assert document.paragraph_texts() == ["Hello world", "cell"]
            assert len(list(document.iter_runs())) == 3

    def test_paragraph_helpers(self, make_docx):
        with WordDocument.open(make_docx(BODY)) as document:
            first = document.paragraphs()[0]
            runs = paragraph_runs(first)
            assert [run_text(run) for run in runs] == ["Hello ", "world"]
            assert paragraph_text(first) == "Hello world"

    def test_open_rejects_wrong_root(self, write_package, sample_zip_content):
        parts = dict(sample_zip_content)
        parts["word/document.xml"] = '<root/>'

        with pytest.raises(ValueError):
            WordDocument.open(write_package(parts))

    def test_open_missing_file(self, temp_dir):
        with pytest.raises(FileNotFoundError):
            WordDocument.open(temp_dir / "missing.docx")

    def test_closed_document(self, make_docx):
        document = WordDocument.open(make_docx(BODY))
        document.close()

        assert document.closed
        with pytest.raises(ValueError):
            document.root


class TestWordDocumentSave:
    """Test writing documents back."""

    def test_save_without_changes_keeps_parts(self, make_docx, temp_dir, read_part):
        source = make_docx(BODY)
        target = temp_dir / "copy.docx"

        with WordDocument.open(source) as document:
            document.save(target)

        with zipfile.ZipFile(source) as original, zipfile.ZipFile(target) as copy:
            assert original.namelist() == copy.namelist()
            assert original.read("_rels/.rels") == copy.read("_rels/.rels")

        texts = [t.text for t in read_part(target).iter(qn("w:t"))]
        assert texts == ["Hello ", "world", "cell"]

    def test_save_writes_modified_tree(self, make_docx, read_part):
        path = make_docx(BODY)

        with WordDocument.open(path) as document:
            next(document.iter_text_leaves()).text = "Bye "
            saved = document.save()

        assert saved == path
        assert read_part(path).find(f".//{qn('w:t')}").text == "Bye "


class TestSettingsPart:
    """Test locating and creating the settings part."""

    def test_existing_settings(self, make_docx):
        path = make_docx(BODY, with_settings=True, settings_body='<w:zoom w:percent="100"/>')

        with WordDocument.open(path) as document:
            settings = document.get_settings()
            assert settings.tag == qn("w:settings")
            assert settings.find(qn("w:zoom")) is not None

    def test_absent_settings_not_created(self, make_docx, temp_dir):
        path = make_docx(BODY)
        target = temp_dir / "out.docx"

        with WordDocument.open(path) as document:
            assert document.get_settings() is None
            document.save(target)

        with zipfile.ZipFile(target) as zf:
            assert "word/settings.xml" not in zf.namelist()

    def test_create_settings_part(self, make_docx, temp_dir, read_part):
        """Test the part, relationship and content type override are all added."""
        path = make_docx(BODY)
        target = temp_dir / "out.docx"

        with WordDocument.open(path) as document:
            settings = document.get_settings(create=True)
            assert settings.tag == qn("w:settings")
            assert document.get_settings() is settings
            document.save(target)

        assert read_part(target, "word/settings.xml").tag == qn("w:settings")

        rels = read_part(target, "word/_rels/document.xml.rels")
        settings_rels = [rel for rel in rels if rel.get("Type") == REL_TYPE_SETTINGS]
        assert len(settings_rels) == 1
        assert settings_rels[0].get("Target") == "settings.xml"
        assert settings_rels[0].get("Id") == "rId1"

        content_types = read_part(target, "[Content_Types].xml")
        overrides = [o.get("PartName") for o in content_types.iter(f"{{{NAMESPACES['ct']}}}Override")]
        assert "/word/settings.xml" in overrides

    def test_create_settings_without_document_rels(self, write_package, sample_zip_content, temp_dir,
                                                   read_part):
        parts = dict(sample_zip_content)
        del parts["word/_rels/document.xml.rels"]
        target = temp_dir / "out.docx"

        with WordDocument.open(write_package(parts)) as document:
            document.get_settings(create=True)
            document.save(target)

        rels = read_part(target, "word/_rels/document.xml.rels")
        assert [rel.get("Type") for rel in rels] == [REL_TYPE_SETTINGS]
