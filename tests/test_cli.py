"""
Tests for the command-line interface.
"""

import json
import pytest

from rtldoc.cli import main, parse_field_arguments
from rtldoc.models.document import WordDocument


TEMPLATE_BODY = '<w:p><w:r><w:t xml:space="preserve">{fullName} / {idNumber}</w:t></w:r></w:p>'


def texts(path):
    with WordDocument.open(path) as document:
        return document.paragraph_texts()


class TestParseFields:
    """Test KEY=VALUE parsing."""

    def test_parse(self):
        assert parse_field_arguments(["a=1", "b=x=y", "c="]) == {"a": "1", "b": "x=y", "c": ""}

    def test_missing_separator(self):
        with pytest.raises(ValueError):
            parse_field_arguments(["novalue"])


class TestCommands:
    """Test CLI commands and exit codes."""

    def test_version(self, capsys):
        assert main(["version"]) == 0
        assert "rtldoc v" in capsys.readouterr().out

    def test_types_json(self, capsys):
        assert main(["types", "--json"]) == 0
        payload = json.loads(capsys.readouterr().out)
        assert len(payload) == 4
        assert payload[0]["fields"][0]["key"] == "fullName"

    def test_types_text(self, capsys):
        assert main(["types"]) == 0
        assert "{residenceAddress}" in capsys.readouterr().out

    def test_no_command(self, capsys):
        assert main([]) == 0
        assert "usage" in capsys.readouterr().out

    def test_generate_with_template(self, make_docx, temp_dir, capsys):
        template = make_docx(TEMPLATE_BODY)
        output = temp_dir / "out.docx"

        code = main(["generate", "شهادة الحياة", "--template", str(template),
                     "--output", str(output), "--field", "fullName=Amina", "-F", "idNumber=77"])

        assert code == 0
        assert str(output) in capsys.readouterr().out
        assert texts(output) == ["Amina / 77"]

    def test_generate_from_catalog(self, make_docx, temp_dir, capsys):
        make_docx(TEMPLATE_BODY, name="Templates/طلب خطي.docx")
        values = temp_dir / "values.json"
        values.write_text(json.dumps({"fullName": "Amina", "idNumber": 5}), encoding="utf-8")

        code = main(["generate", "طلب خطي", "--templates", str(temp_dir / "Templates"),
                     "--output-dir", str(temp_dir / "Generated"), "--values", str(values)])

        assert code == 0
        generated = list((temp_dir / "Generated").glob("طلب خطي_*.docx"))
        assert len(generated) == 1
        assert texts(generated[0]) == ["Amina / 5"]

    def test_generate_missing_template(self, temp_dir, capsys):
        code = main(["generate", "شهادة السكنى", "--templates", str(temp_dir),
                     "--output-dir", str(temp_dir / "Generated")])

        assert code == 1
        assert "Template file not found" in capsys.readouterr().err

    def test_generate_bad_field(self, make_docx):
        with pytest.raises(SystemExit) as exc_info:
            main(["generate", "x", "--template", str(make_docx("<w:p/>")), "--field", "oops"])

        assert exc_info.value.code == 2

    def test_generate_bad_config(self, temp_dir, capsys):
        config = temp_dir / "config.json"
        config.write_text('{"unknown": 1}', encoding="utf-8")

        assert main(["generate", "x", "--config", str(config)]) == 1
        assert "Unknown configuration keys" in capsys.readouterr().err

    def test_inspect(self, make_docx, capsys):
        template = make_docx(TEMPLATE_BODY + '<w:p><w:r><w:t>{fullName}</w:t></w:r></w:p>')

        assert main(["inspect", str(template), "--json"]) == 0

        payload = json.loads(capsys.readouterr().out)
        assert payload["paragraphs"] == 2
        assert payload["placeholders"] == [
            {"name": "fullName", "token": "{fullName}", "count": 2},
            {"name": "idNumber", "token": "{idNumber}", "count": 1},
        ]

    def test_inspect_corrupt(self, temp_dir, capsys):
        template = temp_dir / "broken.docx"
        template.write_text("nope")

        assert main(["inspect", str(template)]) == 1
        assert "corrupted" in capsys.readouterr().err
