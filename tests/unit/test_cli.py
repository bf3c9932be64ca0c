import json

from grading import cli


def test_preview_prints_instruction(tmp_path, capsys, full_body):
    path = tmp_path / "submission.json"
    path.write_text(json.dumps(full_body), encoding="utf-8")
    assert cli.main(["preview", str(path), "--schema"]) == 0
    out = capsys.readouterr().out
    assert "--- system ---" in out
    assert "Candidate (Sam) answers:" in out
    assert '"additionalProperties": false' in out


def test_preview_reports_validation_errors(tmp_path, capsys):
    path = tmp_path / "submission.json"
    path.write_text(json.dumps({"answers": {"main": ""}}), encoding="utf-8")
    assert cli.main(["preview", str(path)]) == 2
    assert "answers.main" in capsys.readouterr().err


def test_grade_without_credential(tmp_path, capsys, monkeypatch, full_body):
    from config.settings import settings

    monkeypatch.setattr(settings, "OPENAI_API_KEY", None)
    path = tmp_path / "submission.json"
    path.write_text(json.dumps(full_body), encoding="utf-8")
    assert cli.main(["grade", str(path)]) == 1
    out = capsys.readouterr().out
    assert '"error": "Missing OPENAI_API_KEY' in out
