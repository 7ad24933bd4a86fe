#!/usr/bin/env python3
"""
End-to-end tests for the sift.py runner: config loading, exit codes and the
written results file.
"""

import yaml

import sift


def write_config(tmp_path, **overrides):
    config = {
        "strategy": "basic",
        "batch": {"size": 2},
        "paths": {
            "input_file": str(tmp_path / "emails.txt"),
            "output_dir": str(tmp_path / "output"),
            "log_file": str(tmp_path / "mailsift.log"),
        },
        "logging": {"level": "DEBUG", "console_output": False},
    }
    config.update(overrides)
    config_file = tmp_path / "settings.yaml"
    config_file.write_text(yaml.safe_dump(config), encoding="utf-8")
    return config_file


def test_run_writes_results_file(tmp_path, monkeypatch, capsys):
    monkeypatch.setenv("MAILSIFT_CONFIG", str(write_config(tmp_path)))
    (tmp_path / "emails.txt").write_text("user@example.com\nnot-an-email\n\na@b.c\n", encoding="utf-8")

    exit_code = sift.main([])

    assert exit_code == 0
    report = (tmp_path / "output" / "validation-results.txt").read_text(encoding="utf-8")
    assert report == "Valid Emails:\nuser@example.com\na@b.c\n\nInvalid Emails:\nnot-an-email"
    assert "VALIDATION SUMMARY" in capsys.readouterr().out


def test_input_path_argument_overrides_config(tmp_path, monkeypatch):
    monkeypatch.setenv("MAILSIFT_CONFIG", str(write_config(tmp_path)))
    other = tmp_path / "other.txt"
    other.write_text("x@y.org\n", encoding="utf-8")

    assert sift.main([str(other)]) == 0
    assert "x@y.org" in (tmp_path / "output" / "validation-results.txt").read_text(encoding="utf-8")


def test_empty_file_fails_without_report(tmp_path, monkeypatch, capsys):
    monkeypatch.setenv("MAILSIFT_CONFIG", str(write_config(tmp_path)))
    (tmp_path / "emails.txt").write_text("\n  \n", encoding="utf-8")

    assert sift.main([]) == 1
    assert not (tmp_path / "output").exists()
    assert "No email addresses found" in capsys.readouterr().out


def test_non_text_upload_rejected(tmp_path, monkeypatch):
    monkeypatch.setenv("MAILSIFT_CONFIG", str(write_config(tmp_path)))
    upload = tmp_path / "emails.csv"
    upload.write_text("a@b.com\n", encoding="utf-8")

    assert sift.main([str(upload)]) == 1


def test_remote_without_key_refuses_to_start(tmp_path, monkeypatch):
    monkeypatch.setenv("MAILSIFT_CONFIG", str(write_config(tmp_path, strategy="remote")))
    monkeypatch.delenv("MAILSIFT_API_KEY", raising=False)
    monkeypatch.setattr(sift, "load_dotenv", lambda: False)
    (tmp_path / "emails.txt").write_text("a@b.com\n", encoding="utf-8")

    assert sift.main([]) == 2
    assert not (tmp_path / "output").exists()
