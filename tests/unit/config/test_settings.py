# tests/unit/config/test_settings.py — v2
"""Tests for config/settings.py — typed Settings and validation rules."""

from __future__ import annotations

from pathlib import Path

import pytest

from ftpbatch.config.settings import ConfigurationError, Settings, load_settings


class TestSettingsDefaults:
    def test_default_backends(self):
        s = Settings(_env_file=None)
        assert s.remote_store == "sftp"
        assert s.notifier == "sendgrid"
        assert s.ftp_port == 22

    def test_default_converter(self):
        s = Settings(_env_file=None)
        assert s.converter_merge_command == "TIFPDFMerger"
        assert s.converter_count_command == "TIFPDFCounter"

    def test_default_schedule(self):
        s = Settings(_env_file=None)
        assert s.schedule_days_list == [0, 1, 2, 3, 4, 6]
        assert (s.schedule_hour, s.schedule_minute) == (22, 0)

    def test_default_gap(self):
        assert Settings(_env_file=None).batch_gap_seconds == 300.0

    def test_default_trees(self):
        s = Settings(_env_file=None)
        assert s.work_root == Path("./wip")
        assert s.archive_root == Path("./archive")


class TestSettingsParsing:
    def test_folders_list(self):
        s = Settings(
            _env_file=None,
            ftp_source_folder="/in/",
            ftp_folders_to_process=" /in/a/ , /in/b,, ",
        )
        assert s.folders_list == ["/in/a/", "/in/b"]

    def test_email_lists(self):
        s = Settings(_env_file=None, email_to="a@x.com, b@x.com", email_cc="c@x.com")
        assert s.email_to_list == ["a@x.com", "b@x.com"]
        assert s.email_cc_list == ["c@x.com"]

    def test_schedule_days_dedup_sorted(self):
        s = Settings(_env_file=None, schedule_days="4, 1,4,0")
        assert s.schedule_days_list == [0, 1, 4]

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("FTP_HOST", "sftp.example.com")
        monkeypatch.setenv("BATCH_GAP_SECONDS", "60")
        s = Settings(_env_file=None)
        assert s.ftp_host == "sftp.example.com"
        assert s.batch_gap_seconds == 60.0

    def test_env_file(self, tmp_path: Path):
        env = tmp_path / ".env"
        env.write_text("FTP_USER=scanner\nSCHEDULE_HOUR=6\nUNKNOWN_KEY=1\n")
        s = Settings(_env_file=env)
        assert s.ftp_user == "scanner"
        assert s.schedule_hour == 6


class TestSettingsValidation:
    def test_folder_outside_source_prefix(self):
        with pytest.raises(ConfigurationError, match="FTP_SOURCE_FOLDER"):
            Settings(
                _env_file=None,
                ftp_source_folder="/in/",
                ftp_folders_to_process="/in/a,/elsewhere/b",
            )

    def test_no_prefix_accepts_any_folder(self):
        s = Settings(_env_file=None, ftp_folders_to_process="/x,/y")
        assert s.folders_list == ["/x", "/y"]

    def test_work_root_equals_archive_root(self, tmp_path: Path):
        with pytest.raises(ConfigurationError, match="WORK_ROOT"):
            Settings(_env_file=None, work_root=tmp_path / "a", archive_root=tmp_path / "a")

    def test_archive_inside_work_root(self, tmp_path: Path):
        with pytest.raises(ConfigurationError, match="WORK_ROOT and ARCHIVE_ROOT must not overlap"):
            Settings(
                _env_file=None,
                work_root=tmp_path / "wip",
                archive_root=tmp_path / "wip" / "archive",
            )

    def test_work_root_inside_archive(self, tmp_path: Path):
        with pytest.raises(ConfigurationError, match="ARCHIVE_ROOT"):
            Settings(
                _env_file=None,
                work_root=tmp_path / "archive" / "wip",
                archive_root=tmp_path / "archive",
            )

    def test_production_inside_work_root(self, tmp_path: Path):
        with pytest.raises(ConfigurationError, match="WORK_ROOT and PRODUCTION_PATH must not overlap"):
            Settings(
                _env_file=None,
                work_root=tmp_path / "wip",
                archive_root=tmp_path / "archive",
                production_path=tmp_path / "wip" / "prod",
            )

    def test_sibling_trees_accepted(self, tmp_path: Path):
        s = Settings(
            _env_file=None,
            work_root=tmp_path / "wip",
            archive_root=tmp_path / "wip-archive",
            production_path=tmp_path / "production",
        )
        assert s.archive_root == tmp_path / "wip-archive"

    def test_cc_without_to(self):
        with pytest.raises(ConfigurationError, match="EMAIL_CC"):
            Settings(_env_file=None, email_cc="c@x.com")

    def test_errors_collected(self, tmp_path: Path):
        with pytest.raises(ConfigurationError) as exc_info:
            Settings(
                _env_file=None,
                email_cc="c@x.com",
                work_root=tmp_path,
                archive_root=tmp_path,
            )
        assert "WORK_ROOT" in str(exc_info.value)
        assert "EMAIL_CC" in str(exc_info.value)

    def test_gap_must_be_positive(self):
        with pytest.raises(ValueError, match="batch_gap_seconds"):
            Settings(_env_file=None, batch_gap_seconds=0)

    @pytest.mark.parametrize("hour", [-1, 24])
    def test_hour_range(self, hour: int):
        with pytest.raises(ValueError, match="schedule_hour"):
            Settings(_env_file=None, schedule_hour=hour)

    def test_minute_range(self):
        with pytest.raises(ValueError, match="schedule_minute"):
            Settings(_env_file=None, schedule_minute=60)

    @pytest.mark.parametrize("days", ["7", "mon", "1,-2"])
    def test_bad_days(self, days: str):
        with pytest.raises(ValueError, match="schedule_days"):
            Settings(_env_file=None, schedule_days=days)

    def test_bad_backend(self):
        with pytest.raises(ValueError):
            Settings(_env_file=None, remote_store="ftp")


class TestLoadSettings:
    def test_overrides(self, monkeypatch):
        monkeypatch.chdir(Path(__file__).parent)
        s = load_settings(ftp_dest_folder="/out/", notifier="none")
        assert s.ftp_dest_folder == "/out/"
        assert s.notifier == "none"
