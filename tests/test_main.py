"""Tests for main.py CLI functionality."""

import json
import os
from unittest.mock import patch

import pytest

from film_gallery.core import ConfigurationError
from film_gallery.core.manifest import manifest_key
from film_gallery.main import build_config, build_parser, main
from film_gallery.testing.fakes import FakeAsyncObjectStore, FakeObjectStore, setup_test_album_dir


@pytest.fixture
def fake_store():
    """Route every store the CLI creates to one in-memory backend."""
    store = FakeObjectStore()
    with patch("film_gallery.main.ObjectStoreFactory") as factory:
        factory.create_store.return_value = store
        factory.create_async_store.side_effect = lambda config: FakeAsyncObjectStore(store)
        yield store


class TestMainCLI:
    """Tests for the main CLI functionality."""

    def test_main_with_no_args_shows_help(self):
        """Test that running main without arguments shows help and fails."""
        with patch("argparse.ArgumentParser.print_help") as mock_help:
            with pytest.raises(SystemExit) as exc_info:
                main([])
        mock_help.assert_called_once()
        assert exc_info.value.code == 1

    def test_main_version_command(self, capsys):
        """Test version command output."""
        with pytest.raises(SystemExit) as exc_info:
            main(["version"])
        assert exc_info.value.code == 0
        out = capsys.readouterr().out
        assert "Film Gallery CLI" in out
        assert "Version 0.1.0" in out

    def test_upload_then_resume(self, fake_store, tmp_path, capsys):
        """Test upload prints the album id and a rerun reuses every image."""
        setup_test_album_dir(tmp_path)

        main(["upload", str(tmp_path), "--name", "Roll 12", "--bucket", "gallery"])
        out = capsys.readouterr().out
        assert "(0 reused, 3 uploaded)" in out

        main(["upload", str(tmp_path), "--name", "Roll 12", "--bucket", "gallery"])
        out = capsys.readouterr().out
        assert "(3 reused, 0 uploaded)" in out

        album_id = next(line.split(": ", 1)[1] for line in out.splitlines() if line.startswith("Album ID"))
        assert fake_store.exists(manifest_key(album_id))

    def test_upload_missing_path_exits_1(self, fake_store, tmp_path):
        with pytest.raises(SystemExit) as exc_info:
            main(["upload", str(tmp_path / "missing"), "--name", "x", "--bucket", "gallery"])
        assert exc_info.value.code == 1
        assert fake_store.keys() == []

    def test_upload_without_bucket_exits_1(self, fake_store, tmp_path):
        """Test a missing bucket is a configuration error."""
        setup_test_album_dir(tmp_path)
        with patch.dict(os.environ, {}, clear=True):
            with pytest.raises(SystemExit) as exc_info:
                main(["upload", str(tmp_path), "--name", "x"])
        assert exc_info.value.code == 1

    def test_bucket_from_environment(self, fake_store, tmp_path, capsys):
        """Test GALLERY_BUCKET supplies the default bucket."""
        setup_test_album_dir(tmp_path)
        with patch.dict(os.environ, {"GALLERY_BUCKET": "env-bucket"}):
            main(["upload", str(tmp_path), "--name", "x"])
        assert "Album ID" in capsys.readouterr().out

    def test_delete_existing_album(self, fake_store, tmp_path, capsys):
        setup_test_album_dir(tmp_path)
        main(["upload", str(tmp_path), "--name", "x", "--bucket", "gallery"])
        album_id = fake_store.keys()[0].split("/")[0]

        main(["delete", album_id, "--bucket", "gallery"])

        assert "Album deleted successfully" in capsys.readouterr().out
        assert fake_store.keys() == []

    def test_delete_missing_album_exits_1(self, fake_store):
        with pytest.raises(SystemExit) as exc_info:
            main(["delete", "0123456789abcdef", "--bucket", "gallery"])
        assert exc_info.value.code == 1

    def test_manifest_command_prints_json(self, fake_store, tmp_path, capsys):
        """Test the manifest command prints presigned JSON."""
        setup_test_album_dir(tmp_path)
        main(["upload", str(tmp_path), "--name", "Roll", "--bucket", "gallery"])
        album_id = fake_store.keys()[0].split("/")[0]
        capsys.readouterr()

        main(["manifest", album_id, "--bucket", "gallery", "--presign", "--ttl", "60"])

        out = capsys.readouterr().out
        data = json.loads(out[out.index("{\n"):])
        assert data["id"] == album_id
        assert data["images"][0]["preview_url"].endswith("?expires=60")

    def test_manifest_command_missing_album(self, fake_store):
        with pytest.raises(SystemExit) as exc_info:
            main(["manifest", "0123456789abcdef", "--bucket", "gallery"])
        assert exc_info.value.code == 1


class TestBuildConfig:
    """Tests for CLI argument to configuration mapping."""

    def test_upload_options(self):
        """Test upload flags reach the configuration."""
        args = build_parser().parse_args(
            [
                "upload", "photos", "--name", "x", "--bucket", "b",
                "--endpoint-url", "http://localhost:9000",
                "--workers", "3", "--max-uploads", "4",
                "--preview-size", "1024", "--thumbnail-size", "200",
                "--reencode-originals", "--cleanup-on-failure",
            ]
        )
        config = build_config(args)
        assert config.bucket == "b"
        assert config.endpoint_url == "http://localhost:9000"
        assert config.max_workers == 3
        assert config.max_concurrent_uploads == 4
        assert config.preview_max_dimension == 1024
        assert config.thumbnail_max_dimension == 200
        assert config.reencode_originals is True
        assert config.cleanup_on_failure is True

    def test_invalid_values_raise_configuration_error(self):
        """Test pydantic validation errors surface as ConfigurationError."""
        args = build_parser().parse_args(["upload", "p", "--name", "x", "--bucket", "b", "--max-uploads", "0"])
        with pytest.raises(ConfigurationError):
            build_config(args)
