"""Tests for the CLI entry point."""

import httpx
import respx
import yaml
from click.testing import CliRunner

from microblog_publisher.cli import main

POST_URL = "https://alice.micro.blog/2024/03/05/hello.html"


def make_config(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(yaml.dump({"api_token": "token-123", "username": "alice"}))
    return str(path)


class TestCliGroup:
    def test_help(self):
        runner = CliRunner()
        result = runner.invoke(main, ["--help"])
        assert result.exit_code == 0
        assert "publish" in result.output
        assert "upload-images" in result.output
        assert "destinations" in result.output

    def test_version(self):
        runner = CliRunner()
        result = runner.invoke(main, ["--version"])
        assert result.exit_code == 0
        assert "0.1.0" in result.output

    def test_bad_config(self, tmp_path, vault):
        path = tmp_path / "config.yaml"
        path.write_text("unknown_key: 1\n")
        runner = CliRunner()
        result = runner.invoke(main, ["--config", str(path), "--vault", str(vault), "whoami"])
        assert result.exit_code != 0
        assert "unknown_key" in result.output


class TestPublishCommand:
    def test_publish(self, tmp_path, vault):
        note = vault / "notes" / "Hello.md"
        note.write_text("---\ntitle: Hello\nstatus: published\ndate: 2024-03-05 14:30\n---\nBody\n")
        runner = CliRunner()
        with respx.mock:
            respx.post("https://micro.blog/micropub").mock(return_value=httpx.Response(
                202, json={"edit": "https://micro.blog/posts/42", "url": POST_URL},
            ))
            result = runner.invoke(main, ["--config", make_config(tmp_path), "--vault", str(vault), "publish", "Hello"])

        assert result.exit_code == 0, result.output
        assert "Post published to Micro.blog." in result.output
        assert POST_URL in result.output
        assert "microblog_id: '42'" in note.read_text()

    def test_publish_draft_fails(self, tmp_path, vault):
        (vault / "notes" / "Hello.md").write_text("---\nstatus: draft\n---\nBody\n")
        runner = CliRunner()
        result = runner.invoke(main, ["--config", make_config(tmp_path), "--vault", str(vault), "publish", "Hello"])
        assert result.exit_code == 1
        assert "status: published" in result.output

    def test_note_not_found(self, tmp_path, vault):
        runner = CliRunner()
        result = runner.invoke(main, ["--config", make_config(tmp_path), "--vault", str(vault), "publish", "Missing"])
        assert result.exit_code != 0
        assert "Note not found" in result.output


class TestUploadImagesCommand:
    def test_upload_images(self, tmp_path, vault):
        (vault / "attachments" / "photo.png").write_bytes(b"PNG")
        note = vault / "notes" / "Hello.md"
        note.write_text("Look: ![[photo.png]]\n")
        runner = CliRunner()
        with respx.mock:
            respx.post("https://micro.blog/micropub/media").mock(return_value=httpx.Response(
                202, headers={"Location": "https://cdn.micro.blog/alice/photo.png"},
            ))
            result = runner.invoke(
                main, ["--config", make_config(tmp_path), "--vault", str(vault), "upload-images", "Hello"]
            )

        assert result.exit_code == 0, result.output
        assert "photo.png -> https://cdn.micro.blog/alice/photo.png" in result.output
        assert note.read_text() == "Look: ![photo](https://cdn.micro.blog/alice/photo.png)\n"


class TestAccountCommands:
    def test_destinations(self, tmp_path, vault):
        runner = CliRunner()
        with respx.mock:
            respx.get("https://micro.blog/micropub").mock(return_value=httpx.Response(
                200, json={"destination": [{"uid": "https://alice.micro.blog/", "name": "alice"}]},
            ))
            result = runner.invoke(main, ["--config", make_config(tmp_path), "--vault", str(vault), "destinations"])

        assert result.exit_code == 0, result.output
        assert "https://alice.micro.blog/\talice" in result.output

    def test_whoami(self, tmp_path, vault):
        runner = CliRunner()
        with respx.mock:
            respx.get("https://micro.blog/account").mock(return_value=httpx.Response(200, json={"username": "alice"}))
            result = runner.invoke(main, ["--config", make_config(tmp_path), "--vault", str(vault), "whoami"])

        assert result.exit_code == 0, result.output
        assert "alice" in result.output
