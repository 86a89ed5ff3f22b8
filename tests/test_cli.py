"""Tests for the command-line interface."""

import asyncio
import json

import asyncpg
import pytest

from shortlink.cli import build_parser, main

from conftest import FakePool


@pytest.fixture(autouse=True)
def memory_backend(monkeypatch):
    monkeypatch.setenv("STORAGE_BACKEND", "memory")


class TestCLI:
    """Test CLI commands against the in-memory backend."""

    def test_no_command(self, capsys):
        assert main([]) == 1

    def test_create(self, capsys):
        exit_code = main(["create", "https://crates.io", "--custom-id", "crate"])

        assert exit_code == 0
        data = json.loads(capsys.readouterr().out)
        assert data["id"] == "crate"
        assert data["targetUrl"] == "https://crates.io/"
        assert data["countRedirects"] == 0

    def test_create_same_host(self, capsys):
        exit_code = main(["create", "http://localhost:7229/", "--host", "127.0.0.1:7229"])

        assert exit_code == 1
        error = json.loads(capsys.readouterr().err)
        assert error["message"].startswith("URLs with the same host as this service are forbidden")

    def test_create_malformed(self, capsys):
        assert main(["create", "crates.io"]) == 1
        assert json.loads(capsys.readouterr().err)["message"].startswith("Malformed URL: ")

    def test_get_missing(self, capsys):
        assert main(["get", "nope1"]) == 1
        assert json.loads(capsys.readouterr().err) == {
            "message": "A link with the provided ID 'nope1' could not be found"
        }

    def test_list(self, capsys):
        assert main(["list"]) == 0
        assert json.loads(capsys.readouterr().out) == []

    def test_health(self, capsys):
        assert main(["health"]) == 0
        assert json.loads(capsys.readouterr().out) == {"healthy": True, "backend": "memory"}

    def test_init_db_memory(self, capsys):
        assert main(["--backend", "memory", "init-db"]) == 0
        assert "memory" in json.loads(capsys.readouterr().out)["message"]

    def test_parser_backend_choices(self):
        args = build_parser().parse_args(["--backend", "postgres", "get", "abc"])

        assert args.backend == "postgres"
        assert args.link_id == "abc"


class TestPostgresCLI:
    """Test CLI commands against a fake asyncpg pool."""

    @pytest.fixture(autouse=True)
    def postgres_backend(self, monkeypatch):
        monkeypatch.setenv("STORAGE_BACKEND", "postgres")

    def test_slow_pool_creation(self, monkeypatch, capsys):
        """Opening the pool is not charged to the per-operation timeout."""
        pool = FakePool()

        async def create_pool(**kwargs):
            await asyncio.sleep(0.5)
            return pool

        monkeypatch.setattr(asyncpg, "create_pool", create_pool)

        assert main(["list"]) == 0
        assert json.loads(capsys.readouterr().out) == []
        assert pool.closed

    def test_slow_pool_creation_then_create(self, monkeypatch, capsys):
        pool = FakePool()

        async def create_pool(**kwargs):
            await asyncio.sleep(0.5)
            return pool

        monkeypatch.setattr(asyncpg, "create_pool", create_pool)

        assert main(["create", "https://crates.io", "--custom-id", "crate"]) == 0
        assert json.loads(capsys.readouterr().out)["id"] == "crate"
        assert "crate" in pool.rows

    def test_pool_creation_fails(self, monkeypatch, capsys):
        async def create_pool(**kwargs):
            raise OSError("connection refused")

        monkeypatch.setattr(asyncpg, "create_pool", create_pool)

        assert main(["list"]) == 1
        assert json.loads(capsys.readouterr().err) == {"message": "Something went wrong"}
