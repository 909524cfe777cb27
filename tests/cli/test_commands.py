"""Tests for the intentsql command-line interface."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner

from intentsql.cache import QueryCache
from intentsql.cli import cli
from intentsql.queries import GeneratedQuery

SCHEMA = """
export const users = pgTable("users", {
  id: uuid("id").primaryKey(),
  email: text("email").notNull().unique(),
  createdAt: timestamp("created_at").defaultNow(),
});
"""

QUERIES = """
export async function activeUsers(db: Db): Promise<User[]> {
  return db.llm("Get active users").all();
}

export const byId = (id: string) => llm`Get user with id ${id}`;
"""


@pytest.fixture(autouse=True)
def no_global_config(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setattr(
        "intentsql.config.loader.GLOBAL_CONFIG_PATH", tmp_path / "global" / "config.yaml"
    )


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def project(tmp_path: Path) -> Path:
    root = tmp_path / "app"
    (root / "src" / "db").mkdir(parents=True)
    (root / "src" / "db" / "schema.ts").write_text(SCHEMA)
    (root / "src" / "users.ts").write_text(QUERIES)
    (root / ".intentsql").mkdir()
    (root / ".intentsql" / "config.yaml").write_text("cache:\n  directory: .cache\n")
    return root


def _seed_cache(project: Path, count: int) -> QueryCache:
    cache = QueryCache(project / ".cache")
    for index in range(count):
        query = GeneratedQuery(id=f"q{index}", intent=f"Query {index}", sql="SELECT 1")
        cache.set(query.id, query.intent, query)
    return cache


class TestTopLevel:
    def test_version(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert "0.1.0" in result.output

    def test_help_lists_commands(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        for command in ("schema", "collect", "plan", "cache"):
            assert command in result.output


class TestSchemaCommand:
    def test_given_project_when_json_then_tables_on_stdout(
        self, runner: CliRunner, project: Path
    ) -> None:
        # When
        result = runner.invoke(cli, ["schema", str(project), "--json"])

        # Then
        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)
        (users,) = data["tables"]
        assert users["name"] == "users"
        assert [c["db_name"] for c in users["columns"]] == ["id", "email", "created_at"]

    def test_given_project_when_compact_then_one_line_per_table(
        self, runner: CliRunner, project: Path
    ) -> None:
        result = runner.invoke(cli, ["schema", str(project), "--compact"])
        assert result.exit_code == 0, result.output
        assert "users(id, email, created_at)" in result.stdout

    def test_given_project_when_default_then_prompt_format(
        self, runner: CliRunner, project: Path
    ) -> None:
        result = runner.invoke(cli, ["schema", str(project)])
        assert result.exit_code == 0, result.output
        assert "Table: users" in result.stdout
        assert "  - email: text NOT NULL [UNIQUE]" in result.stdout

    def test_given_missing_schema_when_run_then_exit_code_one(
        self, runner: CliRunner, tmp_path: Path
    ) -> None:
        empty = tmp_path / "empty"
        empty.mkdir()
        result = runner.invoke(cli, ["schema", str(empty)])
        assert result.exit_code == 1

    def test_given_invalid_config_when_run_then_exit_code_one(
        self, runner: CliRunner, project: Path
    ) -> None:
        (project / ".intentsql" / "config.yaml").write_text("paths: [unclosed\n")
        result = runner.invoke(cli, ["schema", str(project)])
        assert result.exit_code == 1


class TestCollectCommand:
    def test_given_project_when_json_then_query_sites(
        self, runner: CliRunner, project: Path
    ) -> None:
        result = runner.invoke(cli, ["collect", str(project), "--json"])

        assert result.exit_code == 0, result.output
        data: list[dict[str, Any]] = json.loads(result.stdout)
        assert [q["intent"] for q in data] == ["Get active users", "Get user with id ${0}"]
        assert data[0]["method_info"] == {"method": "all", "expects_multiple": True}
        assert data[0]["return_type"] == "User[]"
        assert data[1]["params"] == {"param0": {"$expr": "id"}}
        assert data[1]["location"]["file"] == "src/users.ts"

    def test_given_project_when_table_then_exit_zero(
        self, runner: CliRunner, project: Path
    ) -> None:
        result = runner.invoke(cli, ["collect", str(project)])
        assert result.exit_code == 0, result.output

    def test_given_no_sources_when_json_then_empty_list(
        self, runner: CliRunner, tmp_path: Path
    ) -> None:
        result = runner.invoke(cli, ["collect", str(tmp_path), "--json"])
        assert result.exit_code == 0, result.output
        assert json.loads(result.stdout) == []


class TestPlanCommand:
    def test_given_no_manifest_when_planned_then_all_new(
        self, runner: CliRunner, project: Path
    ) -> None:
        result = runner.invoke(cli, ["plan", str(project)])

        assert result.exit_code == 0, result.output
        lines = result.stdout.splitlines()
        assert lines[0] == "0 unchanged, 2 new"
        assert sum(1 for line in lines if line.lstrip().startswith("new")) == 2

    def test_given_corrupt_manifest_when_planned_then_exit_code_one(
        self, runner: CliRunner, project: Path
    ) -> None:
        (project / ".intentsql" / "generated.json").write_text("{broken")
        result = runner.invoke(cli, ["plan", str(project)])
        assert result.exit_code == 1


class TestCacheCommands:
    def test_stats(self, runner: CliRunner, project: Path) -> None:
        _seed_cache(project, 2)
        result = runner.invoke(cli, ["cache", "stats", str(project)])
        assert result.exit_code == 0, result.output
        assert result.stdout.startswith("2 entries, ")
        assert str(project / ".cache") in result.stdout

    def test_clear_with_yes(self, runner: CliRunner, project: Path) -> None:
        cache = _seed_cache(project, 3)
        result = runner.invoke(cli, ["cache", "clear", str(project), "--yes"])
        assert result.exit_code == 0, result.output
        assert cache.stats().count == 0

    def test_clear_declined(
        self, runner: CliRunner, project: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        cache = _seed_cache(project, 1)

        class Declined:
            def ask(self) -> bool:
                return False

        monkeypatch.setattr("intentsql.cli.cache.questionary.confirm", lambda *_, **__: Declined())

        result = runner.invoke(cli, ["cache", "clear", str(project)])

        assert result.exit_code == 0, result.output
        assert cache.stats().count == 1

    def test_clear_empty(self, runner: CliRunner, project: Path) -> None:
        result = runner.invoke(cli, ["cache", "clear", str(project), "--yes"])
        assert result.exit_code == 0, result.output

    def test_prune_removes_unreadable(self, runner: CliRunner, project: Path) -> None:
        cache = _seed_cache(project, 1)
        (project / ".cache" / "broken.json").write_text("not json")

        result = runner.invoke(cli, ["cache", "prune", str(project)])

        assert result.exit_code == 0, result.output
        assert cache.stats().count == 1
