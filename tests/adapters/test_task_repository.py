"""Tests for SqliteTaskRepository.

Uses real in-memory and temp-file stores with the full migration schema
applied, so the real SQL runs on both the batch and row-by-row delete paths.
"""

from __future__ import annotations

import asyncio
import sqlite3

import pytest

from conftest import make_task
from todolist.exceptions import (
    ConflictError,
    EntityNotFoundError,
    FetchFailedError,
    SaveFailedError,
)
from todolist.models import Task


def _raw_rows(stack) -> list[sqlite3.Row]:
    return stack.get_read_context().execute(
        "SELECT id, remote_id, version FROM tasks ORDER BY pk"
    ).fetchall()


async def _install_failing_trigger(stack, title: str = "boom") -> None:
    def work(connection):
        connection.execute(
            f"""CREATE TRIGGER fail_on_{title} BEFORE INSERT ON tasks
            WHEN NEW.title = '{title}'
            BEGIN SELECT RAISE(ABORT, 'induced failure'); END"""
        )

    await stack.run_write_task(work)


# ---------------------------------------------------------------------------
# Reads
# ---------------------------------------------------------------------------


class TestFetchAll:
    @pytest.mark.asyncio
    async def test_empty_store(self, repo):
        assert await repo.fetch_all() == []
        assert await repo.count() == 0

    @pytest.mark.asyncio
    async def test_newest_first(self, repo):
        await repo.create(make_task("a", "First", minutes=1))
        await repo.create(make_task("b", "Second", minutes=2))

        tasks = await repo.fetch_all()

        assert [t.id for t in tasks] == ["b", "a"]

    @pytest.mark.asyncio
    async def test_order_does_not_depend_on_insert_order(self, repo):
        for minutes in (5, 1, 9, 3, 7):
            await repo.create(make_task(f"t{minutes}", minutes=minutes))

        tasks = await repo.fetch_all()

        stamps = [t.created_at for t in tasks]
        assert stamps == sorted(stamps, reverse=True)

    @pytest.mark.asyncio
    async def test_equal_timestamps_keep_latest_insert_first(self, repo):
        await repo.save_bulk([make_task("a"), make_task("b"), make_task("c")])
        assert [t.id for t in await repo.fetch_all()] == ["c", "b", "a"]

    @pytest.mark.asyncio
    async def test_rows_with_absent_fields_get_defaults(self, repo, stack):
        await stack.run_write_task(
            lambda c: c.execute("INSERT INTO tasks (id) VALUES ('raw')")
        )

        [task] = await repo.fetch_all()

        assert task.id == "raw"
        assert task.title == ""
        assert task.description is None
        assert task.is_completed is False
        assert task.version == 1

    @pytest.mark.asyncio
    async def test_unreadable_timestamp_does_not_break_reads(self, repo, stack):
        await repo.create(make_task("a", "Buy milk"))
        await stack.run_write_task(
            lambda c: c.execute(
                "INSERT INTO tasks (id, title, created_at) VALUES ('x', 't', 'garbage')"
            )
        )

        tasks = await repo.fetch_all()

        assert {t.id for t in tasks} == {"a", "x"}
        assert (await repo.fetch_by_id("x")).title == "t"
        assert [t.id for t in await repo.search("t")] == ["x"]

    @pytest.mark.asyncio
    async def test_fetch_failure_is_wrapped(self, repo, stack):
        await stack.run_write_task(lambda c: c.execute("DROP TABLE tasks"))

        with pytest.raises(FetchFailedError) as exc_info:
            await repo.fetch_all()

        assert isinstance(exc_info.value.cause, sqlite3.Error)
        assert isinstance(exc_info.value.__cause__, sqlite3.Error)


class TestFetchById:
    @pytest.mark.asyncio
    async def test_found(self, repo):
        task = make_task("a", "Buy milk", "2 litres", is_completed=True)
        await repo.create(task)
        assert await repo.fetch_by_id("a") == task

    @pytest.mark.asyncio
    async def test_missing_returns_none(self, repo):
        assert await repo.fetch_by_id("nope") is None


class TestSearch:
    @pytest.mark.asyncio
    async def test_matches_title_or_description_ignoring_case(self, repo):
        await repo.create(make_task("a", "Buy milk", minutes=1))
        await repo.create(make_task("b", "Call mom", "about MILK", minutes=2))
        await repo.create(make_task("c", "Walk", minutes=3))

        tasks = await repo.search("MiLk")

        assert [t.id for t in tasks] == ["b", "a"]

    @pytest.mark.asyncio
    async def test_folds_non_ascii_text(self, repo):
        await repo.create(make_task("a", "Купить МОЛОКО"))
        assert [t.id for t in await repo.search("молоко")] == ["a"]

    @pytest.mark.asyncio
    async def test_no_match_is_empty(self, repo):
        await repo.create(make_task("a", "Buy milk"))
        assert await repo.search("bread") == []

    @pytest.mark.asyncio
    async def test_sql_wildcards_are_literal(self, repo):
        await repo.create(make_task("a", "100% done"))
        await repo.create(make_task("b", "Nothing here"))
        assert [t.id for t in await repo.search("%")] == ["a"]


# ---------------------------------------------------------------------------
# Writes
# ---------------------------------------------------------------------------


class TestCreate:
    @pytest.mark.asyncio
    async def test_create_is_readable_after_await(self, repo, stack):
        generation = stack.generation
        task = await repo.create(make_task("a", "Buy milk"))

        assert await repo.fetch_all() == [task]
        assert await repo.count() == 1
        assert stack.generation == generation + 1

    @pytest.mark.asyncio
    async def test_concurrent_creates_all_land(self, repo):
        await asyncio.gather(*(repo.create(make_task(f"t{n}", minutes=n)) for n in range(20)))
        assert await repo.count() == 20

    @pytest.mark.asyncio
    async def test_create_failure_is_wrapped(self, repo, stack):
        await _install_failing_trigger(stack)

        with pytest.raises(SaveFailedError):
            await repo.create(make_task("a", "boom"))

        assert await repo.count() == 0


class TestUpdate:
    @pytest.mark.asyncio
    async def test_updates_mutable_fields(self, repo):
        original = await repo.create(make_task("a", "Buy milk"))

        updated = await repo.update(
            original.model_copy(update={"title": "Buy bread", "is_completed": True})
        )

        assert updated.version == 2
        stored = await repo.fetch_by_id("a")
        assert stored == updated
        assert stored.created_at == original.created_at

    @pytest.mark.asyncio
    async def test_missing_entity(self, repo):
        with pytest.raises(EntityNotFoundError) as exc_info:
            await repo.update(make_task("ghost"))
        assert exc_info.value.task_id == "ghost"

    @pytest.mark.asyncio
    async def test_expected_version_matches(self, repo):
        task = await repo.create(make_task("a"))
        updated = await repo.update(task.toggled(), expected_version=1)
        assert updated.is_completed is True
        assert updated.version == 2

    @pytest.mark.asyncio
    async def test_stale_version_conflicts(self, repo):
        task = await repo.create(make_task("a", "Buy milk"))
        await repo.update(task.model_copy(update={"title": "Buy bread"}))

        with pytest.raises(ConflictError) as exc_info:
            await repo.update(task.toggled(), expected_version=task.version)

        assert exc_info.value.expected == 1
        assert exc_info.value.actual == 2
        stored = await repo.fetch_by_id("a")
        assert stored.title == "Buy bread"
        assert stored.is_completed is False

    @pytest.mark.asyncio
    async def test_duplicate_ids_are_all_updated(self, repo, stack):
        await repo.save_bulk([make_task("dup", "One"), make_task("dup", "Two")])

        await repo.update(make_task("dup", "Same"))

        titles = {
            row[0]
            for row in stack.get_read_context().execute("SELECT title FROM tasks").fetchall()
        }
        assert titles == {"Same"}


class TestDelete:
    @pytest.mark.asyncio
    async def test_delete(self, repo):
        await repo.create(make_task("a"))
        await repo.create(make_task("b", minutes=1))

        await repo.delete("a")

        assert [t.id for t in await repo.fetch_all()] == ["b"]

    @pytest.mark.asyncio
    async def test_delete_missing_is_a_no_op(self, repo):
        await repo.create(make_task("a"))
        await repo.delete("nope")
        assert await repo.count() == 1

    @pytest.mark.asyncio
    async def test_delete_removes_duplicates(self, repo):
        await repo.save_bulk([make_task("dup"), make_task("dup"), make_task("keep")])
        await repo.delete("dup")
        assert [t.id for t in await repo.fetch_all()] == ["keep"]

    @pytest.mark.asyncio
    async def test_delete_all(self, repo):
        await repo.save_bulk([make_task(f"t{n}", minutes=n) for n in range(5)])

        await repo.delete_all()

        assert await repo.count() == 0
        assert await repo.fetch_all() == []

    @pytest.mark.asyncio
    async def test_delete_all_on_empty_store(self, repo):
        await repo.delete_all()
        assert await repo.count() == 0


class TestSaveBulk:
    @pytest.mark.asyncio
    async def test_saves_everything(self, repo, stack):
        tasks = [make_task(f"t{n}", minutes=n) for n in range(3)]

        await repo.save_bulk(tasks, remote_ids=[10, 11, 12])

        assert await repo.count() == 3
        assert [row["remote_id"] for row in _raw_rows(stack)] == [10, 11, 12]

    @pytest.mark.asyncio
    async def test_without_remote_ids(self, repo, stack):
        await repo.save_bulk([make_task("a")])
        assert _raw_rows(stack)[0]["remote_id"] is None

    @pytest.mark.asyncio
    async def test_empty_batch(self, repo):
        await repo.save_bulk([])
        assert await repo.count() == 0

    @pytest.mark.asyncio
    async def test_remote_id_count_must_match(self, repo):
        with pytest.raises(ValueError):
            await repo.save_bulk([make_task("a")], remote_ids=[1, 2])
        assert await repo.count() == 0

    @pytest.mark.asyncio
    async def test_is_all_or_nothing(self, repo, stack):
        await repo.create(make_task("existing"))
        await _install_failing_trigger(stack)
        batch = [make_task("a", "fine"), make_task("b", "boom"), make_task("c", "fine")]

        with pytest.raises(SaveFailedError):
            await repo.save_bulk(batch)

        assert [t.id for t in await repo.fetch_all()] == ["existing"]


@pytest.mark.asyncio
async def test_scenario_create_toggle_delete(repo):
    created: Task = await repo.create(make_task("a", "Buy milk"))
    toggled = await repo.update(created.toggled(), expected_version=created.version)
    assert (await repo.fetch_by_id("a")).is_completed is True

    await repo.delete(toggled.id)
    assert await repo.fetch_all() == []
