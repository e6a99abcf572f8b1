import asyncio

import pytest

from models.project import ProjectStatus
from services.import_service import ImportStatusEngine
from tests.conftest import FakeClock, RecordingProjectRepository


def build_engine(db, clock, **kwargs):
    repository = RecordingProjectRepository(db.session, clock=clock)
    engine = ImportStatusEngine(
        repository,
        clone_delay=1.0,
        setup_delay=2.0,
        ready_delay=2.0,
        sleep=clock.sleep,
        **kwargs,
    )
    return engine, repository


class TestImportSequence:

    @pytest.mark.asyncio
    async def test_walks_pending_to_ready_in_order(self, db, make_project):
        project = make_project("widget")
        assert project.status == ProjectStatus.PENDING.value
        assert project.result_url is None
        assert project.error_message is None

        clock = FakeClock()
        engine, repository = build_engine(db, clock)
        await engine.start_import(project)

        statuses = [status for status, _, _ in repository.writes]
        assert statuses == ["cloning", "setting_up", "ready"]
        assert clock.delays == [1.0, 2.0, 2.0]
        # chained: each write happens D1, D1+D2, D1+D2+D3 after start
        assert [at for _, _, at in repository.writes] == [1.0, 3.0, 5.0]

    @pytest.mark.asyncio
    async def test_result_url_only_set_on_ready(self, db, make_project):
        project = make_project("widget")
        clock = FakeClock()
        engine, repository = build_engine(db, clock)
        await engine.start_import(project)

        result_urls = [url for _, url, _ in repository.writes]
        assert result_urls[:2] == [None, None]
        assert result_urls[2] == "https://replit.com/@user/widget"

        stored = repository.get(project.id)
        assert stored.status == "ready"
        assert stored.result_url == "https://replit.com/@user/widget"
        assert stored.error_message is None

    @pytest.mark.asyncio
    async def test_updated_at_moves_on_every_write(self, db, make_project):
        project = make_project()
        engine, repository = build_engine(db, FakeClock())
        await engine.start_import(project)

        assert repository.get(project.id).updated_at >= project.updated_at

    @pytest.mark.asyncio
    async def test_imports_run_independently(self, db, make_project):
        first = make_project("first")
        second = make_project("second")
        engine, repository = build_engine(db, FakeClock())

        await asyncio.gather(engine.start_import(first), engine.start_import(second))

        assert repository.get(first.id).result_url.endswith("/first")
        assert repository.get(second.id).result_url.endswith("/second")
        assert engine.active_imports() == []


class TestMissingAndOverridden:

    @pytest.mark.asyncio
    async def test_delete_between_cloning_and_setting_up_stays_deleted(self, db, make_project, project_repository):
        project = make_project()

        def delete_after_cloning(call):
            if call == 2:
                assert project_repository.delete(project.id) is True

        clock = FakeClock(on_sleep=delete_after_cloning)
        engine, repository = build_engine(db, clock)
        await engine.start_import(project)

        assert [status for status, _, _ in repository.writes] == ["cloning"]
        assert project_repository.get(project.id) is None
        assert project_repository.list_by_owner(project.owner_id) == []

    @pytest.mark.asyncio
    async def test_update_of_missing_row_is_a_noop(self, project_repository):
        assert project_repository.update(12345, {"status": "ready"}) is None
        assert project_repository.get(12345) is None

    @pytest.mark.asyncio
    async def test_stops_when_status_was_overridden(self, db, make_project, project_repository):
        project = make_project()

        def override_after_cloning(call):
            if call == 2:
                project_repository.update(project.id, {"status": "failed", "error_message": "stopped by admin"})

        engine, repository = build_engine(db, FakeClock(on_sleep=override_after_cloning))
        await engine.start_import(project)

        stored = project_repository.get(project.id)
        assert stored.status == "failed"
        assert stored.error_message == "stopped by admin"
        assert stored.result_url is None

    @pytest.mark.asyncio
    async def test_resumes_when_moved_forward_by_hand(self, db, make_project, project_repository):
        project = make_project()

        def skip_cloning(call):
            if call == 1:
                project_repository.update(project.id, {"status": "cloning"})

        clock = FakeClock(on_sleep=skip_cloning)
        engine, repository = build_engine(db, clock)
        await engine.start_import(project)

        assert [status for status, _, _ in repository.writes] == ["setting_up", "ready"]
        assert clock.delays == [1.0, 2.0]
        stored = project_repository.get(project.id)
        assert stored.status == "ready"
        assert stored.result_url == "https://replit.com/@user/widget"

    @pytest.mark.asyncio
    async def test_resumes_when_moved_back_by_hand(self, db, make_project, project_repository):
        project = make_project()

        def restart_after_setting_up(call):
            if call == 3:
                project_repository.update(project.id, {"status": "pending"})

        engine, repository = build_engine(db, FakeClock(on_sleep=restart_after_setting_up))
        await engine.start_import(project)

        statuses = [status for status, _, _ in repository.writes]
        assert statuses == ["cloning", "setting_up", "cloning", "setting_up", "ready"]
        assert project_repository.get(project.id).status == "ready"


class TestFailurePath:

    @pytest.mark.asyncio
    async def test_failing_stage_marks_project_failed_and_stops(self, db, make_project):
        project = make_project()

        def install_dependencies(_project):
            raise RuntimeError("npm install exited with 1")

        clock = FakeClock()
        engine, repository = build_engine(
            db, clock, stage_hooks={ProjectStatus.SETTING_UP: install_dependencies}
        )
        await engine.start_import(project)

        stored = repository.get(project.id)
        assert stored.status == "failed"
        assert stored.error_message == "npm install exited with 1"
        assert stored.result_url is None
        assert [status for status, _, _ in repository.writes] == ["cloning", "failed"]
        # no sleep scheduled after the failure
        assert clock.delays == [1.0, 2.0]

    @pytest.mark.asyncio
    async def test_async_hooks_are_awaited(self, db, make_project):
        project = make_project()
        seen = []

        async def clone(p):
            seen.append((p.id, p.status))

        engine, _ = build_engine(db, FakeClock(), stage_hooks={ProjectStatus.CLONING: clone})
        await engine.start_import(project)

        assert seen == [(project.id, "pending")]


class TestTaskRegistry:

    @pytest.mark.asyncio
    async def test_cancel_stops_pending_chain(self, db, make_project, project_repository):
        project = make_project()
        gate = asyncio.Event()

        async def blocked_sleep(_delay):
            await gate.wait()

        engine = ImportStatusEngine(project_repository, sleep=blocked_sleep)
        task = engine.start_import(project)
        await asyncio.sleep(0)

        assert engine.active_imports() == [project.id]
        assert engine.cancel(project.id) is True
        with pytest.raises(asyncio.CancelledError):
            await task

        assert engine.cancel(project.id) is False
        assert project_repository.get(project.id).status == "pending"

    @pytest.mark.asyncio
    async def test_restart_while_running_returns_same_task(self, db, make_project, project_repository):
        project = make_project()
        gate = asyncio.Event()

        async def blocked_sleep(_delay):
            await gate.wait()

        engine = ImportStatusEngine(project_repository, sleep=blocked_sleep)
        first = engine.start_import(project)
        assert engine.start_import(project) is first

        await engine.shutdown()
        assert first.cancelled()
        assert engine.active_imports() == []

    @pytest.mark.asyncio
    async def test_start_import_returns_before_any_stage(self, db, make_project, project_repository):
        project = make_project()
        engine = ImportStatusEngine(project_repository, sleep=FakeClock().sleep)

        task = engine.start_import(project)
        assert project_repository.get(project.id).status == "pending"
        await task
        assert project_repository.get(project.id).status == "ready"
