"""
Integration tests against the mock project-store API.
"""
import pytest

from codecloud.app.cloud_application import CloudApplication
from codecloud.auth.identity import StaticIdentityProvider
from codecloud.codec.bundle_codec import pack_bundle
from codecloud.config.app_config import ApiConfig, AppConfig, WorkspaceConfig
from codecloud.errors import ApiError, NetworkFailure
from codecloud.sync.project_api_client import ProjectApiClient

from conftest import SAMPLE_FILES, SAMPLE_META, make_source_payload


@pytest.fixture
def client(mock_api_server):
    return ProjectApiClient(ApiConfig(base_url=mock_api_server.base_url))


class TestProjectApiRoundTrips:
    """CRUD round trips through the real HTTP stack."""

    @pytest.mark.integration
    def test_health(self, client):
        health = client.check_health()
        assert health.status == "healthy"
        assert health.timestamp

    @pytest.mark.integration
    def test_save_then_list(self, client):
        saved = client.save_project("u1", "Foo", "QQ==")

        assert saved.success is True
        assert saved.id == 1
        assert saved.created_at

        projects = client.get_user_projects("u1")
        assert len(projects) == 1
        assert projects[0].id == 1
        assert projects[0].project_name == "Foo"

    @pytest.mark.integration
    @pytest.mark.parametrize("user_id, name, data", [
        ("u1", "Foo", "QQ=="),
        ("user with spaces", "Ünïcode név", make_source_payload()),
        ("a/b?c&d", "x", "SGVsbG8="),
    ])
    def test_save_then_get_returns_inputs(self, client, user_id, name, data):
        saved = client.save_project(user_id, name, data)

        record = client.get_project(saved.id, user_id)

        assert record.user_id == user_id
        assert record.project_name == name
        assert record.project_data == data

    @pytest.mark.integration
    def test_list_only_returns_own_projects(self, client):
        client.save_project("u1", "Mine", "QQ==")
        client.save_project("u2", "Theirs", "QQ==")

        assert [p.project_name for p in client.get_user_projects("u1")] == ["Mine"]

    @pytest.mark.integration
    def test_update_name_only_keeps_data(self, client):
        saved = client.save_project("u1", "Foo", "QQ==")

        updated = client.update_project(saved.id, "u1", project_name="Bar")

        assert updated.success is True
        record = client.get_project(saved.id, "u1")
        assert record.project_name == "Bar"
        assert record.project_data == "QQ=="

    @pytest.mark.integration
    def test_update_data_only_keeps_name(self, client):
        saved = client.save_project("u1", "Foo", "QQ==")

        client.update_project(saved.id, "u1", project_data="Qg==")

        record = client.get_project(saved.id, "u1")
        assert record.project_name == "Foo"
        assert record.project_data == "Qg=="

    @pytest.mark.integration
    def test_delete_then_get_fails(self, client):
        saved = client.save_project("u1", "Foo", "QQ==")

        deleted = client.delete_project(saved.id, "u1")
        assert deleted.success is True
        assert deleted.id == saved.id

        with pytest.raises(ApiError) as excinfo:
            client.get_project(saved.id, "u1")

        assert excinfo.value.status == 404
        assert str(excinfo.value) == "Project not found"

    @pytest.mark.integration
    def test_other_user_cannot_read(self, client):
        saved = client.save_project("u1", "Foo", "QQ==")

        with pytest.raises(ApiError):
            client.get_project(saved.id, "u2")

    @pytest.mark.integration
    def test_missing_fields_reports_server_message(self, client):
        with pytest.raises(ApiError) as excinfo:
            client.save_project("u1", "", "")

        assert excinfo.value.status == 400
        assert "Missing required fields" in str(excinfo.value)

    @pytest.mark.integration
    def test_unreachable_server(self):
        client = ProjectApiClient(ApiConfig(base_url="http://127.0.0.1:9", timeout=2))

        with pytest.raises(NetworkFailure):
            client.check_health()


class TestCloudApplicationIntegration:
    """Save and sync through the application facade."""

    @pytest.fixture
    def app_factory(self, mock_api_server, mock_notifier):
        apps = []

        def factory(user_id="u1"):
            config = AppConfig(
                api=ApiConfig(base_url=mock_api_server.base_url),
                workspace=WorkspaceConfig(path=":memory:"),
                user_id=user_id
            )
            app = CloudApplication(config, identity=StaticIdentityProvider(user_id), notifier=mock_notifier)
            apps.append(app)
            return app

        yield factory
        for app in apps:
            app.close()

    @pytest.mark.integration
    def test_save_on_one_machine_sync_on_another(self, app_factory):
        laptop = app_factory()
        desktop = app_factory()

        laptop.save_bundle("Game", pack_bundle(SAMPLE_FILES, SAMPLE_META))
        laptop.save_bundle("Music", pack_bundle(SAMPLE_FILES, SAMPLE_META))

        report = desktop.sync_from_cloud()

        assert report.imported == 2
        assert sorted(h.name for h in desktop.workspace.list_headers()) == ["Game", "Music"]

        again = desktop.sync_from_cloud()
        assert again.imported == 0
        assert again.skipped == 2
        assert len(desktop.workspace.list_headers()) == 2

    @pytest.mark.integration
    def test_push_local_project_round_trip(self, app_factory):
        source = app_factory()
        source.import_bundle("Local", pack_bundle(SAMPLE_FILES, SAMPLE_META))
        source.save_local_project("Local")

        target = app_factory()
        target.sync_from_cloud()

        header = target.workspace.get_header_by_name("Local")
        assert header is not None
        assert header.target_version == "6.0.18"
        assert target.workspace.get_files(header.id) == SAMPLE_FILES

    @pytest.mark.integration
    def test_corrupt_cloud_project_does_not_block_sync(self, app_factory, mock_api_server):
        app = app_factory()
        mock_api_server.store.create("u1", "Broken", "QQ==")
        app.save_bundle("Fine", pack_bundle(SAMPLE_FILES, SAMPLE_META))

        report = app.sync_from_cloud()

        assert report.total == 2
        assert report.imported == 1
        assert report.failed == 1
