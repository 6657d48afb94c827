"""
Tests for CloudApplication class.
"""
from unittest.mock import Mock

import pytest

from codecloud.app.cloud_application import CloudApplication, decode_project_data
from codecloud.auth.identity import StaticIdentityProvider, StoredIdentityProvider
from codecloud.codec.bundle_codec import decode_base64, pack_bundle
from codecloud.errors import ApiError, CloudStoreError
from codecloud.importer.project_importer import decode_project
from codecloud.models.project_record import DeleteResult, SaveResult, UpdateResult
from codecloud.models.workspace_header import CloudProjectData, Header
from codecloud.notifications import LoggingNotifier
from codecloud.sync.local_workspace import LocalWorkspace

from conftest import SAMPLE_FILES, SAMPLE_META


@pytest.fixture
def app(test_app_config, mock_notifier, workspace):
    application = CloudApplication(test_app_config, notifier=mock_notifier, workspace=workspace)
    application.client = Mock()
    return application


class TestCloudApplicationInit:
    """Test cases for CloudApplication wiring."""

    @pytest.mark.unit
    def test_configured_user_id(self, test_app_config):
        app = CloudApplication(test_app_config)
        assert isinstance(app.identity, StaticIdentityProvider)
        assert app.user_id == "u1"
        assert isinstance(app.notifier, LoggingNotifier)
        assert isinstance(app.workspace, LocalWorkspace)
        app.close()

    @pytest.mark.unit
    def test_stored_identity_without_user_id(self, test_app_config):
        test_app_config.user_id = None
        app = CloudApplication(test_app_config)
        assert isinstance(app.identity, StoredIdentityProvider)
        app.close()

    @pytest.mark.unit
    def test_client_uses_configured_base_url(self, test_app_config):
        app = CloudApplication(test_app_config)
        assert app.client.base_url == "http://test.example.com"
        assert app.importer.target_id == "microbit"
        app.close()

    @pytest.mark.unit
    def test_close_leaves_injected_workspace_open(self, test_app_config, workspace):
        app = CloudApplication(test_app_config, workspace=workspace)
        app.close()
        assert workspace.list_headers() == []


class TestSaveBundle:
    """Test cases for saving bundles."""

    @pytest.mark.unit
    def test_save_encodes_and_notifies(self, app, mock_notifier):
        app.client.save_project.return_value = SaveResult(success=True, id=4, created_at="t")

        result = app.save_bundle("Foo", b"\x5d\x00\x01")

        user_id, name, data = app.client.save_project.call_args[0]
        assert (user_id, name) == ("u1", "Foo")
        assert decode_base64(data) == b"\x5d\x00\x01"
        assert result.id == 4
        mock_notifier.info.assert_called_once_with("Project 'Foo' saved to cloud!")

    @pytest.mark.unit
    def test_save_failure_notifies_and_raises(self, app, mock_notifier):
        app.client.save_project.side_effect = ApiError("quota exceeded", status=413)

        with pytest.raises(ApiError):
            app.save_bundle("Foo", b"data")

        mock_notifier.error.assert_called_once_with("Failed to save 'Foo': quota exceeded")
        mock_notifier.info.assert_not_called()

    @pytest.mark.unit
    def test_save_local_project_packs_files(self, app, workspace):
        app.import_bundle("Foo", pack_bundle(SAMPLE_FILES, SAMPLE_META))
        app.client.save_project.return_value = SaveResult(success=True, id=1)

        app.save_local_project("Foo")

        data = app.client.save_project.call_args[0][2]
        project = decode_project(CloudProjectData("Foo", data))
        assert project.file_map == SAMPLE_FILES
        assert project.header_metadata["targetVersions"] == {"target": "6.0.18"}

    @pytest.mark.unit
    def test_save_local_project_from_injected_store(self, test_app_config, mock_notifier):
        header = Header(
            id="h1", name="Foo", target="microbit", editor="tsprj",
            target_version="6.0.18", meta={}, pub_id=""
        )
        store = Mock()
        store.get_header_by_name = Mock(return_value=header)
        store.get_files = Mock(return_value=SAMPLE_FILES)
        app = CloudApplication(test_app_config, notifier=mock_notifier, workspace=store)
        app.client = Mock()
        app.client.save_project.return_value = SaveResult(success=True, id=1)

        app.save_local_project("Foo")

        store.get_header_by_name.assert_called_once_with("Foo")
        store.get_files.assert_called_once_with("h1")
        data = app.client.save_project.call_args[0][2]
        assert decode_project(CloudProjectData("Foo", data)).file_map == SAMPLE_FILES

    @pytest.mark.unit
    def test_save_unknown_local_project(self, app, mock_notifier):
        with pytest.raises(CloudStoreError):
            app.save_local_project("Nope")

        app.client.save_project.assert_not_called()
        mock_notifier.error.assert_called_once()


class TestUpdateAndDelete:
    """Test cases for update and delete operations."""

    @pytest.mark.unit
    def test_update_name_only(self, app, mock_notifier):
        app.client.update_project.return_value = UpdateResult(success=True, id=2, updated_at="t")

        app.update_project(2, project_name="Bar")

        app.client.update_project.assert_called_once_with(2, "u1", project_name="Bar", project_data=None)
        mock_notifier.info.assert_called_once()

    @pytest.mark.unit
    def test_update_data_is_encoded(self, app):
        app.client.update_project.return_value = UpdateResult(success=True, id=2)

        app.update_project(2, project_data=b"A")

        assert app.client.update_project.call_args[1]["project_data"] == "QQ=="

    @pytest.mark.unit
    def test_update_failure(self, app, mock_notifier):
        app.client.update_project.side_effect = ApiError("Project not found", status=404)

        with pytest.raises(ApiError):
            app.update_project(2, project_name="Bar")

        mock_notifier.error.assert_called_once_with("Failed to update project 2: Project not found")

    @pytest.mark.unit
    def test_delete(self, app, mock_notifier):
        app.client.delete_project.return_value = DeleteResult(success=True, id=2)

        result = app.delete_project(2)

        app.client.delete_project.assert_called_once_with(2, "u1")
        assert result.id == 2
        mock_notifier.info.assert_called_once_with("Project 2 deleted from cloud")

    @pytest.mark.unit
    def test_delete_failure(self, app, mock_notifier):
        app.client.delete_project.side_effect = ApiError("Project not found", status=404)

        with pytest.raises(ApiError):
            app.delete_project(2)

        mock_notifier.error.assert_called_once()


class TestImportBundle:
    """Test cases for importing local bundle files."""

    @pytest.mark.unit
    def test_import_bundle_installs(self, app, workspace):
        assert app.import_bundle("Foo", pack_bundle(SAMPLE_FILES, SAMPLE_META)) is True
        assert [h.name for h in workspace.list_headers()] == ["Foo"]

    @pytest.mark.unit
    def test_import_bundle_twice_skips(self, app, workspace):
        app.import_bundle("Foo", pack_bundle(SAMPLE_FILES, SAMPLE_META))
        assert app.import_bundle("Foo", pack_bundle(SAMPLE_FILES, SAMPLE_META)) is False


class TestDecodeProjectData:

    @pytest.mark.unit
    def test_decode_project_data(self):
        assert decode_project_data("QQ==") == b"A"
