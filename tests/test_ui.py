"""Tests for the Textual TUI, driven through Textual's pilot."""
import pytest

from docchat.config import AppConfig
from docchat.ui import ChatHistoryWidget, DocChatApp, DocumentsList, SavedChatsList
from docchat.ui.config import LogLevel
from docchat.ui.widgets import ChatInputBar


@pytest.fixture(autouse=True)
def steady_connectivity(connectivity, monkeypatch):
    """Keep the periodic probe from touching the network."""

    async def _probe() -> bool:
        return connectivity.online

    monkeypatch.setattr(connectivity, "probe", _probe)
    return connectivity


@pytest.fixture
def app_config(tmp_path) -> AppConfig:
    return AppConfig(store="memory", data_dir=tmp_path, connectivity_host="127.0.0.1")


class TestLogLevel:
    @pytest.mark.parametrize("name,level", [
        ("debug", LogLevel.DEBUG),
        ("TRACE", LogLevel.DEBUG),
        ("Info", LogLevel.INFO),
        ("success", LogLevel.INFO),
        ("warning", LogLevel.WARNING),
        ("critical", LogLevel.ERROR),
        ("nonsense", LogLevel.DEBUG),
    ])
    def test_from_string(self, name: str, level: int):
        assert LogLevel.from_string(name) == level


class TestDocChatApp:
    """Pilot tests for DocChatApp."""

    async def test_empty_chat_shows_usage_hints(self, make_controller, app_config):
        controller, _ = make_controller([])
        app = DocChatApp(controller, app_config)

        async with app.run_test() as pilot:
            await pilot.pause()
            chat = app.query_one("#chat-history", ChatHistoryWidget)
            assert chat.query(".usage-hint")
            assert not app.query_one("#title-box").has_class("-visible")

    async def test_send_flow(self, make_controller, app_config):
        """Test that sending a question locks the input and saves the chat."""
        controller, factory = make_controller(["Tuesday."])
        controller.state.documents.add_text("The meeting is on Tuesday.")
        app = DocChatApp(controller, app_config)

        async with app.run_test() as pilot:
            await pilot.pause()
            app.post_message(ChatInputBar.Submitted("When is the meeting?"))
            await app.workers.wait_for_complete()
            await pilot.pause()

            assert [m.content for m in controller.state.messages] == [
                "When is the meeting?",
                "Tuesday.",
            ]
            assert len(app.query_one("#saved-chats", SavedChatsList).children) == 1
            assert app.query_one("#title-box").has_class("-visible")
            assert app.query_one("#chat-input-bar", ChatInputBar).text == ""
            assert len(factory.provider.requests) == 1

    async def test_new_chat_resets(self, make_controller, app_config):
        controller, _ = make_controller([])
        controller.state.documents.add_text("notes")
        app = DocChatApp(controller, app_config)

        async with app.run_test() as pilot:
            await pilot.pause()
            assert len(app.query_one("#documents", DocumentsList).children) == 1

            await app.run_action("new_chat")
            await pilot.pause()

            assert len(controller.state.documents) == 0
            assert len(app.query_one("#documents", DocumentsList).children) == 0
