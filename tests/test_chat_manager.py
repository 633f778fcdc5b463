"""Tests for the conversation controller."""

import json
from unittest.mock import patch

import pytest

from calmcompanion.core.ai_interface import CompletionClient
from calmcompanion.core.chat_manager import ChatManager
from calmcompanion.core.safety import CRISIS_RESPONSE
from calmcompanion.models import APIConfig, ChatMessage, GREETING, Tone
from calmcompanion.utils.file_manager import SLOT_MESSAGES, SLOT_PROFILE, SLOT_SETTINGS

from .conftest import ScriptedClient


def reload(store, client=None):
    """A second controller over the same storage, as after an app restart."""
    return ChatManager(store=store, client=client or ScriptedClient())


class TestFirstRun:
    def test_starts_with_greeting_and_defaults(self, manager):
        assert [m.content for m in manager.messages] == [GREETING]
        assert manager.profile.goals == ["Reduce stress"]
        assert manager.settings == APIConfig()
        assert manager.mood == 5
        assert manager.show_crisis is False

    def test_corrupt_storage_falls_back(self, store, client):
        store.save(SLOT_MESSAGES, {"not": "a list"})
        store.save(SLOT_PROFILE, "Sam")
        store.save(SLOT_SETTINGS, [1, 2])
        manager = ChatManager(store=store, client=client)
        assert len(manager.messages) == 1
        assert manager.profile.name == ""
        assert manager.settings == APIConfig()

    def test_non_finite_numbers_in_storage_do_not_crash(self, store, client):
        store.path_for(SLOT_SETTINGS).parent.mkdir(parents=True, exist_ok=True)
        store.path_for(SLOT_SETTINGS).write_text(
            '{"max_tokens": 1e999, "temperature": NaN, "useProxy": false}', encoding="utf-8"
        )
        store.path_for(SLOT_MESSAGES).write_text(
            '[{"role": "user", "content": "hi", "ts": 1, "moodAtSend": Infinity}]', encoding="utf-8"
        )

        manager = ChatManager(store=store, client=client)

        assert manager.settings.use_proxy is False
        assert 1 <= manager.settings.max_tokens <= 4096
        assert manager.settings.temperature == 0.0
        assert [m.content for m in manager.messages] == [GREETING]


class TestSendMessage:
    @pytest.mark.parametrize("text", ["", "   ", "\n\t"])
    def test_blank_input_is_a_no_op(self, manager, client, text):
        assert manager.send_message(text) is None
        assert len(manager.messages) == 1
        assert client.calls == []

    def test_normal_send_appends_user_and_reply(self, manager, client):
        reply = manager.send_message("  I had a rough day  ", mood=3)

        assert reply.role == "assistant"
        assert reply.content == "Thanks for sharing."
        user = manager.messages[-2]
        assert user.role == "user"
        assert user.content == "I had a rough day"
        assert user.mood_at_send == 3
        assert manager.show_crisis is False
        assert manager.loading is False

    def test_client_receives_prompt_and_full_history(self, manager, client):
        manager.update_profile(name="Sam")
        manager.send_message("hello")

        call = client.calls[0]
        assert "name=Sam" in call["system_prompt"]
        assert [m.content for m in call["history"]] == [GREETING, "hello"]
        assert call["settings"] is manager.settings

    def test_mood_defaults_to_current_value(self, manager):
        manager.set_mood(8)
        manager.send_message("ok")
        assert manager.messages[-2].mood_at_send == 8

    def test_crisis_skips_client(self, manager, client):
        reply = manager.send_message("I want to kill myself")

        assert client.calls == []
        assert reply.content == CRISIS_RESPONSE
        assert manager.show_crisis is True
        assert len(manager.messages) == 3

    def test_crisis_flag_clears_on_next_normal_message(self, manager):
        manager.send_message("thinking about suicide")
        manager.send_message("thanks, a bit better now")
        assert manager.show_crisis is False

    def test_failed_call_still_completes_the_turn(self, store, failing_client):
        manager = ChatManager(store=store, client=failing_client)
        before = len(manager.messages)

        reply = manager.send_message("hello?")

        assert len(manager.messages) == before + 2
        assert reply.content
        assert "(Proxy) Error: Proxy error 503" in reply.content

    def test_unexpected_client_error_still_completes_the_turn(self, store):
        manager = ChatManager(store=store, client=CompletionClient(direct_url="https://groq.test/v1"))
        manager.update_settings(use_proxy=False, api_key="gsk_’key")
        before = len(manager.messages)
        header_error = UnicodeEncodeError("latin-1", "gsk_’key", 4, 5, "ordinal not in range(256)")

        with patch("calmcompanion.core.ai_interface.requests.post", side_effect=header_error):
            reply = manager.send_message("hello?")

        assert len(manager.messages) == before + 2
        assert manager.loading is False
        assert "(Direct) Error:" in reply.content
        assert len(reload(store).messages) == before + 2

    def test_reply_timestamp_is_not_before_user_message(self, manager):
        manager.send_message("hi")
        assert manager.messages[-1].ts >= manager.messages[-2].ts

    def test_history_is_persisted(self, manager, store):
        manager.send_message("remember me")
        restored = reload(store)
        assert [m.to_dict() for m in restored.messages] == [m.to_dict() for m in manager.messages]

    def test_user_message_persisted_before_reply(self, store):
        seen = []

        class PeekingClient(ScriptedClient):
            def complete(self, history, system_prompt, settings):
                seen.append(store.load(SLOT_MESSAGES))
                return super().complete(history, system_prompt, settings)

        manager = ChatManager(store=store, client=PeekingClient())
        manager.send_message("first")
        assert seen[0][-1]["content"] == "first"

    def test_no_send_while_loading(self, manager, client):
        manager.loading = True
        assert manager.send_message("hello") is None
        assert client.calls == []

    def test_on_change_hook(self, store, client):
        changes = []
        manager = ChatManager(store=store, client=client, on_change=changes.append)
        manager.send_message("hi")
        assert changes == [SLOT_MESSAGES, SLOT_MESSAGES]


class TestResetHistory:
    def test_reset_leaves_only_greeting(self, manager):
        for text in ("one", "two", "three"):
            manager.send_message(text)

        assert manager.reset_history(lambda: True) is True
        assert len(manager.messages) == 1
        assert manager.messages[0].content == GREETING
        assert manager.messages[0].role == "assistant"

    def test_declined_confirmation_changes_nothing(self, manager):
        manager.send_message("keep this")
        assert manager.reset_history(lambda: False) is False
        assert len(manager.messages) == 3

    def test_reset_is_persisted(self, manager, store):
        manager.send_message("gone soon")
        manager.reset_history(lambda: True)
        assert len(reload(store).messages) == 1


class TestProfileAndSettings:
    def test_update_profile_persists(self, manager, store):
        manager.update_profile(name="Sam", pronouns="they/them", tone="Direct")
        restored = reload(store)
        assert restored.profile.name == "Sam"
        assert restored.profile.pronouns == "they/them"
        assert restored.profile.preferences.tone is Tone.DIRECT

    def test_goals_from_text(self, manager):
        manager.set_goals_from_text("sleep, focus , ,move more")
        assert manager.profile.goals == ["sleep", "focus", "move more"]

    def test_update_settings_clamps_and_persists(self, manager, store):
        manager.update_settings(temperature=9, use_proxy=False, api_key="gsk_x")
        assert manager.settings.temperature == 2.0
        restored = reload(store)
        assert restored.settings.use_proxy is False
        assert restored.settings.api_key == "gsk_x"

    def test_set_mood_clamps(self, manager):
        assert manager.set_mood(0) == 1
        assert manager.set_mood(11) == 10


class TestExportImport:
    def test_export_redacts_key(self, manager):
        manager.update_settings(api_key="gsk_secret")
        exported = manager.export_all()
        assert exported["settings"]["apiKey"] == "***stored locally***"
        assert "gsk_secret" not in manager.export_json()

    def test_round_trip(self, manager, store, tmp_path):
        manager.update_profile(name="Sam", age="29", goals=["Sleep"], depth="In-depth")
        manager.update_settings(api_key="gsk_secret", temperature=1.1)
        manager.send_message("hello", mood=6)
        path = manager.export_to_file(tmp_path / "exports")
        assert path.name.startswith("therapy-data-")

        other = ChatManager(store=type(store)(root_dir=tmp_path / "other"), client=ScriptedClient())
        other.update_settings(api_key="gsk_other")
        result = other.import_file(path)

        assert result.ok
        assert other.profile == manager.profile
        assert [m.to_dict() for m in other.messages] == [m.to_dict() for m in manager.messages]
        assert other.settings.api_key == ""
        assert other.settings.temperature == 1.1

    def test_import_missing_ts_gets_now(self, manager):
        blob = json.dumps({"messages": [{"role": "user", "content": "hi"}]})
        assert manager.import_all(blob).ok
        assert manager.messages[0].ts > 0

    def test_import_settings_merge_over_defaults(self, manager):
        manager.update_settings(max_tokens=100)
        manager.import_all(json.dumps({"settings": {"model": "llama-3.1-8b-instant", "apiKey": "leak"}}))
        assert manager.settings.model == "llama-3.1-8b-instant"
        assert manager.settings.max_tokens == 800
        assert manager.settings.api_key == ""

    def test_partial_import_keeps_other_state(self, manager):
        manager.send_message("keep me")
        manager.import_all(json.dumps({"profile": {"name": "New"}}))
        assert manager.profile.name == "New"
        assert manager.messages[-2].content == "keep me"

    @pytest.mark.parametrize("blob", [
        "not json at all",
        "[1, 2, 3]",
        '"just a string"',
        json.dumps({"profile": {"name": "X"}, "messages": [{"role": "robot", "content": "?"}]}),
        json.dumps({"profile": "Sam"}),
        json.dumps({"settings": ["bad"]}),
        '{"messages": [{"role": "user", "content": "hi", "moodAtSend": Infinity}]}',
        '{"messages": [{"role": "user", "content": "hi", "moodAtSend": 1e999}]}',
        '{"profile": {"name": "X"}, "messages": [{"role": "user", "content": "hi", "moodAtSend": NaN}]}',
    ])
    def test_bad_import_leaves_state_untouched(self, manager, store, blob):
        manager.update_profile(name="Original")
        manager.send_message("before import")
        before_state = manager.export_all()
        before_files = store.snapshot()

        result = manager.import_all(blob)

        assert result.ok is False
        assert result.message.startswith("Failed to import data")
        assert manager.export_all() == before_state
        assert store.snapshot() == before_files

    def test_non_finite_settings_import_is_clamped(self, manager):
        result = manager.import_all('{"settings": {"max_tokens": Infinity, "top_p": -1e999, "useProxy": false}}')

        assert result.ok is True
        assert manager.settings.use_proxy is False
        assert 1 <= manager.settings.max_tokens <= 4096
        assert manager.settings.top_p == 0.0
        assert reload(manager.store).settings == manager.settings

    def test_non_numeric_ts_is_imported_as_now(self, manager):
        blob = json.dumps({"messages": [
            {"role": "assistant", "content": "Hi", "ts": 5},
            {"role": "user", "content": "later", "ts": "yesterday"},
        ]})

        result = manager.import_all(blob)

        assert result.ok is True
        assert manager.messages[0].ts == 5
        assert manager.messages[1].ts > 1_000_000_000_000

    def test_import_missing_file(self, manager, tmp_path):
        result = manager.import_file(tmp_path / "nope.json")
        assert result.ok is False


class TestExtras:
    def test_insights(self, manager):
        manager.update_profile(name="Sam")
        manager.set_mood(7)
        manager.send_message("hi")
        stats = manager.insights()
        assert stats.message_count == 3
        assert stats.first_ts == manager.messages[0].ts
        assert stats.last_ts == manager.messages[-1].ts
        assert stats.mood == 7
        assert stats.profile_name == "Sam"

    def test_journal(self, manager, store):
        content = manager.save_journal("felt calmer after a walk")
        assert content.startswith("Journal — ")
        assert content.endswith(":\nfelt calmer after a walk")
        assert reload(store).load_journal() == content

    def test_theme_toggle(self, manager, store):
        assert manager.theme == "light"
        assert manager.toggle_theme() == "dark"
        assert reload(store).theme == "dark"
        assert manager.toggle_theme() == "light"
