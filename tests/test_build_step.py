"""Tests for multi_build/build_step.py - progress events"""

from multi_build.build_step import BuildStep, BuildStepEvent, BuildStepEventGroup


class TestBuildStepEvent:
    def test_emit_to_every_callback(self) -> None:
        first, second = [], []
        event = BuildStepEvent(str)
        event.set(first.append, second.append)
        event.emit("Building")
        assert first == ["Building"]
        assert second == ["Building"]

    def test_clear(self) -> None:
        received = []
        event = BuildStepEvent(str)
        event.set(received.append)
        event.clear()
        event.emit("Building")
        assert received == []


class TestBuildStepEventGroup:
    def test_message_reaches_short_and_long(self) -> None:
        short, long = [], []
        BuildStep.short_message.set(short.append)
        BuildStep.long_message.set(long.append)

        BuildStep.message.emit("Build for Android failed")

        assert short == ["Build for Android failed"]
        assert long == ["Build for Android failed"]

    def test_set_on_group(self) -> None:
        received = []
        group = BuildStepEventGroup(BuildStepEvent(str), BuildStepEvent(str))
        group.set(received.append)
        group.emit("Done")
        assert received == ["Done", "Done"]
