"""Тесты реестра схем."""

import pytest

from probes import fs
from waitfor.context import background
from waitfor.errors import InvalidResourceIdentifier, UnsupportedScheme
from waitfor.models import ResourceConfig
from waitfor.registry import Registry


class StubProbe:
    def __init__(self, uri):
        self.uri = uri

    def test(self, ctx) -> None:
        return None


class TestRegistry:
    def test_empty(self):
        registry = Registry()
        assert registry.schemes() == []
        assert "file" not in registry

    def test_use_fs(self):
        registry = Registry(fs.use())
        assert registry.schemes() == ["file"]
        assert "file" in registry
        assert "FILE" in registry
        assert registry.factory("file") is fs.new

    def test_resolve_file(self, tmp_path):
        registry = Registry(fs.use())
        probe = registry.resolve("file://" + str(tmp_path))
        assert isinstance(probe, fs.FileProbe)
        assert probe.path == str(tmp_path)
        probe.test(background())

    def test_resolve_bare_prefix(self):
        probe = Registry(fs.use()).resolve("file://")
        assert probe.path == ""

    def test_unsupported_scheme(self):
        registry = Registry(fs.use())
        with pytest.raises(UnsupportedScheme) as exc_info:
            registry.resolve("tcp://localhost:5432")
        assert exc_info.value.scheme == "tcp"

    def test_no_scheme(self):
        with pytest.raises(InvalidResourceIdentifier):
            Registry(fs.use()).resolve("/tmp/a.txt")

    def test_register_replaces(self):
        registry = Registry(fs.use())
        registry.register("File", StubProbe)
        probe = registry.resolve("file:///tmp/a.txt")
        assert isinstance(probe, StubProbe)
        assert probe.uri == "file:///tmp/a.txt"

    @pytest.mark.parametrize("uri", ["file:///x/a#", "file:///x/a?", "file:///x/a#frag?q"])
    def test_resolve_keeps_raw_uri(self, uri):
        """Путь из реестра совпадает с путём из прямого вызова fs.new."""
        probe = Registry(fs.use()).resolve(uri)
        assert probe.path == fs.new(uri).path == uri[len("file://"):]

    def test_register_empty_scheme(self):
        with pytest.raises(ValueError):
            Registry().register("  ", StubProbe)

    def test_multiple_schemes(self):
        registry = Registry(ResourceConfig(schemes=["stub", "stubs"], factory=StubProbe))
        assert registry.schemes() == ["stub", "stubs"]

    def test_registries_are_independent(self):
        first = Registry(fs.use())
        second = Registry()
        assert "file" in first
        assert "file" not in second

    def test_repr(self):
        assert "file" in repr(Registry(fs.use()))
