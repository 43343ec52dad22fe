import json

import pytest

from dbalog_mcp.core.errors import LevelValidationError, ModifierNotFoundError
from dbalog_mcp.core.level_modifiers import LevelModifier, ModifierRegistry, get_modifier_registry


def test_unset_criteria_match_everything():
    modifier = LevelModifier(name="all", modifier=1)
    assert modifier.applies_to("copy_proxy", "dbatools", None)
    assert modifier.applies_to("x", "y", ["anything"])


def test_function_and_module_wildcards_are_case_insensitive():
    modifier = LevelModifier(
        name="copy", modifier=1,
        include_function_name="Copy-*", include_module_name="dba*"
    )
    assert modifier.applies_to("copy-proxy", "DBATools", None)
    assert not modifier.applies_to("get-proxy", "dbatools", None)
    assert not modifier.applies_to("copy-proxy", "replication", None)


def test_include_tags_need_one_common_tag():
    modifier = LevelModifier(name="tags", modifier=1, include_tags=["registry", "alias"])
    assert modifier.applies_to("f", "m", ["ALIAS"])
    assert not modifier.applies_to("f", "m", ["proxy"])
    assert not modifier.applies_to("f", "m", None)
    assert not modifier.applies_to("f", "m", [])


def test_exclude_criteria_veto_match():
    modifier = LevelModifier(
        name="veto", modifier=1,
        include_module_name="dbatools",
        exclude_function_name="*cache*",
        exclude_tags=["quiet"]
    )
    assert modifier.applies_to("copy_proxy", "dbatools", ["proxy"])
    assert not modifier.applies_to("clear_plan_cache", "dbatools", None)
    assert not modifier.applies_to("copy_proxy", "dbatools", ["proxy", "Quiet"])

    by_module = LevelModifier(name="module", modifier=1, exclude_module_name="repl*")
    assert not by_module.applies_to("get_publication", "replication", None)


@pytest.mark.parametrize("kwargs", [
    {"name": "", "modifier": 1},
    {"name": None, "modifier": 1},
    {"name": "x", "modifier": "1"},
    {"name": "x", "modifier": True},
    {"name": "x", "modifier": 1, "include_function_name": "  "},
    {"name": "x", "modifier": 1, "include_module_name": "[abc"},
    {"name": "x", "modifier": 1, "include_tags": "registry"},
])
def test_invalid_modifier_definitions(kwargs):
    with pytest.raises(LevelValidationError):
        LevelModifier(**kwargs)


def test_to_dict_and_from_dict():
    modifier = LevelModifier(name="quiet", modifier=2, include_tags=["B", "a"], exclude_function_name="f*")
    data = modifier.to_dict()
    assert data["include_tags"] == ["a", "b"]
    assert LevelModifier.from_dict(data) == modifier


class TestModifierRegistry:

    def test_register_replaces_same_name(self):
        registry = ModifierRegistry()
        registry.register(LevelModifier(name="Quiet", modifier=1))
        registry.register(LevelModifier(name="quiet", modifier=3))

        assert len(registry) == 1
        assert registry.require("QUIET").modifier == 3

    def test_get_filters_by_wildcard_and_sorts(self):
        registry = ModifierRegistry()
        for name in ("quiet_b", "loud", "quiet_a"):
            registry.register(LevelModifier(name=name, modifier=1))

        assert [m.name for m in registry.get()] == ["loud", "quiet_a", "quiet_b"]
        assert [m.name for m in registry.get("quiet_*")] == ["quiet_a", "quiet_b"]
        assert registry.get("missing*") == []

    def test_remove_and_require(self):
        registry = ModifierRegistry()
        registry.register(LevelModifier(name="quiet", modifier=1))

        assert registry.remove("quiet") is True
        assert registry.remove("quiet") is False
        with pytest.raises(ModifierNotFoundError):
            registry.require("quiet")

    def test_snapshot_is_immutable_copy(self):
        registry = ModifierRegistry()
        registry.register(LevelModifier(name="a", modifier=1))
        snapshot = registry.snapshot()
        registry.register(LevelModifier(name="b", modifier=1))

        assert isinstance(snapshot, tuple)
        assert len(snapshot) == 1

    def test_save_and_load_file(self, tmp_path):
        registry = ModifierRegistry()
        registry.register(LevelModifier(name="quiet", modifier=2, include_tags=["registry"]))
        registry.register(LevelModifier(name="loud", modifier=-1, include_function_name="copy_*"))

        path = tmp_path / "nested" / "modifiers.json"
        assert registry.save_file(path) == 2

        restored = ModifierRegistry()
        assert restored.load_file(path) == 2
        assert restored.get() == registry.get()

    def test_load_file_validates_everything_first(self, tmp_path):
        path = tmp_path / "modifiers.json"
        path.write_text(json.dumps([
            {"name": "good", "modifier": 1},
            {"name": "bad", "modifier": "x"},
        ]))

        registry = ModifierRegistry()
        with pytest.raises(LevelValidationError):
            registry.load_file(path)
        assert len(registry) == 0

    def test_load_file_requires_list(self, tmp_path):
        path = tmp_path / "modifiers.json"
        path.write_text(json.dumps({"name": "x", "modifier": 1}))

        with pytest.raises(LevelValidationError):
            ModifierRegistry().load_file(path)


def test_global_registry_is_shared():
    assert get_modifier_registry() is get_modifier_registry()
