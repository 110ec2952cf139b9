"""
Tests for label configuration loading.
"""

import pytest

from statelabel.config import LabelConfig
from statelabel.exceptions import ConfigurationError, StateLabelError
from statelabel.labels import get_configured_list


def test_nested_and_flat_forms_are_equivalent(tmp_path):
    nested = tmp_path / "nested.yml"
    nested.write_text(
        "label:\n"
        "  class: Initial; End; BooleanStaticField\n"
        "  BooleanStaticField:\n"
        "    field: toggle.value\n"
    )
    flat = tmp_path / "flat.yml"
    flat.write_text(
        "label.class: [Initial, End, BooleanStaticField]\n"
        "label.BooleanStaticField.field: toggle.value\n"
    )
    for path in (nested, flat):
        config = LabelConfig.load(path)
        assert config.provider_names == ["Initial", "End", "BooleanStaticField"]
        assert config.get_list("label.BooleanStaticField.field") == ["toggle.value"]


def test_configured_list_trims_and_drops_empties():
    config = LabelConfig.from_dict({"label.x": " a ;; b;  ;c "})
    assert get_configured_list(config, "label.x") == ["a", "b", "c"]
    assert get_configured_list(config, "label.missing") == []


def test_defaults():
    config = LabelConfig()
    assert config.provider_names == []
    assert config.formats == ["text", "dot"]
    assert str(config.output_dir) == "."
    assert config.depth_limit is None
    assert config.max_states is None


def test_formats():
    assert LabelConfig.from_dict({"label.format": "dot"}).formats == ["dot"]
    assert LabelConfig.from_dict({"label.format": "both"}).formats == ["text", "dot"]
    with pytest.raises(ConfigurationError):
        LabelConfig.from_dict({"label.format": "svg"}).formats


def test_search_limits():
    config = LabelConfig.from_dict({"search": {"depth_limit": 5, "max_states": "100"}})
    assert config.depth_limit == 5
    assert config.max_states == 100
    with pytest.raises(ConfigurationError):
        LabelConfig.from_dict({"search.depth_limit": "deep"}).depth_limit


def test_overrides_keep_file_values_for_unset_options():
    config = LabelConfig.from_dict({"label.output_dir": "out", "search.depth_limit": 3})
    overridden = config.with_overrides(label__output_dir=None, search__depth_limit=7)
    assert str(overridden.output_dir) == "out"
    assert overridden.depth_limit == 7
    assert config.depth_limit == 3


def test_missing_file_is_configuration_error(tmp_path):
    with pytest.raises(ConfigurationError):
        LabelConfig.load(tmp_path / "missing.yml")


def test_malformed_yaml(tmp_path):
    path = tmp_path / "bad.yml"
    path.write_text("label: [unclosed\n")
    with pytest.raises(ConfigurationError):
        LabelConfig.load(path)


def test_non_mapping_document(tmp_path):
    path = tmp_path / "list.yml"
    path.write_text("- Initial\n- End\n")
    with pytest.raises(StateLabelError):
        LabelConfig.load(path)


def test_empty_file_is_empty_configuration(tmp_path):
    path = tmp_path / "empty.yml"
    path.write_text("")
    assert LabelConfig.load(path).values == {}


def test_configuration_is_read_as_utf8(tmp_path):
    path = tmp_path / "größe.yml"
    path.write_bytes("label.BooleanLocalVariable.variable: prog.größe:wert\n".encode("utf-8"))
    config = LabelConfig.load(path)
    assert get_configured_list(config, "label.BooleanLocalVariable.variable") == ["prog.größe:wert"]
