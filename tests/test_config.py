from __future__ import annotations

from pathlib import Path

import pytest

from tsgen.config import (
    DEFAULT_PRIMITIVE_TYPE_MAP,
    GeneratorOptions,
    Settings,
    load_type_mapping,
    options_from_settings,
)


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    for name in (
        "TSGEN_SKIP_TYPE_PATTERNS",
        "TSGEN_USE_INTERFACE_FOR_CLASSES",
        "TSGEN_USE_DATE_FOR_DATETIME",
        "TSGEN_TEMPLATE_PATH",
        "TSGEN_TYPE_MAP_PATH",
    ):
        monkeypatch.delenv(name, raising=False)


def test_generator_options_defaults():
    options = GeneratorOptions()

    assert options.skip_type_patterns == ()
    assert not options.use_interface_for_classes
    assert not options.use_date_for_datetime
    assert options.default_base_type is None
    assert options.type_renamer is None
    assert options.template is None
    assert dict(options.primitive_type_map) == DEFAULT_PRIMITIVE_TYPE_MAP


def test_load_type_mapping_missing_file(tmp_path):
    assert load_type_mapping(tmp_path / "missing.yaml") == {}


def test_load_type_mapping_skips_comments_and_malformed_lines(tmp_path):
    mapping_file = tmp_path / "types.yaml"
    mapping_file.write_text(
        "# overrides\n"
        "decimal.Decimal: string\n"
        "\n"
        "not a mapping line\n"
        "app.Money:   MoneyDto  \n"
        "empty.Value:\n",
        encoding="utf-8",
    )

    assert load_type_mapping(mapping_file) == {
        "decimal.Decimal": "string",
        "app.Money": "MoneyDto",
    }


def test_settings_read_environment(monkeypatch):
    monkeypatch.setenv("TSGEN_SKIP_TYPE_PATTERNS", '["^pydantic\\\\."]')
    monkeypatch.setenv("TSGEN_USE_DATE_FOR_DATETIME", "true")

    settings = Settings()

    assert settings.skip_type_patterns == [r"^pydantic\."]
    assert settings.use_date_for_datetime is True
    assert settings.use_interface_for_classes is False
    assert settings.template_path is None


def test_settings_read_dotenv_file(tmp_path):
    (tmp_path / ".env").write_text("TSGEN_USE_INTERFACE_FOR_CLASSES=true\n", encoding="utf-8")
    assert Settings().use_interface_for_classes is True


def test_options_from_settings_uses_settings_values(tmp_path):
    mapping_file = tmp_path / "types.yaml"
    mapping_file.write_text("decimal.Decimal: string\n", encoding="utf-8")
    template_file = tmp_path / "custom.j2"
    template_file.write_text("{{ types | length }}", encoding="utf-8")

    settings = Settings(
        TSGEN_SKIP_TYPE_PATTERNS=["Internal"],
        TSGEN_USE_INTERFACE_FOR_CLASSES=True,
        TSGEN_TYPE_MAP_PATH=mapping_file,
        TSGEN_TEMPLATE_PATH=template_file,
    )
    options = options_from_settings(settings)

    assert options.skip_type_patterns == ("Internal",)
    assert options.use_interface_for_classes is True
    assert options.use_date_for_datetime is False
    assert options.primitive_type_map == {"uuid.UUID": "string", "decimal.Decimal": "string"}
    assert options.template == "{{ types | length }}"


def test_explicit_overrides_win_over_settings(tmp_path):
    settings = Settings(TSGEN_SKIP_TYPE_PATTERNS=["Internal"], TSGEN_USE_DATE_FOR_DATETIME=True)
    override_map = tmp_path / "override.yaml"
    override_map.write_text("uuid.UUID: Uuid\n", encoding="utf-8")

    options = options_from_settings(
        settings,
        skip_type_patterns=("Secret",),
        use_date_for_datetime=False,
        type_map_path=override_map,
    )

    assert options.skip_type_patterns == ("Internal", "Secret")
    assert options.use_date_for_datetime is False
    assert options.primitive_type_map == {"uuid.UUID": "Uuid"}


def test_missing_template_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        options_from_settings(Settings(), template_path=Path(tmp_path / "nope.j2"))
