from __future__ import annotations

import logging

import pytest

from tsgen import GeneratorOptions, describe, generate
from tsgen.errors import TemplateError
from tsgen.rendering import TypeScriptRenderer

import shapes


def test_generate_enum():
    assert generate([shapes.Color]) == (
        "export enum Color {\n"
        "    Red = 0,\n"
        "    Green = 1,\n"
        "    Blue = 2,\n"
        "}\n"
        "\n"
    )


def test_generate_self_referencing_class():
    assert generate([shapes.Node]) == (
        "export class Node {\n"
        "    value: number;\n"
        "    next: Node;\n"
        "}\n"
        "\n"
    )


def test_generate_renders_bases_before_derived():
    assert generate([shapes.IntBox]) == (
        "export class Box<T> {\n"
        "    item: T;\n"
        "}\n"
        "\n"
        "export class IntBox extends Box<number> {\n"
        "    label: string;\n"
        "}\n"
        "\n"
    )


def test_enums_render_before_types():
    generated = generate([shapes.Containers])

    assert generated.startswith("export enum Color {\n")
    assert generated.index("export enum Color") < generated.index("export class Containers")


def test_interfaces_render_with_interface_keyword():
    generated = generate([shapes.Labelled])

    assert "export interface Named {\n    name: string;\n}\n" in generated
    assert "export interface Labelled extends Named {\n    label: string;\n}\n" in generated


def test_descriptors_are_accepted_as_roots():
    assert generate([describe(shapes.Node)]) == generate([shapes.Node])


def test_duplicate_roots_produce_one_declaration():
    generated = generate([shapes.Node, shapes.Node, shapes.Color, shapes.Color])

    assert generated.count("export class Node") == 1
    assert generated.count("export enum Color") == 1


def test_non_structural_roots_are_ignored_with_warning(caplog):
    with caplog.at_level(logging.WARNING, logger="tsgen.generator"):
        generated = generate([int, list[str]])

    assert generated == ""
    assert "Ignoring root int" in caplog.text


def test_skipped_root_is_not_rendered():
    options = GeneratorOptions(skip_type_patterns=("Node",))
    assert generate([shapes.Node, shapes.Color], options) == generate([shapes.Color])


def test_custom_template_replaces_default():
    options = GeneratorOptions(template="{% for t in types %}{{ t.name }};{% endfor %}")
    assert generate([shapes.Parent], options) == "Parent;Child;"


def test_custom_template_sees_enum_fields():
    options = GeneratorOptions(
        template="{% for e in enums %}{{ e.name }}={% for f in e.fields %}{{ f.value }}{% endfor %}{% endfor %}"
    )
    assert generate([shapes.Shade], options) == 'Shade="dark""light"'


def test_empty_template_falls_back_to_default():
    assert generate([shapes.Color], GeneratorOptions(template="")) == generate([shapes.Color])


def test_broken_template_raises_template_error():
    with pytest.raises(TemplateError):
        generate([shapes.Node], GeneratorOptions(template="{% for t in types %}"))


def test_renderer_without_declarations_renders_nothing():
    assert TypeScriptRenderer().render([], []) == ""
