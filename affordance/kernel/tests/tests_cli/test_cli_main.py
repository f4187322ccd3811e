"""
CLI Tests

Covers:
  - parse_args: commands, targets, options, errors
  - load_collection: model classes, ObjectNodes, ready CollectionDefinitions,
    and the error paths (bad target, missing module, missing attribute,
    unusable object)
  - run: describe, codegen to stdout, codegen --out (created then unchanged)
  - main: --help / --version, exit status 1 with a message on errors
"""

import importlib
import sys

import pytest

from affordance.cli import __version__
from affordance.cli.main import CliError, load_collection, main, parse_args, run
from affordance.kernel.collection import CollectionDefinition

# ============================================================================
# parse_args
# ============================================================================


class TestParseArgs:
    def test_defaults(self):
        assert parse_args([]) == {
            "command": None,
            "target": None,
            "out": None,
            "diff_only": False,
            "export_name": None,
            "indent": None,
            "header": True,
            "imports": True,
            "show_help": False,
            "show_version": False,
        }

    def test_codegen_with_options(self):
        args = parse_args(
            [
                "codegen",
                "myapp.models:Product",
                "--out",
                "gen/product.py",
                "--diff-only",
                "--export-name",
                "PRODUCTS",
                "--indent",
                "2",
                "--no-header",
                "--no-imports",
            ]
        )
        assert args["command"] == "codegen"
        assert args["target"] == "myapp.models:Product"
        assert args["out"] == "gen/product.py"
        assert args["diff_only"] is True
        assert args["export_name"] == "PRODUCTS"
        assert args["indent"] == 2
        assert args["header"] is False
        assert args["imports"] is False

    def test_options_before_command(self):
        args = parse_args(["--diff-only", "describe", "m:X"])
        assert args["command"] == "describe"
        assert args["target"] == "m:X"

    @pytest.mark.parametrize("flag", ["-h", "--help"])
    def test_help(self, flag):
        assert parse_args([flag])["show_help"] is True

    @pytest.mark.parametrize("flag", ["-v", "--version"])
    def test_version(self, flag):
        assert parse_args([flag])["show_version"] is True

    @pytest.mark.parametrize(
        "argv,message",
        [
            (["codegen", "m:X", "--out"], "--out requires a value"),
            (["codegen", "m:X", "--indent", "wide"], "--indent expects an integer"),
            (["codegen", "m:X", "--colour"], "Unknown option: --colour"),
            (["generate"], "Unknown command: generate"),
            (["codegen", "m:X", "extra"], "Unknown command: extra"),
        ],
    )
    def test_errors(self, argv, message):
        with pytest.raises(CliError, match=message):
            parse_args(argv)


# ============================================================================
# load_collection
# ============================================================================


class TestLoadCollection:
    def test_model_class(self, catalog_module):
        collection = load_collection(f"{catalog_module}:Product")
        assert isinstance(collection, CollectionDefinition)
        assert collection.model.__name__ == "Product"
        assert list(collection.field_affordances) == ["id", "name", "price"]

    def test_object_node(self, catalog_module):
        collection = load_collection(f"{catalog_module}:SCHEMA")
        assert collection.model is None
        assert collection.id_field == "id"

    def test_definition_returned_as_is(self, catalog_module):
        module = importlib.import_module(catalog_module)
        assert load_collection(f"{catalog_module}:PRODUCTS") is module.PRODUCTS

    def test_unusable_object(self, catalog_module):
        with pytest.raises(CliError, match="ObjectNode"):
            load_collection(f"{catalog_module}:NOT_A_SCHEMA")

    def test_missing_attribute(self, catalog_module):
        with pytest.raises(CliError, match="has no attribute Missing"):
            load_collection(f"{catalog_module}:Missing")

    def test_missing_module(self, catalog_module):
        with pytest.raises(CliError, match="Cannot import"):
            load_collection("no_such_module_here:Product")

    @pytest.mark.parametrize("target", ["catalog_models", ":Product", "catalog_models:"])
    def test_malformed_target(self, target):
        with pytest.raises(CliError, match="module:Target"):
            load_collection(target)


# ============================================================================
# run
# ============================================================================


class TestRun:
    def test_describe(self, catalog_module, capsys):
        assert run(parse_args(["describe", f"{catalog_module}:PRODUCTS"])) == 0
        out = capsys.readouterr().out
        assert out.startswith("Collection with 3 fields (ID: id, Label: name)")
        assert "Bulk: Bulk Delete" in out

    def test_codegen_stdout(self, catalog_module, capsys):
        assert run(parse_args(["codegen", f"{catalog_module}:Product", "--no-header"])) == 0
        out = capsys.readouterr().out
        assert out.startswith("from affordance import CollectionConfig\n\nCONFIG: CollectionConfig = {")

    def test_codegen_out(self, catalog_module, tmp_path, capsys):
        target = tmp_path / "generated" / "product_config.py"
        argv = ["codegen", f"{catalog_module}:Product", "--out", str(target), "--export-name", "PRODUCTS"]

        assert run(parse_args(argv)) == 0
        assert capsys.readouterr().out == f"created: {target}\n"
        assert "PRODUCTS: CollectionConfig = {" in target.read_text(encoding="utf-8")

        assert run(parse_args(argv)) == 0
        assert capsys.readouterr().out == f"unchanged: {target}\n"

    def test_codegen_bad_export_name(self, catalog_module, tmp_path):
        target = tmp_path / "product_config.py"
        argv = ["codegen", f"{catalog_module}:Product", "--out", str(target), "--export-name", "foo bar"]
        with pytest.raises(CliError, match="valid Python identifier"):
            run(parse_args(argv))
        assert not target.exists()

    def test_no_command(self):
        with pytest.raises(CliError, match="No command given"):
            run(parse_args([]))

    def test_no_target(self):
        with pytest.raises(CliError, match="describe requires a module:Target"):
            run(parse_args(["describe"]))


# ============================================================================
# main
# ============================================================================


class TestMain:
    def test_version(self, monkeypatch, capsys):
        monkeypatch.setattr(sys, "argv", ["affordance", "--version"])
        main()
        assert capsys.readouterr().out == f"affordance {__version__}\n"

    def test_help(self, monkeypatch, capsys):
        monkeypatch.setattr(sys, "argv", ["affordance", "--help"])
        main()
        assert "Usage:" in capsys.readouterr().out

    def test_error_exit_status(self, monkeypatch, capsys):
        monkeypatch.setattr(sys, "argv", ["affordance", "bogus"])
        with pytest.raises(SystemExit) as exc:
            main()
        assert exc.value.code == 1
        assert "Error: Unknown command: bogus" in capsys.readouterr().err

    def test_success_exit_status(self, catalog_module, monkeypatch, capsys):
        monkeypatch.setattr(sys, "argv", ["affordance", "describe", f"{catalog_module}:SCHEMA"])
        with pytest.raises(SystemExit) as exc:
            main()
        assert exc.value.code == 0
        assert capsys.readouterr().out.startswith("Collection with 3 fields")
