from __future__ import annotations

import sys
import tempfile
import textwrap
import unittest
from pathlib import Path

from _seedfixtures import StepOneModel, StepTwoModel

from dataseed.infra.adapters import FolderDefinitionSource, TableTypeRegistry, import_registry
from dataseed.infra.errors import ConflictError, NotFoundError, ValidationError


class TestFolderDefinitionSource(unittest.TestCase):
    def test_lists_matching_files_in_name_order(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            folder = Path(td)
            (folder / "010.json").write_text("{}", encoding="utf-8")
            (folder / "002.json").write_text("[]", encoding="utf-8")
            (folder / "003.yml").write_text("a: 1", encoding="utf-8")
            (folder / "notes.txt").write_text("skip", encoding="utf-8")

            json_only = list(FolderDefinitionSource(folder).iter_definitions())
            self.assertEqual([Path(d.source_id).name for d in json_only], ["002.json", "010.json"])
            self.assertEqual(json_only[0].content, "[]")

            mixed = FolderDefinitionSource(folder, patterns=("*.json", "*.yml"))
            self.assertEqual([p.name for p in mixed.list_files()], ["002.json", "003.yml", "010.json"])

    def test_missing_folder_is_not_found(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            with self.assertRaises(NotFoundError):
                list(FolderDefinitionSource(Path(td) / "nope").iter_definitions())


class TestTableTypeRegistry(unittest.TestCase):
    def test_register_resolve_and_handlers(self) -> None:
        reg = TableTypeRegistry()
        seen = []
        reg.register("StepOneModel", StepOneModel, seen.append)

        @reg.handler("StepTwoModel", StepTwoModel)
        def _two(model):
            seen.append(model)

        self.assertIs(reg.resolve_type("StepOneModel"), StepOneModel)
        self.assertIsNone(reg.resolve_type("stepOneModel"))
        self.assertIsNotNone(reg.handler_for(StepOneModel))
        self.assertIs(reg.handler_for(StepTwoModel), _two)
        self.assertEqual(reg.describe()["mapped"], ["StepOneModel", "StepTwoModel"])

    def test_type_without_handler_is_unmapped(self) -> None:
        reg = TableTypeRegistry()
        reg.register("StepOneModel", StepOneModel)
        self.assertIs(reg.resolve_type("StepOneModel"), StepOneModel)
        self.assertIsNone(reg.handler_for(StepOneModel))

    def test_conflicting_and_invalid_registrations(self) -> None:
        reg = TableTypeRegistry()
        reg.register("A", StepOneModel)
        with self.assertRaises(ConflictError):
            reg.register("A", StepTwoModel)
        with self.assertRaises(ValidationError):
            reg.register("B", dict)
        with self.assertRaises(ValidationError):
            reg.register("  ", StepOneModel)


class TestImportRegistry(unittest.TestCase):
    def setUp(self) -> None:
        self._td = tempfile.TemporaryDirectory()
        pkg = Path(self._td.name)
        (pkg / "seedhost_registry_mod.py").write_text(
            textwrap.dedent(
                """
                from dataclasses import dataclass

                from dataseed.infra.adapters import TableTypeRegistry


                @dataclass
                class Thing:
                    name: str


                registry = TableTypeRegistry()
                registry.register("Thing", Thing, print)


                def make_registry():
                    return registry


                not_a_registry = 42
                """
            ),
            encoding="utf-8",
        )
        sys.path.insert(0, self._td.name)

    def tearDown(self) -> None:
        sys.path.remove(self._td.name)
        sys.modules.pop("seedhost_registry_mod", None)
        self._td.cleanup()

    def test_instance_and_factory_references(self) -> None:
        a = import_registry("seedhost_registry_mod:registry")
        b = import_registry("seedhost_registry_mod:make_registry")
        self.assertIs(a, b)
        self.assertIsNotNone(a.resolve_type("Thing"))

    def test_bad_references(self) -> None:
        with self.assertRaises(ValidationError):
            import_registry("no_colon_here")
        with self.assertRaises(NotFoundError):
            import_registry("seedhost_missing_module:registry")
        with self.assertRaises(NotFoundError):
            import_registry("seedhost_registry_mod:missing")
        with self.assertRaises(ValidationError):
            import_registry("seedhost_registry_mod:not_a_registry")


if __name__ == "__main__":
    unittest.main()
