from __future__ import annotations

import json
import tempfile
import unittest
from pathlib import Path

from _seedfixtures import STEP_ONE, STEP_TWO, OrderLiteralHasher, SeedRecorder, StepOneModel

from dataseed.infra.adapters import FolderDefinitionSource, InMemoryDefinitionSource, InMemorySeedRepository
from dataseed.infra.models import Codes, RawDefinition
from dataseed.orchestration.hashing import hash_content
from dataseed.orchestration.loader import load_candidates, parse_definition
from dataseed.orchestration.runner import DataSeedRunner


def _raw(source_id: str, obj) -> RawDefinition:
    return RawDefinition(source_id=source_id, content=obj if isinstance(obj, str) else json.dumps(obj, indent=2))


class TestParseDefinition(unittest.TestCase):
    def test_field_names_are_case_insensitive(self) -> None:
        step, errors = parse_definition(_raw("a.json", {"ORDER": 3, "Name": "n", "ItemType": "T", "ITEMS": [{}]}))
        self.assertEqual(errors, [])
        self.assertEqual((step.order, step.name, step.item_type, step.items), (3, "n", "T", [{}]))

    def test_snake_case_item_type_is_accepted(self) -> None:
        step, errors = parse_definition(_raw("a.json", {"order": 1, "name": "n", "item_type": "T", "items": []}))
        self.assertEqual(errors, [])
        self.assertEqual(step.item_type, "T")

    def test_yaml_definitions_are_decoded_by_suffix(self) -> None:
        text = "order: 4\nname: yaml step\nitemType: StepOneModel\nitems:\n  - number: 1\n    text: one\n"
        step, errors = parse_definition(RawDefinition("004.yml", text))
        self.assertEqual(errors, [])
        self.assertEqual(step.order, 4)
        self.assertEqual(step.items, [{"number": 1, "text": "one"}])

    def test_wrong_field_type_is_failed_to_parse(self) -> None:
        step, errors = parse_definition(_raw("a.json", dict(STEP_ONE, order="first")))
        self.assertIsNone(step)
        self.assertEqual([e.code for e in errors], [Codes.FAILED_TO_PARSE])
        self.assertIn("order", errors[0].detail)

    def test_non_object_document_is_failed_to_parse(self) -> None:
        step, errors = parse_definition(_raw("a.json", "[1, 2]"))
        self.assertIsNone(step)
        self.assertEqual(errors[0].code, Codes.FAILED_TO_PARSE)

    def test_empty_and_null(self) -> None:
        _, empty = parse_definition(RawDefinition("e.json", ""))
        _, null = parse_definition(RawDefinition("n.json", "null"))
        self.assertEqual([(e.key, e.code) for e in empty], [("e.json", Codes.EMPTY_FILE)])
        self.assertEqual([(e.key, e.code) for e in null], [("n.json", Codes.NULL_RESULT)])


class TestLoadCandidates(unittest.TestCase):
    def test_candidates_carry_type_and_hash(self) -> None:
        recorder = SeedRecorder()
        src = InMemoryDefinitionSource([_raw("001.json", STEP_ONE), _raw("002.json", dict(STEP_TWO, itemType="Nope"))])

        res = load_candidates(src, recorder.registry, OrderLiteralHasher())

        self.assertTrue(res.success, res.errors)
        one, two = res.data
        self.assertIs(one.resolved_type, StepOneModel)
        self.assertEqual(one.validation_hash, "1")
        self.assertEqual(one.source_id, "001.json")
        self.assertIsNone(two.resolved_type)

    def test_hash_is_computed_over_raw_content(self) -> None:
        recorder = SeedRecorder()
        raw = _raw("001.json", STEP_ONE)
        res = load_candidates(InMemoryDefinitionSource([raw]), recorder.registry, _DefaultHasher())
        self.assertEqual(res.data[0].validation_hash, hash_content(raw.content))

    def test_all_file_errors_are_collected(self) -> None:
        recorder = SeedRecorder()
        src = InMemoryDefinitionSource(
            [
                RawDefinition("001.json", ""),
                RawDefinition("002.json", "{not json"),
                _raw("003.json", STEP_ONE),
                RawDefinition("004.json", "null"),
            ]
        )

        res = load_candidates(src, recorder.registry, OrderLiteralHasher())

        self.assertFalse(res.success)
        self.assertIsNone(res.data)
        self.assertEqual(
            [(e.key, e.code) for e in res.errors],
            [("001.json", Codes.EMPTY_FILE), ("002.json", Codes.FAILED_TO_PARSE), ("004.json", Codes.NULL_RESULT)],
        )


class TestFolderDefinitionBytes(unittest.TestCase):
    def setUp(self) -> None:
        self._td = tempfile.TemporaryDirectory()
        self.folder = Path(self._td.name)

    def tearDown(self) -> None:
        self._td.cleanup()

    def test_invalid_utf8_does_not_abort_discovery(self) -> None:
        (self.folder / "001.json").write_bytes(b'{"order": 1, "name": "\xff\xfe", "itemType": "StepOneModel", "items": []}')
        (self.folder / "002.json").write_bytes(b'\xff{"order": 2}')
        (self.folder / "003.json").write_text(json.dumps(dict(STEP_ONE, order=3)), encoding="utf-8")

        res = load_candidates(FolderDefinitionSource(self.folder), SeedRecorder().registry, _DefaultHasher())

        self.assertFalse(res.success)
        self.assertEqual([(e.key, e.code) for e in res.errors], [(str(self.folder / "002.json"), Codes.FAILED_TO_PARSE)])

        (self.folder / "002.json").unlink()
        res = load_candidates(FolderDefinitionSource(self.folder), SeedRecorder().registry, _DefaultHasher())
        self.assertTrue(res.success, res.errors)
        self.assertEqual(res.data[0].name, "\ufffd\ufffd")
        self.assertEqual([c.order for c in res.data], [1, 3])

    def test_byte_order_mark_is_ignored(self) -> None:
        text = json.dumps(STEP_ONE, indent=2)
        (self.folder / "001.json").write_text(text, encoding="utf-8-sig")
        self.assertTrue((self.folder / "001.json").read_bytes().startswith(b"\xef\xbb\xbf"))

        recorder = SeedRecorder()
        repo = InMemorySeedRepository()
        runner = DataSeedRunner(
            source=FolderDefinitionSource(self.folder),
            repository=repo,
            registry=recorder.registry,
            echo=None,
        )
        res = runner.run()

        self.assertTrue(res.success, res.errors)
        self.assertEqual(len(recorder.step_one_models), 2)
        self.assertEqual(repo.steps[1].validation_hash, hash_content(text))


class _DefaultHasher:
    def hash(self, content: str) -> str:
        return hash_content(content)


if __name__ == "__main__":
    unittest.main()
