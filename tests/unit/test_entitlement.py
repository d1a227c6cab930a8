"""
Module 02 - Entitlement Schema Unit Tests
Tests for core/merkle/entitlement.py

Covers input-document validation (every failure is InputException),
amount parsing and proof bundle entries.
"""
import copy

import pytest

from core.crypto.hashing import ZERO_HASH, to_hex
from core.merkle.entitlement import (
    ENTITLEMENT_TYPES,
    EntitlementList,
    EntitlementRecord,
    ProofBundleEntry,
    load_entitlement_list,
    make_entitlement_list,
    parse_amount,
)
from core.schemas.errors import InputException

from fixtures import SCENARIO_AMOUNT, make_input_document, make_records


class TestParseAmount:

    def test_decimal_string(self):
        assert parse_amount("25000000000000000000") == SCENARIO_AMOUNT

    def test_int(self):
        assert parse_amount(7) == 7

    @pytest.mark.parametrize("value", ["-1", "1.5", "1e18", " 1", "0x10", ""])
    def test_rejects_non_decimal_strings(self, value):
        with pytest.raises(InputException):
            parse_amount(value)

    def test_rejects_overflow(self):
        with pytest.raises(InputException):
            parse_amount(str(2**256))


class TestEntitlementRecord:

    def test_normalizes_recipient(self):
        record = make_records(1)[0]
        lowered = EntitlementRecord(recipient=record.recipient.lower(), amount=1)
        assert lowered.recipient == record.recipient

    def test_bad_recipient_raises_input_exception(self):
        with pytest.raises(InputException):
            EntitlementRecord(recipient="0x1234", amount=1)

    def test_bad_amount_raises_input_exception(self):
        with pytest.raises(InputException):
            EntitlementRecord(recipient=make_records(1)[0].recipient, amount=-5)

    def test_as_inputs_uses_decimal_string(self):
        record = make_records(1)[0]
        assert record.as_inputs() == [record.recipient, str(SCENARIO_AMOUNT)]


class TestLoadEntitlementList:

    def test_reference_document(self, input_document):
        records = load_entitlement_list(input_document)
        assert len(records) == 4
        assert all(r.amount == SCENARIO_AMOUNT for r in records)

    def test_preserves_index_order(self, input_document):
        records = load_entitlement_list(input_document)
        assert [r.recipient for r in records] == [
            input_document["values"][str(i)]["0"] for i in range(4)
        ]

    def test_integer_amounts_accepted(self, input_document):
        doc = copy.deepcopy(input_document)
        doc["values"]["0"]["1"] = 5
        assert load_entitlement_list(doc)[0].amount == 5

    def test_wrong_types(self, input_document):
        doc = copy.deepcopy(input_document)
        doc["types"] = ["uint", "address"]
        with pytest.raises(InputException, match="Unsupported field types"):
            load_entitlement_list(doc)

    def test_count_mismatch(self, input_document):
        doc = copy.deepcopy(input_document)
        doc["count"] = 5
        with pytest.raises(InputException, match="count"):
            load_entitlement_list(doc)

    def test_empty_list(self):
        doc = {"types": list(ENTITLEMENT_TYPES), "count": 0, "values": {}}
        with pytest.raises(InputException, match="empty"):
            load_entitlement_list(doc)

    def test_non_contiguous_indices(self, input_document):
        doc = copy.deepcopy(input_document)
        doc["values"]["7"] = doc["values"].pop("3")
        with pytest.raises(InputException) as exc_info:
            load_entitlement_list(doc)
        assert exc_info.value.details["field_path"] == "values"

    def test_missing_field(self, input_document):
        doc = copy.deepcopy(input_document)
        del doc["values"]["2"]["1"]
        with pytest.raises(InputException) as exc_info:
            load_entitlement_list(doc)
        assert exc_info.value.details["field_path"] == "values.2"

    def test_malformed_address(self, input_document):
        doc = copy.deepcopy(input_document)
        doc["values"]["1"]["0"] = "0xnothex"
        with pytest.raises(InputException) as exc_info:
            load_entitlement_list(doc)
        assert exc_info.value.details["field_path"] == "values.1.0"

    def test_malformed_amount(self, input_document):
        doc = copy.deepcopy(input_document)
        doc["values"]["1"]["1"] = "25.5"
        with pytest.raises(InputException) as exc_info:
            load_entitlement_list(doc)
        assert exc_info.value.details["field_path"] == "values.1.1"

    def test_structural_error_wrapped(self):
        with pytest.raises(InputException, match="Malformed entitlement list"):
            load_entitlement_list({"types": ["address", "uint"], "values": {}})

    def test_unknown_top_level_field(self, input_document):
        doc = copy.deepcopy(input_document)
        doc["extra"] = True
        with pytest.raises(InputException):
            load_entitlement_list(doc)

    def test_duplicates_rejected_by_default(self, input_document):
        doc = copy.deepcopy(input_document)
        doc["values"]["3"]["0"] = doc["values"]["0"]["0"].lower()
        with pytest.raises(InputException, match="appears at indices 0 and 3"):
            load_entitlement_list(doc)

    def test_duplicates_allowed_when_requested(self, input_document):
        doc = copy.deepcopy(input_document)
        doc["values"]["3"]["0"] = doc["values"]["0"]["0"]
        records = load_entitlement_list(doc, allow_duplicates=True)
        assert records[0].recipient == records[3].recipient


class TestMakeEntitlementList:

    def test_round_trips_through_loader(self):
        recipients = [r.recipient for r in make_records(3)]
        document = make_entitlement_list(recipients, 10)
        assert document.count == 3
        assert document.types == ENTITLEMENT_TYPES
        assert document.values["2"] == {"0": recipients[2], "1": "10"}
        records = load_entitlement_list(document.model_dump())
        assert [r.recipient for r in records] == recipients

    def test_from_records(self):
        records = make_records(2)
        document = EntitlementList.from_records(records)
        assert document.to_records() == records


class TestProofBundleEntry:

    def make_entry(self, **overrides) -> dict:
        record = make_records(1)[0]
        data = {
            "inputs": record.as_inputs(),
            "proof": [to_hex(ZERO_HASH)],
            "root": to_hex(b"\x11" * 32),
            "leaf": to_hex(b"\x22" * 32),
        }
        data.update(overrides)
        return data

    def test_decodes_record(self):
        entry = ProofBundleEntry.model_validate(self.make_entry())
        assert entry.record == make_records(1)[0]
        assert entry.proof_bytes == [ZERO_HASH]
        assert entry.root_bytes == b"\x11" * 32

    def test_rejects_bad_digest(self):
        with pytest.raises(ValueError):
            ProofBundleEntry.model_validate(self.make_entry(root="0x1234"))

    def test_rejects_wrong_input_arity(self):
        with pytest.raises(ValueError):
            ProofBundleEntry.model_validate(self.make_entry(inputs=["0x00"]))

    def test_malformed_inputs_surface_on_decode(self):
        entry = ProofBundleEntry.model_validate(self.make_entry(inputs=["0xbad", "1"]))
        with pytest.raises(InputException):
            entry.record
