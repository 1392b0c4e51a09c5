import pytest

from marketplace.api.responses import ERROR_STATUS, error_response, outcome_response
from marketplace.models import Category
from marketplace.services.base import ErrorCodes, WriteOutcome, service_err, service_ok
from utils.logging_utils import mask_mapping, mask_value
from utils.transaction_utils import TransactionError, atomic_sequence


@pytest.mark.unit
class TestMasking:
    def test_email(self):
        assert mask_value("alice@example.com") == "al***@example.com"

    def test_phone(self):
        assert mask_value("+8801700000123") == "***123"

    def test_mapping_only_masks_contact_fields(self):
        masked = mask_mapping({"booker_email": "bob@example.com", "deleted": 2})
        assert masked == {"booker_email": "bo***@example.com", "deleted": 2}


@pytest.mark.unit
class TestWriteOutcome:
    def test_inserted_descriptor(self):
        assert WriteOutcome.inserted(7).to_dict() == {
            "acknowledged": True,
            "matchedCount": 0,
            "modifiedCount": 0,
            "deletedCount": 0,
            "insertedId": "7",
        }

    def test_every_error_code_has_a_status(self):
        codes = [value for key, value in vars(ErrorCodes).items() if key.isupper()]
        assert set(codes) <= set(ERROR_STATUS)

    def test_responses(self):
        assert outcome_response(service_ok(WriteOutcome.deleted(1))).data["deletedCount"] == 1
        assert error_response(service_err(ErrorCodes.ALREADY_SOLD, "sold")).status_code == 409
        assert error_response(service_err(ErrorCodes.UPSTREAM_FAILURE, "down")).status_code == 502


@pytest.mark.django_db
class TestAtomicSequence:
    def test_commits_all_steps(self):
        with atomic_sequence("create_categories") as seq:
            Category.objects.create(id="a", name="A")
            seq.step("first", inserted_id="a")
            Category.objects.create(id="b", name="B")
            seq.step("second", inserted_id="b")

        assert [name for name, _ in seq.steps] == ["first", "second"]
        assert Category.objects.count() == 2

    def test_integrity_error_rolls_back_everything(self):
        Category.objects.create(id="a", name="A")

        with pytest.raises(TransactionError):
            with atomic_sequence("duplicate_category") as seq:
                Category.objects.create(id="b", name="B")
                seq.step("first")
                Category.objects.create(id="c", name="A")

        assert not Category.objects.filter(id="b").exists()

    def test_other_errors_propagate(self):
        with pytest.raises(ValueError):
            with atomic_sequence("boom"):
                Category.objects.create(id="z", name="Z")
                raise ValueError("boom")

        assert not Category.objects.filter(id="z").exists()

