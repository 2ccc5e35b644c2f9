import pytest
from protean.exceptions import ExpectedVersionError, ObjectNotFoundError, ValidationError

from shared.errors import InvalidState, StorageError
from shared.persistence import degrade_on_storage_error, find_or_none, storage_guard


class _Repository:
    def __init__(self, result=None, error=None):
        self.result = result
        self.error = error

    def get(self, identifier):
        if self.error is not None:
            raise self.error
        return self.result


class TestStorageGuard:
    def test_driver_errors_become_storage_errors(self):
        with pytest.raises(StorageError) as exc:
            with storage_guard("OrderRepository.get"):
                raise OSError("disk full")
        assert exc.value.operation == "OrderRepository.get"
        assert isinstance(exc.value.cause, OSError)

    def test_domain_errors_pass_through(self):
        with pytest.raises(ValidationError):
            with storage_guard("OrderRepository.add"):
                raise ValidationError({"status": ["invalid"]})

    def test_version_conflict_becomes_invalid_state(self):
        with pytest.raises(InvalidState) as exc:
            with storage_guard("WalletRepository.add"):
                raise ExpectedVersionError("expected version 3, found 4")
        assert exc.value.field == "_version"
        assert exc.value.context["operation"] == "WalletRepository.add"


class TestFindOrNone:
    def test_found(self):
        assert find_or_none(_Repository(result="order"), "ord-001") == "order"

    def test_missing_is_none(self):
        assert find_or_none(_Repository(error=ObjectNotFoundError("missing")), "ord-001") is None

    def test_storage_failure_raises(self):
        with pytest.raises(StorageError):
            find_or_none(_Repository(error=ConnectionError("reset")), "ord-001")


class TestDegradeOnStorageError:
    def test_fallback_is_returned(self):
        @degrade_on_storage_error(list)
        def orders():
            raise StorageError("filter", TimeoutError("timed out"))

        assert orders() == []

    def test_other_errors_propagate(self):
        @degrade_on_storage_error(list)
        def orders():
            raise KeyError("bug")

        with pytest.raises(KeyError):
            orders()

    def test_result_passes_through(self):
        @degrade_on_storage_error(list)
        def orders():
            return ["ord-001"]

        assert orders() == ["ord-001"]
