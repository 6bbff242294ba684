"""Unit tests for OperationResult and OperationStatus."""

import pytest
from infrastructure.operations.result import OperationResult
from infrastructure.operations.status import OperationStatus


@pytest.mark.unit
class TestOperationStatus:
    def test_operation_status_success(self):
        assert OperationStatus.SUCCESS.value == "success"

    def test_operation_status_transient_error(self):
        assert OperationStatus.TRANSIENT_ERROR.value == "transient_error"

    def test_operation_status_permanent_error(self):
        assert OperationStatus.PERMANENT_ERROR.value == "permanent_error"

    def test_operation_status_unauthorized(self):
        assert OperationStatus.UNAUTHORIZED.value == "unauthorized"

    def test_operation_status_not_found(self):
        assert OperationStatus.NOT_FOUND.value == "not_found"


@pytest.mark.unit
class TestOperationResultFactories:
    def test_success_factory_minimal(self):
        result = OperationResult.success()
        assert result.status == OperationStatus.SUCCESS

    def test_success_factory_with_data(self):
        data = {"MessageId": "m-1"}
        result = OperationResult.success(data=data, message="message sent")
        assert result.status == OperationStatus.SUCCESS
        assert result.data == data

    def test_error_factory_minimal(self):
        result = OperationResult.error(OperationStatus.PERMANENT_ERROR, "Not found")
        assert result.status == OperationStatus.PERMANENT_ERROR

    def test_error_factory_with_error_code(self):
        result = OperationResult.error(
            OperationStatus.PERMANENT_ERROR, "queue missing", error_code="QueueDoesNotExist"
        )
        assert result.error_code == "QueueDoesNotExist"

    def test_transient_error_factory(self):
        result = OperationResult.transient_error("Timeout", error_code="TIMEOUT")
        assert result.status == OperationStatus.TRANSIENT_ERROR
        assert result.message == "Timeout"

    def test_permanent_error_factory(self):
        result = OperationResult.permanent_error(
            "Invalid input", error_code="VALIDATION_ERROR"
        )
        assert result.status == OperationStatus.PERMANENT_ERROR


@pytest.mark.unit
class TestOperationResultEdgeCases:
    def test_operation_result_with_sqs_response(self):
        data = {"Messages": [{"MessageId": "m-1", "Body": "{}"}]}
        result = OperationResult.success(data=data)
        assert result.data["Messages"][0]["MessageId"] == "m-1"

    def test_operation_result_with_empty_data(self):
        result = OperationResult.success(data={})
        assert result.data == {}


@pytest.mark.unit
class TestOperationResultStatus:
    def test_is_success_only_for_success(self):
        assert OperationResult.success().is_success is True
        assert OperationResult.transient_error("slow").is_success is False
        assert OperationResult.permanent_error("bad").is_success is False

    def test_transient_error_keeps_retry_after(self):
        result = OperationResult.transient_error(
            "throttled", error_code="Throttling", retry_after=3
        )

        assert result.retry_after == 3
        assert result.error_code == "Throttling"
