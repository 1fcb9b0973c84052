# unit tests for the rule invocation wrapper

import pytest

from conftest import FakeQueryExecutor, RecordingLogger, make_config, make_request
from surge_rule.errors import DataAvailabilityError
from surge_rule.processor import execute_rule

pytestmark = pytest.mark.asyncio


async def test_surge_result_carries_identity_and_timing():
    result = await execute_rule(
        make_request(),
        make_config(),
        FakeQueryExecutor([50], [25]),
        logger_service=RecordingLogger(),
    )
    
    assert result.id == "903@1.0.0"
    assert result.cfg == "1.0.0"
    assert result.sub_rule_ref == ".02"
    assert result.reason == "Surge in creditor activity detected"
    assert result.indpdnt_varbl == 1
    assert result.prcg_tm is not None and result.prcg_tm >= 0


async def test_exit_condition_result_is_timed_too():
    result = await execute_rule(
        make_request(tx_sts="RJCT"),
        make_config(),
        FakeQueryExecutor(),
        logger_service=RecordingLogger(),
    )
    
    assert result.sub_rule_ref == ".x00"
    assert result.prcg_tm is not None


async def test_default_logger_is_used_when_none_given():
    result = await execute_rule(make_request(), make_config(), FakeQueryExecutor([50], [15]))
    
    assert result.sub_rule_ref == ".01"


async def test_errors_propagate():
    with pytest.raises(DataAvailabilityError):
        await execute_rule(make_request(), make_config(), FakeQueryExecutor([]), logger_service=RecordingLogger())


async def test_custom_resolver():
    seen = []
    
    def resolver(value, rule_config, rule_result):
        seen.append(value)
        return rule_result.model_copy(update={'reason': "custom"})
    
    result = await execute_rule(
        make_request(),
        make_config(),
        FakeQueryExecutor([50], [25]),
        logger_service=RecordingLogger(),
        determine_outcome=resolver,
    )
    
    assert seen == [1]
    assert result.reason == "custom"
    assert result.sub_rule_ref == ".err"
