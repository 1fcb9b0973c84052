# shared fakes for the rule's collaborators

import pytest

from surge_rule.schemas import RuleConfig, RuleRequest, RuleResult


class FakeQueryExecutor:
    """returns scripted responses in order and remembers every query it saw"""
    
    def __init__(self, *responses):
        self.responses = list(responses)
        self.queries = []
    
    async def fetch_all(self, query):
        self.queries.append(query)
        return self.responses.pop(0)


class RecordingLogger:
    def __init__(self):
        self.entries = []
    
    def trace(self, message, context=None, correlation_id=None):
        self.entries.append((message, context, correlation_id))


def make_request(tx_sts="ACCC", cdtr_acct_id="cdtr-acct-1", dbtr_acct_id="dbtr-acct-1",
                 cre_dt_tm="2024-03-01T12:00:00.000Z"):
    data_cache = {}
    if cdtr_acct_id is not None:
        data_cache["cdtrAcctId"] = cdtr_acct_id
    if dbtr_acct_id is not None:
        data_cache["dbtrAcctId"] = dbtr_acct_id
    return RuleRequest.model_validate({
        "transaction": {
            "TxTp": "pacs.002.001.12",
            "FIToFIPmtSts": {
                "GrpHdr": {"MsgId": "msg-001", "CreDtTm": cre_dt_tm},
                "TxInfAndSts": {"TxSts": tx_sts},
            },
        },
        "DataCache": data_cache,
    })


def make_config(parameters=None, exit_conditions=None, bands=None, rule_id="903@1.0.0"):
    if parameters is None:
        parameters = {"maxQueryRange": 3600}
    if exit_conditions is None:
        exit_conditions = [{"subRuleRef": ".x00", "reason": "Unsuccessful"}]
    if bands is None:
        bands = [
            {"subRuleRef": ".01", "upperLimit": 1, "reason": "No surge in creditor activity"},
            {"subRuleRef": ".02", "lowerLimit": 1, "reason": "Surge in creditor activity detected"},
        ]
    return RuleConfig.model_validate({
        "id": rule_id,
        "cfg": "1.0.0",
        "config": {"bands": bands, "exitConditions": exit_conditions, "parameters": parameters},
    })


@pytest.fixture
def logger_service():
    return RecordingLogger()


@pytest.fixture
def rule_res():
    return RuleResult(id="903@1.0.0", cfg="1.0.0", sub_rule_ref=".err", reason="")
