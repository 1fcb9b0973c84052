# unit tests for the default band resolver

import pytest

from conftest import make_config
from surge_rule.errors import ConfigurationError
from surge_rule.outcome import determine_outcome
from surge_rule.schemas import RuleResult


def test_no_surge_band():
    result = determine_outcome(0, make_config(), RuleResult(id="903@1.0.0", cfg="1.0.0"))
    
    assert result.sub_rule_ref == ".01"
    assert result.reason == "No surge in creditor activity"
    assert result.indpdnt_varbl == 0
    # caller's fields survive
    assert result.id == "903@1.0.0"


def test_surge_band():
    result = determine_outcome(1, make_config(), RuleResult())
    
    assert result.sub_rule_ref == ".02"
    assert result.indpdnt_varbl == 1


def test_upper_limit_is_exclusive():
    bands = [
        {"subRuleRef": ".01", "lowerLimit": 0, "upperLimit": 1, "reason": "low"},
        {"subRuleRef": ".02", "lowerLimit": 1, "upperLimit": 2, "reason": "high"},
    ]
    
    assert determine_outcome(1, make_config(bands=bands), RuleResult()).sub_rule_ref == ".02"


def test_partial_result_not_mutated():
    original = RuleResult(sub_rule_ref=".err")
    
    determine_outcome(1, make_config(), original)
    
    assert original.sub_rule_ref == ".err"


def test_undefined_value_rejected():
    with pytest.raises(ConfigurationError, match="undefined"):
        determine_outcome(None, make_config(), RuleResult())


def test_no_matching_band_rejected():
    bands = [{"subRuleRef": ".01", "lowerLimit": 5, "reason": "only big values"}]
    
    with pytest.raises(ConfigurationError, match="no band"):
        determine_outcome(1, make_config(bands=bands), RuleResult())
