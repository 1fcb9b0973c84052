# default outcome resolver - maps the rule's value onto the configured bands

from surge_rule.errors import ConfigurationError
from surge_rule.schemas import RuleConfig, RuleResult


def determine_outcome(value: float, rule_config: RuleConfig, rule_result: RuleResult) -> RuleResult:
    """
    pick the band that contains value and stamp it on the result
    
    a band matches when lower_limit <= value < upper_limit; a missing limit is
    open on that side. bands are checked in configured order, first match wins.
    
    args:
        value: the rule's independent variable (0/1 for the surge rule)
        rule_config: config carrying the bands
        rule_result: partial result to fill
        
    returns:
        a new RuleResult with sub_rule_ref, reason and indpdnt_varbl set
    """
    if value is None:
        raise ConfigurationError("value provided undefined, so cannot determine rule outcome")
    
    bands = rule_config.config.bands if rule_config.config else None
    for band in bands or []:
        if band.lower_limit is not None and value < band.lower_limit:
            continue
        if band.upper_limit is not None and value >= band.upper_limit:
            continue
        return rule_result.model_copy(update={
            'sub_rule_ref': band.sub_rule_ref,
            'reason': band.reason,
            'indpdnt_varbl': value,
        })
    
    raise ConfigurationError(f"no band configured for value {value}")
