# rule invocation wrapper
# seeds the partial result, runs the surge rule, stamps the processing time

import time
from typing import Optional

from surge_rule.executor import QueryExecutor
from surge_rule.logger import LoggerService
from surge_rule.outcome import determine_outcome as default_determine_outcome
from surge_rule.rule import OutcomeResolver, handle_transaction
from surge_rule.schemas import RuleConfig, RuleRequest, RuleResult

# placeholder sub-rule reference until the rule decides
ERROR_SUB_RULE_REF = ".err"


async def execute_rule(
    request: RuleRequest,
    rule_config: RuleConfig,
    query_executor: QueryExecutor,
    logger_service: Optional[LoggerService] = None,
    determine_outcome: OutcomeResolver = default_determine_outcome,
) -> RuleResult:
    """
    run the rule for one request with a fresh result object
    
    errors from the rule propagate unchanged; the caller owns retry policy
    """
    logger_service = logger_service or LoggerService()
    started = time.perf_counter_ns()
    
    rule_res = RuleResult(
        id=rule_config.id or "",
        cfg=rule_config.cfg or "",
        sub_rule_ref=ERROR_SUB_RULE_REF,
        reason="",
    )
    
    result = await handle_transaction(
        request,
        determine_outcome,
        rule_res,
        logger_service,
        rule_config,
        query_executor,
    )
    
    return result.model_copy(update={'prcg_tm': time.perf_counter_ns() - started})
