"""
Creditor surge rule.

Flags an accepted pacs.002 when the creditor account's recent confirmation
count exceeds a multiple of its historical rate. The historical count is taken
over a wider baseline window and scaled down to the size of the current window
before the two are compared.
"""

import math
from numbers import Real
from typing import Any, Callable

from surge_rule.errors import (
    ConfigurationError,
    DataAvailabilityError,
    DataIntegrityError,
    QueryResultTypeError,
)
from surge_rule.executor import QueryExecutor, unwrap
from surge_rule.logger import LoggerService
from surge_rule.queries import baseline_count_query, current_count_query
from surge_rule.schemas import RuleConfig, RuleRequest, RuleResult, SurgeWindow

# reserved sub-rule reference for the "transaction was not successful" exit
UNSUCCESSFUL_TRANSACTION_REF = ".x00"

# status code of an accepted (settled) transaction
ACCEPTED_STATUS = "ACCC"

OutcomeResolver = Callable[[int, RuleConfig, RuleResult], RuleResult]


def _is_number(value: Any) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool)


def normalize_baseline(raw_count: float, window: SurgeWindow) -> float:
    """scale a baseline-window count down to one current-window's worth"""
    return raw_count / window.scaling_factor


def is_surge(current_count: float, baseline_count: float, multiplier: float) -> bool:
    """strictly more than multiplier x baseline; equality is normal activity"""
    return current_count > baseline_count * multiplier


def _validate(req: RuleRequest, rule_config: RuleConfig):
    # guard clauses, checked in this order, before anything touches the store
    config = rule_config.config if rule_config else None
    if config is None or not config.bands:
        raise ConfigurationError("Invalid config provided - bands not provided or empty")
    if config.exit_conditions is None:
        raise ConfigurationError("Invalid config provided - exitConditions not provided")
    if config.parameters is None:
        raise ConfigurationError("Invalid config provided - parameters not provided")
    if not config.parameters.max_query_range:
        raise ConfigurationError("Invalid config provided - maxQueryRange parameter not provided")
    parameters = config.parameters
    if not math.isfinite(parameters.max_query_range) or parameters.max_query_range < 0:
        raise ConfigurationError("Invalid config provided - maxQueryRange must be a positive finite number")
    if parameters.baseline_query_range is not None and (
        not math.isfinite(parameters.baseline_query_range) or parameters.baseline_query_range < 0
    ):
        raise ConfigurationError("Invalid config provided - baselineQueryRange must be a positive finite number")
    if parameters.surge_threshold_multiplier is not None and not math.isfinite(parameters.surge_threshold_multiplier):
        raise ConfigurationError("Invalid config provided - surgeThresholdMultiplier must be a finite number")
    # dbtrAcctId is not used by the queries but upstream guarantees it; a missing one means a broken cache
    if req.data_cache is None or not req.data_cache.dbtr_acct_id:
        raise DataIntegrityError("Data Cache does not have required dbtrAcctId")


async def handle_transaction(
    req: RuleRequest,
    determine_outcome: OutcomeResolver,
    rule_res: RuleResult,
    logger_service: LoggerService,
    rule_config: RuleConfig,
    query_executor: QueryExecutor,
) -> RuleResult:
    """
    evaluate the surge rule for one transaction
    
    args:
        req: the pacs.002 event plus its data cache
        determine_outcome: maps the 0/1 surge score to the final result via bands
        rule_res: partial result owned by the caller
        logger_service: trace logger
        rule_config: bands, exit conditions and window parameters
        query_executor: runs the two window-count queries
        
    returns:
        the early-exit result for unsuccessful transactions, otherwise whatever
        determine_outcome returns for the surge score
        
    raises:
        ConfigurationError, DataIntegrityError, DataAvailabilityError,
        QueryResultTypeError - nothing is retried here
    """
    rule_id = rule_config.id if rule_config is not None and rule_config.id else "<unresolved>"
    context = f"Rule-{rule_id} handleTransaction()"
    msg_id = req.msg_id
    
    logger_service.trace("Start - handle transaction", context, msg_id)
    
    _validate(req, rule_config)
    config = rule_config.config
    
    # --- early exit: only accepted transactions are analysed ---
    logger_service.trace("Step 1 - Early exit conditions", context, msg_id)
    
    unsuccessful = next(
        (c for c in config.exit_conditions if c.sub_rule_ref == UNSUCCESSFUL_TRANSACTION_REF),
        None,
    )
    if req.transaction.fi_to_fi_pmt_sts.tx_inf_and_sts.tx_sts != ACCEPTED_STATUS:
        if unsuccessful is None:
            raise DataIntegrityError("Unsuccessful transaction and no exit condition in config")
        return rule_res.model_copy(update={
            'reason': unsuccessful.reason,
            'sub_rule_ref': unsuccessful.sub_rule_ref,
        })
    
    now = req.transaction.fi_to_fi_pmt_sts.grp_hdr.cre_dt_tm
    creditor_account_id = req.data_cache.cdtr_acct_id
    if not creditor_account_id:
        raise DataIntegrityError("Data Cache does not have required cdtrAcctId")
    window = SurgeWindow.from_parameters(config.parameters)
    
    # --- baseline: wide lookback, scaled to one current window ---
    logger_service.trace("Step 2 - Baseline query setup for creditor", context, msg_id)
    
    baseline_rows = await query_executor.fetch_all(
        baseline_count_query(creditor_account_id, now, window.baseline_range)
    )
    if not isinstance(baseline_rows, (list, tuple)) or len(baseline_rows) == 0:
        raise DataAvailabilityError(
            "Data error: irretrievable baseline transaction history or no transactions found."
        )
    if not _is_number(baseline_rows[0]):
        raise QueryResultTypeError("Data error: invalid baseline count type or null value.")
    
    baseline_count = normalize_baseline(baseline_rows[0], window)
    if not math.isfinite(baseline_count):
        raise QueryResultTypeError("Data error: invalid baseline count type or null value.")
    
    # --- current window ---
    logger_service.trace("Step 3 - Query for current transactions for creditor", context, msg_id)
    
    current_rows = await query_executor.fetch_all(
        current_count_query(creditor_account_id, now, window.max_range)
    )
    count = unwrap(current_rows)
    if count is None:
        raise DataAvailabilityError("Data error: irretrievable transaction history")
    if not _is_number(count):
        raise QueryResultTypeError("Data error: query result type mismatch - expected a number")
    
    surge = is_surge(count, baseline_count, window.multiplier)
    
    logger_service.trace("End - handle transaction", context, msg_id)
    
    return determine_outcome(1 if surge else 0, rule_config, rule_res)
