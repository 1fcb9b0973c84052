"""
Pydantic models for the rule's inputs and outputs.

Attribute names are snake_case; the wire names (ISO 20022 / rule-config camelCase)
are kept as aliases so payloads from the orchestrator validate as-is.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from surge_rule.config import settings


class WireModel(BaseModel):
    """base model: accept both wire aliases and attribute names"""
    
    model_config = ConfigDict(populate_by_name=True)


# ---------------------------------------------------------------------------
# transaction event (pacs.002 payment status report)
# ---------------------------------------------------------------------------
class GroupHeader(WireModel):
    msg_id: str = Field(..., alias="MsgId", description="message identifier, used as log correlation id")
    cre_dt_tm: datetime = Field(..., alias="CreDtTm", description="group-level creation timestamp")


class TransactionInfoAndStatus(WireModel):
    tx_sts: str = Field(..., alias="TxSts", description="transaction status code, e.g. ACCC or RJCT")
    orgnl_end_to_end_id: Optional[str] = Field(None, alias="OrgnlEndToEndId")


class PaymentStatus(WireModel):
    grp_hdr: GroupHeader = Field(..., alias="GrpHdr")
    tx_inf_and_sts: TransactionInfoAndStatus = Field(..., alias="TxInfAndSts")


class TransactionEvent(WireModel):
    fi_to_fi_pmt_sts: PaymentStatus = Field(..., alias="FIToFIPmtSts")
    tx_tp: str = Field("pacs.002.001.12", alias="TxTp")


class DataCache(WireModel):
    """identifiers resolved upstream and attached to the event"""
    
    cdtr_acct_id: Optional[str] = Field(None, alias="cdtrAcctId")
    dbtr_acct_id: Optional[str] = Field(None, alias="dbtrAcctId")
    cdtr_id: Optional[str] = Field(None, alias="cdtrId")
    dbtr_id: Optional[str] = Field(None, alias="dbtrId")


class RuleRequest(WireModel):
    transaction: TransactionEvent
    data_cache: Optional[DataCache] = Field(None, alias="DataCache")
    
    @property
    def msg_id(self) -> str:
        return self.transaction.fi_to_fi_pmt_sts.grp_hdr.msg_id


# ---------------------------------------------------------------------------
# rule configuration
# ---------------------------------------------------------------------------
class OutcomeResult(WireModel):
    """a predefined outcome (exit condition): reason + sub-rule reference"""
    
    sub_rule_ref: str = Field(..., alias="subRuleRef")
    reason: str


class Band(OutcomeResult):
    """outcome selected when lower_limit <= value < upper_limit (missing limit = open)"""
    
    lower_limit: Optional[float] = Field(None, alias="lowerLimit")
    upper_limit: Optional[float] = Field(None, alias="upperLimit")


class RuleParameters(WireModel):
    # optional on the wire so the rule can report exactly what is missing
    max_query_range: Optional[float] = Field(None, alias="maxQueryRange", description="current window, ms")
    baseline_query_range: Optional[float] = Field(None, alias="baselineQueryRange", description="baseline window, ms")
    surge_threshold_multiplier: Optional[float] = Field(None, alias="surgeThresholdMultiplier")
    
    model_config = ConfigDict(populate_by_name=True, extra="allow")


class RuleConfigBody(WireModel):
    bands: Optional[List[Band]] = None
    exit_conditions: Optional[List[OutcomeResult]] = Field(None, alias="exitConditions")
    parameters: Optional[RuleParameters] = None


class RuleConfig(WireModel):
    id: Optional[str] = None
    cfg: Optional[str] = None
    desc: Optional[str] = None
    config: Optional[RuleConfigBody] = None


# ---------------------------------------------------------------------------
# rule result
# ---------------------------------------------------------------------------
class RuleResult(WireModel):
    """accumulator owned by the caller; the rule fills reason + sub_rule_ref"""
    
    id: str = ""
    cfg: str = ""
    sub_rule_ref: str = Field("", alias="subRuleRef")
    reason: str = ""
    indpdnt_varbl: Optional[float] = Field(None, alias="indpdntVarbl")
    prcg_tm: Optional[int] = Field(None, alias="prcgTm", description="processing time in nanoseconds")


# ---------------------------------------------------------------------------
# resolved query windows
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class SurgeWindow:
    """
    query windows and threshold with defaults applied
    
    max_range and baseline_range share the unit of the event timestamp delta (ms)
    """
    
    max_range: float
    baseline_range: float
    multiplier: float
    
    @classmethod
    def from_parameters(cls, parameters: RuleParameters) -> "SurgeWindow":
        """
        apply defaults for the optional parameters
        
        an absent (None) or zero baseline_query_range becomes
        max_query_range * default_baseline_multiplier; an absent or zero
        surge_threshold_multiplier becomes default_surge_threshold_multiplier.
        max_query_range must already be validated as present and non-zero.
        """
        max_range = parameters.max_query_range
        
        baseline_range = parameters.baseline_query_range
        if baseline_range is None or baseline_range == 0:
            baseline_range = max_range * settings.default_baseline_multiplier
        
        multiplier = parameters.surge_threshold_multiplier
        if multiplier is None or multiplier == 0:
            multiplier = settings.default_surge_threshold_multiplier
        
        return cls(max_range=max_range, baseline_range=baseline_range, multiplier=multiplier)
    
    @property
    def scaling_factor(self) -> float:
        """how many current-sized windows fit in the baseline window"""
        return self.baseline_range / self.max_range
