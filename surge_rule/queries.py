# typed window-count queries against the transaction graph
# every value (account, window bounds, message type) goes in as a bound parameter

from dataclasses import dataclass
from datetime import datetime, timedelta

from sqlalchemy import select, func, and_
from sqlalchemy.sql import Select

from db.models import TransactionRelationship

# payment status report - the message type whose surge we track
PACS002_TX_TYPE = "pacs.002.001.12"


@dataclass(frozen=True)
class WindowCountQuery:
    """
    count pacs.002 edges leaving an account inside a lookback window
    
    matches edges where reference_time - cre_dt_tm <= range_ms; when
    include_future is False the window is also capped at reference_time
    so records dated after the event are not counted
    """
    
    creditor_account_id: str
    reference_time: datetime
    range_ms: float
    tx_type: str = PACS002_TX_TYPE
    include_future: bool = True
    
    @property
    def window_start(self) -> datetime:
        # now - t <= range  <=>  t >= now - range
        # a range reaching back past year 1 (or infinite) is an unbounded lookback
        try:
            return self.reference_time - timedelta(milliseconds=self.range_ms)
        except OverflowError:
            return datetime.min.replace(tzinfo=self.reference_time.tzinfo)
    
    def to_statement(self) -> Select:
        """render as SELECT count(*) ... with bound parameters"""
        filters = [
            TransactionRelationship.source_account_id == self.creditor_account_id,
            TransactionRelationship.tx_tp == self.tx_type,
            TransactionRelationship.cre_dt_tm >= self.window_start,
        ]
        if not self.include_future:
            filters.append(TransactionRelationship.cre_dt_tm <= self.reference_time)
        
        return select(func.count(TransactionRelationship.id).label('length')).where(and_(*filters))


def baseline_count_query(creditor_account_id: str, reference_time: datetime, baseline_range: float) -> WindowCountQuery:
    """historical activity over the (wider) baseline window"""
    return WindowCountQuery(
        creditor_account_id=creditor_account_id,
        reference_time=reference_time,
        range_ms=baseline_range,
    )


def current_count_query(creditor_account_id: str, reference_time: datetime, max_range: float) -> WindowCountQuery:
    """recent activity, never counting records dated after the event"""
    return WindowCountQuery(
        creditor_account_id=creditor_account_id,
        reference_time=reference_time,
        range_ms=max_range,
        include_future=False,
    )
