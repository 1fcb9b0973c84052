# async sqlalchemy models for the pseudonyms store
# accounts are nodes, every payment message between two accounts is an edge

from sqlalchemy.orm import declarative_base
from sqlalchemy import Column, Integer, String, TIMESTAMP, ForeignKey, Index
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker

from surge_rule.config import settings

Base = declarative_base()

# account model - a node in the transaction graph
class Account(Base):
    __tablename__ = 'accounts'
    
    account_id = Column(String(100), primary_key=True)  # resolved account identifier

# transaction relationship - one edge per payment message between two accounts
class TransactionRelationship(Base):
    __tablename__ = 'transaction_relationships'
    
    id = Column(Integer, primary_key=True, autoincrement=True)
    source_account_id = Column(String(100), ForeignKey('accounts.account_id'), nullable=False)
    destination_account_id = Column(String(100), ForeignKey('accounts.account_id'))
    tx_tp = Column(String(30), nullable=False)  # message type, e.g. pacs.002.001.12
    msg_id = Column(String(100))
    end_to_end_id = Column(String(100))
    cre_dt_tm = Column(TIMESTAMP(timezone=True), nullable=False)  # message creation time
    tx_sts = Column(String(4))  # ACCC, RJCT, ...
    
    __table_args__ = (
        # every window count filters on exactly these three columns
        Index('idx_txrel_source_type_time', 'source_account_id', 'tx_tp', 'cre_dt_tm'),
    )

# database connection helpers
class Database:
    """manages async database connections"""
    
    def __init__(self, database_url: str = None):
        self.database_url = database_url or settings.database_url
        # create async engine with connection pooling
        self.engine = create_async_engine(
            self.database_url,
            echo=False,  # set to True to see all sql queries (useful for debugging)
            pool_size=settings.database_pool_size,
            max_overflow=settings.database_max_overflow
        )
        # session factory for creating async sessions
        self.async_session = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False
        )
    
    async def create_tables(self):
        """create all tables (usually done via migration, but useful for testing)"""
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
    
    async def close(self):
        """close database connections"""
        await self.engine.dispose()

# global database instance
# created on first use so importing the models never builds an engine
database = None

def get_database() -> Database:
    """get or create the global database instance"""
    global database
    if database is None:
        database = Database()
    return database
