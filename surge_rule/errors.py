# error taxonomy for rule evaluation
# every error aborts the single invocation; the caller decides retry/dead-letter


class RuleEvaluationError(Exception):
    """base class for everything the rule raises instead of a verdict"""


class ConfigurationError(RuleEvaluationError):
    """rule config is missing something the rule needs (operator must fix it)"""


class DataIntegrityError(RuleEvaluationError):
    """the event or its data cache breaks an invariant the rule relies on"""


class DataAvailabilityError(RuleEvaluationError):
    """history could not be retrieved (empty/null result, timeout, driver error)"""


class QueryResultTypeError(RuleEvaluationError, TypeError):
    """query returned something that is not a number - schema drift"""
