"""
Exceptions raised by the failover policy package.

Reaching a health check's failure threshold is not an error (it is a state
transition); these cover misconfigured policies and queries the resolver has
no authority to answer.
"""


class FailoverError(Exception):
    """Base class for failover policy errors."""


class PolicyError(FailoverError, ValueError):
    """A FailoverPolicy or HealthRegistry was configured inconsistently."""


class NXDomainError(FailoverError, LookupError):
    """
    The query name is not served by any configured zone or record.

    Equivalent of a DNS NXDOMAIN response: the name is outside this
    resolver's authority.
    """

    def __init__(self, query_name: str):
        super().__init__(f"NXDOMAIN: {query_name}")
        self.query_name = query_name


class UnknownHealthCheckError(FailoverError, KeyError):
    """A health check name was looked up that was never registered."""

    def __init__(self, name: str):
        super().__init__(name)
        self.name = name

    def __str__(self) -> str:
        return f"health check not registered: {self.name}"
