"""DNS TXT lookups for domain verification."""
import re
from typing import Dict, List, NamedTuple, Optional, Protocol, Sequence

import dns.exception
import dns.resolver

from wellpulse.core.errors import TransientError
from wellpulse.core.logging_config import get_logger

logger = get_logger(__name__)

_WRAPPING_QUOTES = re.compile(r'^"|"$')


class TxtLookupError(TransientError):
    """A resolver failure, kept for diagnostics rather than raised to clients."""

    def __init__(self, name: str, code: str, message: str):
        super().__init__(message, code=code)
        self.name = name

    def as_diagnostic(self) -> Dict[str, str]:
        return {"name": self.name, "code": self.code, "message": self.message}


class TxtResolver(Protocol):
    def resolve_txt(self, fqdn: str) -> List[List[str]]:
        """Return TXT records at ``fqdn``, each as its list of string chunks."""
        ...


class PublicDnsResolver:
    """Queries fixed public nameservers, skipping the host's (possibly stale) cache."""

    def __init__(self, nameservers: Sequence[str], timeout: float = 5.0):
        self.nameservers = list(nameservers)
        self.timeout = timeout

    def _resolver(self) -> dns.resolver.Resolver:
        resolver = dns.resolver.Resolver(configure=False)
        resolver.nameservers = self.nameservers
        resolver.timeout = self.timeout
        resolver.lifetime = self.timeout
        return resolver

    def resolve_txt(self, fqdn: str) -> List[List[str]]:
        try:
            answer = self._resolver().resolve(fqdn, "TXT")
        except dns.resolver.NXDOMAIN as e:
            raise TxtLookupError("NXDOMAIN", "ENOTFOUND", str(e))
        except dns.resolver.NoAnswer as e:
            raise TxtLookupError("NoAnswer", "ENODATA", str(e))
        except dns.resolver.NoNameservers as e:
            raise TxtLookupError("NoNameservers", "ESERVFAIL", str(e))
        except dns.exception.Timeout as e:
            raise TxtLookupError("Timeout", "ETIMEOUT", str(e))
        except dns.exception.DNSException as e:
            raise TxtLookupError(type(e).__name__, "EDNS", str(e))

        return [
            [chunk.decode("utf-8", errors="replace") for chunk in rdata.strings]
            for rdata in answer
        ]


def normalize_txt(records: List[List[str]]) -> List[str]:
    """Join chunked TXT strings, trim whitespace and strip wrapping quotes."""
    return [_WRAPPING_QUOTES.sub("", "".join(parts).strip()) for parts in records]


def token_matches(token: str, values: List[str]) -> bool:
    """True when any TXT value is the token or contains it.

    Some DNS providers prepend or append their own text to the value.
    """
    return any(value == token or token in value for value in values)


class TxtLookup(NamedTuple):
    raw: List[List[str]]
    normalized: List[str]
    error: Optional[Dict[str, str]]


def lookup_txt(resolver: TxtResolver, fqdn: str) -> TxtLookup:
    """Resolve and normalize, capturing resolver errors instead of raising."""
    try:
        raw = resolver.resolve_txt(fqdn)
    except TxtLookupError as e:
        logger.info("txt_lookup_failed", fqdn=fqdn, error_name=e.name, error_code=e.code)
        return TxtLookup(raw=[], normalized=[], error=e.as_diagnostic())
    return TxtLookup(raw=raw, normalized=normalize_txt(raw), error=None)
