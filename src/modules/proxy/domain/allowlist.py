"""Host allowlist for the proxy gateway."""

from collections.abc import Iterable


class DomainAllowlist:
    """Fixed set of trusted domains.

    A host is allowed when it equals a trusted domain or is a subdomain of one.
    Suffix matching is anchored on a dot, so ``evilstudyuk.site`` does not
    match ``studyuk.site``.
    """

    def __init__(self, domains: Iterable[str]):
        normalized = []
        for domain in domains:
            value = domain.strip().lower().strip(".")
            if value and value not in normalized:
                normalized.append(value)
        self._domains: tuple[str, ...] = tuple(normalized)

    @property
    def domains(self) -> tuple[str, ...]:
        return self._domains

    def is_allowed(self, host: str | None) -> bool:
        if not host:
            return False
        host = host.lower().rstrip(".")
        return any(
            host == domain or host.endswith("." + domain) for domain in self._domains
        )

    def __len__(self) -> int:
        return len(self._domains)
