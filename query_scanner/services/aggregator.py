import logging
from collections.abc import Iterable, Mapping
from types import MappingProxyType

from query_scanner.models.call_site import CallSite
from query_scanner.models.finding import FileFindings
from query_scanner.models.report import RankedCall

logger = logging.getLogger(__name__)


class CallSiteAggregator:
    """Cross-file map from canonical call name to the call sites with that name.

    Buckets are created on first use and keep discovery order, so merging
    files in processing order yields the same "first N examples" as a
    sequential run. An aggregator is owned by whoever merges into it; scans
    never touch it directly.
    """

    def __init__(self) -> None:
        self._buckets: dict[str, list[CallSite]] = {}

    def __len__(self) -> int:
        return len(self._buckets)

    def __contains__(self, name: object) -> bool:
        return name in self._buckets

    @property
    def buckets(self) -> Mapping[str, list[CallSite]]:
        return MappingProxyType(self._buckets)

    @property
    def total_calls(self) -> int:
        return sum(len(bucket) for bucket in self._buckets.values())

    def add(self, call_site: CallSite) -> None:
        self._buckets.setdefault(call_site.name, []).append(call_site)

    def merge(self, call_sites: Iterable[CallSite]) -> None:
        for call_site in call_sites:
            self.add(call_site)

    def merge_findings(self, findings: FileFindings) -> None:
        self.merge(findings.call_sites)

    def combine(self, other: "CallSiteAggregator") -> None:
        """Append every bucket of ``other`` after this aggregator's contents."""

        for bucket in other._buckets.values():
            self.merge(bucket)

    def ranking(self, limit: int = 20, examples: int = 5) -> list[RankedCall]:
        """Rank call names by how often they occur across all merged files.

        Ties are broken by canonical name so the ranking is reproducible.

        Args:
            limit: Number of names to keep.
            examples: Number of call sites listed per name.

        Returns:
            Ranked entries with total count, first call sites and the number
            of call sites not listed.
        """

        ordered = sorted(self._buckets.items(), key=lambda item: (-len(item[1]), item[0]))
        logger.debug("Ranking %d call names", len(ordered))
        return [
            RankedCall(
                name=name,
                total=len(bucket),
                examples=bucket[:examples],
                remaining=max(len(bucket) - examples, 0),
            )
            for name, bucket in ordered[:limit]
        ]
